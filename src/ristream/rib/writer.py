"""Format commands as ASCII RIB.

:func:`format_command` renders one :class:`Command` as a single RIB line.
:class:`RibWriter` is a sink that does this for every call it receives and
indents the output by scope (``WorldBegin``/``AttributeBegin``/``ArchiveBegin``
and friends), which makes expanded archives easy to read.

Numbers use the shortest ``repr``-style form (``1`` rather than ``1.0``);
strings are quoted with ``"`` and ``\\`` escaped.
"""

from __future__ import annotations

from typing import Any

from ristream.ri.command import Command
from ristream.ri.renderer import Renderer

_OPENERS = frozenset(
    {
        "FrameBegin",
        "WorldBegin",
        "AttributeBegin",
        "TransformBegin",
        "SolidBegin",
        "MotionBegin",
        "ObjectBegin",
        "ArchiveBegin",
        "ResourceBegin",
        "IfBegin",
    }
)
_CLOSERS = frozenset(
    {
        "FrameEnd",
        "WorldEnd",
        "AttributeEnd",
        "TransformEnd",
        "SolidEnd",
        "MotionEnd",
        "ObjectEnd",
        "ArchiveEnd",
        "ResourceEnd",
        "IfEnd",
    }
)


def _quote(s: str) -> str:
    body = s.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{body}"'


def _number(v: int | float) -> str:
    if isinstance(v, bool):
        return "1" if v else "0"
    if isinstance(v, float) and v.is_integer() and abs(v) < 1e15:
        return str(int(v))
    return repr(v)


def format_value(v: Any) -> str:
    """Render one argument value."""
    if v is None:
        return ""
    if isinstance(v, str):
        return _quote(v)
    if isinstance(v, bool | int | float):
        return _number(v)
    if isinstance(v, list | tuple):
        return "[" + " ".join(format_value(x) for x in v) + "]"
    if callable(v):
        return _quote(getattr(v, "__name__", "unknown"))
    return _quote(str(v))


def format_command(command: Command) -> str:
    """Render ``command`` as one line of RIB (no trailing newline)."""
    if command.proc == "ArchiveRecord":
        rtype, text = command.args
        if rtype == "comment":
            return f"#{text}"
        if rtype == "structure":
            return f"##{text}"
        return str(text)

    parts = [command.proc]
    if command.proc == "Procedural":
        # RIB order: "subdivfunc" [data] [bound]
        data, bound, refine, _free = command.args
        parts += [format_value(refine), format_value(data), format_value(bound)]
    else:
        parts += [format_value(v) for v in command.args if v is not None]
    if command.params is not None:
        for p in command.params:
            parts.append(_quote(p.token))
            parts.append(format_value(list(p.value)))
    return " ".join(parts)


class RibWriter(Renderer):
    """Sink that accumulates formatted RIB text."""

    def __init__(self, indent: str = "  ") -> None:
        self._indent = indent
        self._level = 0
        self._lines: list[str] = []

    def handle(self, command: Command) -> None:
        if command.proc in _CLOSERS and self._level > 0:
            self._level -= 1
        self._lines.append(self._indent * self._level + format_command(command))
        if command.proc in _OPENERS:
            self._level += 1

    def lines(self) -> list[str]:
        return list(self._lines)

    def text(self) -> str:
        """The document so far, newline-terminated when non-empty."""
        return "\n".join(self._lines) + ("\n" if self._lines else "")


__all__ = ["RibWriter", "format_command", "format_value"]
