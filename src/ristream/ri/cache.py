"""Cached command streams and the registries that own them.

A :class:`CachedStream` is an append-only log of :class:`Command` records
under a name. It is filled while its defining scope is open, closed when the
scope ends, and then only ever replayed.

A :class:`StreamRegistry` keeps streams in definition order. Names need not
be unique; :meth:`StreamRegistry.find` returns the *first* stream with a
matching name, so a later definition with the same name is shadowed for the
life of the registry.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from .command import Command

if TYPE_CHECKING:
    from .renderer import Renderer


class CachedStream:
    """Named, ordered log of recorded calls."""

    __slots__ = ("_name", "_commands", "_closed")

    def __init__(self, name: str) -> None:
        self._name = name
        self._commands: list[Command] = []
        self._closed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        """True once the defining scope has ended."""
        return self._closed

    def append(self, command: Command) -> None:
        """Add ``command`` at the end of the stream.

        Raises
        ------
        RuntimeError
            If the stream has already been closed.
        """
        if self._closed:
            raise RuntimeError(f"cached stream {self._name!r} is closed")
        self._commands.append(command)

    def close(self) -> None:
        self._closed = True

    def replay(self, receiver: Renderer) -> None:
        """Invoke every recorded call against ``receiver`` in recorded order.

        Replay is non-destructive and may be repeated any number of times.
        """
        for command in tuple(self._commands):
            command.invoke(receiver)

    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(tuple(self._commands))

    def __len__(self) -> int:
        return len(self._commands)

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"CachedStream({self._name!r}, {len(self._commands)} commands, {state})"


class StreamRegistry:
    """Ordered collection of cached streams with first-match lookup."""

    __slots__ = ("_kind", "_streams")

    def __init__(self, kind: str) -> None:
        self._kind = kind
        self._streams: list[CachedStream] = []

    @property
    def kind(self) -> str:
        """Label used in logs, e.g. ``"archive"`` or ``"object"``."""
        return self._kind

    def create(self, name: str) -> CachedStream:
        """Append a new, open stream called ``name`` and return it."""
        stream = CachedStream(name)
        self._streams.append(stream)
        return stream

    def find(self, name: str) -> CachedStream | None:
        """Return the earliest-defined stream called ``name``, or None."""
        for stream in self._streams:
            if stream.name == name:
                return stream
        return None

    def names(self) -> tuple[str, ...]:
        """Names in definition order (duplicates included)."""
        return tuple(s.name for s in self._streams)

    def __contains__(self, name: object) -> bool:
        return any(s.name == name for s in self._streams)

    def __iter__(self) -> Iterator[CachedStream]:
        return iter(tuple(self._streams))

    def __len__(self) -> int:
        return len(self._streams)


__all__ = ["CachedStream", "StreamRegistry"]
