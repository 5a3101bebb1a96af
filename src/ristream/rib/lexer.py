"""Tokenizer for the ASCII RIB format.

RIB text is a flat sequence of:

- request names (``Sphere``, ``ArchiveBegin``),
- numbers (``1``, ``-0.5``, ``1e-3``),
- quoted strings with C-style escapes,
- ``[`` / ``]`` array delimiters,
- comments from ``#`` to end of line (``##`` marks a structure comment).

The lexer is a single compiled regular expression; it yields
:class:`Token` objects carrying their 1-based line number and raises
:class:`~ristream.core.errors.RibSyntaxError` on text it cannot classify.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from ristream.core.errors import RibSyntaxError


class TokenType(str, Enum):
    NAME = "name"
    NUMBER = "number"
    STRING = "string"
    LBRACKET = "["
    RBRACKET = "]"
    COMMENT = "comment"
    STRUCTURE = "structure"


@dataclass(frozen=True, slots=True)
class Token:
    type: TokenType
    value: str | int | float
    line: int


_TOKEN_RE = re.compile(
    r"""
    (?P<ws>[ \t\r\f\v]+)
  | (?P<newline>\n)
  | (?P<structure>\#\#[^\n]*)
  | (?P<comment>\#[^\n]*)
  | (?P<string>"(?:[^"\\\n]|\\.)*")
  | (?P<number>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)
  | (?P<lbracket>\[)
  | (?P<rbracket>\])
  | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
    """,
    re.VERBOSE,
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "\\": "\\", '"': '"'}


def _unescape(body: str) -> str:
    out: list[str] = []
    it = iter(body)
    for ch in it:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(it, "")
        out.append(_ESCAPES.get(nxt, nxt))
    return "".join(out)


def _number(text: str) -> int | float:
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text)


def tokenize(text: str, start: int = 0, line: int = 1) -> Iterator[Token]:
    """Yield the tokens of ``text`` from offset ``start`` (on line ``line``).

    Raises
    ------
    RibSyntaxError
        On an unterminated string or an unexpected character.
    """
    pos = start
    end = len(text)
    while pos < end:
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            if text[pos] == '"':
                raise RibSyntaxError(line, "unterminated string", pos)
            raise RibSyntaxError(line, f"unexpected character {text[pos]!r}", pos)
        kind = m.lastgroup
        raw = m.group()
        pos = m.end()
        if kind == "ws":
            continue
        if kind == "newline":
            line += 1
        elif kind == "structure":
            yield Token(TokenType.STRUCTURE, raw[2:], line)
        elif kind == "comment":
            yield Token(TokenType.COMMENT, raw[1:], line)
        elif kind == "string":
            yield Token(TokenType.STRING, _unescape(raw[1:-1]), line)
        elif kind == "number":
            yield Token(TokenType.NUMBER, _number(raw), line)
        elif kind == "lbracket":
            yield Token(TokenType.LBRACKET, "[", line)
        elif kind == "rbracket":
            yield Token(TokenType.RBRACKET, "]", line)
        else:
            yield Token(TokenType.NAME, raw, line)


__all__ = ["Token", "TokenType", "tokenize"]
