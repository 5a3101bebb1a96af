"""Tests for the RIB tokenizer."""

from __future__ import annotations

import pytest

from ristream.core.errors import RibSyntaxError
from ristream.rib import TokenType, tokenize


def _kinds(text: str) -> list[TokenType]:
    return [t.type for t in tokenize(text)]


def test_basic_request() -> None:
    toks = list(tokenize('Sphere 1 -1 1.5 360 "Ks" [0.5 1e-3]'))
    assert [t.value for t in toks] == ["Sphere", 1, -1, 1.5, 360, "Ks", "[", 0.5, 0.001, "]"]
    assert toks[0].type is TokenType.NAME
    assert isinstance(toks[1].value, int)
    assert isinstance(toks[3].value, float)
    assert toks[5].type is TokenType.STRING


def test_comments_and_lines() -> None:
    toks = list(tokenize("# hello\n##RenderMan RIB\nWorldBegin"))
    assert [(t.type, t.value, t.line) for t in toks] == [
        (TokenType.COMMENT, " hello", 1),
        (TokenType.STRUCTURE, "RenderMan RIB", 2),
        (TokenType.NAME, "WorldBegin", 3),
    ]


def test_string_escapes() -> None:
    (tok,) = tokenize(r'"a \"quoted\" \\ path\n"')
    assert tok.value == 'a "quoted" \\ path\n'


def test_brackets_without_spaces() -> None:
    assert _kinds("Color[1 0 0]") == [
        TokenType.NAME,
        TokenType.LBRACKET,
        TokenType.NUMBER,
        TokenType.NUMBER,
        TokenType.NUMBER,
        TokenType.RBRACKET,
    ]


def test_unterminated_string() -> None:
    with pytest.raises(RibSyntaxError) as exc:
        list(tokenize('WorldBegin\nReadArchive "oops\n'))
    assert exc.value.line == 2
    assert "unterminated" in str(exc.value)


def test_unexpected_character() -> None:
    with pytest.raises(RibSyntaxError) as exc:
        list(tokenize("Sphere 1 -1 1 360 @"))
    assert exc.value.pos == 18
    assert str(exc.value).startswith("line 1:")
