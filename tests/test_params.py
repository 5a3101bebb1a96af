"""Tests for the parameter list contracts."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ristream.core.contracts.params import Param, ParamList


def test_inline_declaration_is_split() -> None:
    """``"uniform float Ks"`` carries its own type; the name is the last word."""
    p = Param.parse("uniform float Ks", [0.5])
    assert p.name == "Ks"
    assert p.type == "uniform float"
    assert p.inline
    assert p.value == (0.5,)


def test_bare_token_uses_declared_type() -> None:
    p = Param.parse("Cs", [1, 0, 0], declared="varying color")
    assert p.name == "Cs" and p.type == "varying color" and not p.inline
    assert p.value == (1, 0, 0)


def test_scalar_value_is_wrapped() -> None:
    assert Param(token="texturename", value="wood.tx").value == ("wood.tx",)


def test_duplicate_names_rejected() -> None:
    """Keys must be unique, whatever the declaration says."""
    with pytest.raises(ValidationError):
        ParamList.of(Param.parse("Ks", 1), Param.parse("uniform float Ks", 2))


def test_lookup_iteration_and_equality() -> None:
    a = ParamList.from_pairs({"Ka": 1, "uniform float Kd": [0.5]})
    b = ParamList.from_pairs({"Ka": 1, "uniform float Kd": [0.5]})
    assert a == b and hash(a) == hash(b)
    assert len(a) == 2 and bool(a)
    assert [p.name for p in a] == ["Ka", "Kd"]
    kd = a.get("Kd")
    assert kd is not None and kd.value == (0.5,)
    assert a.get("missing") is None
    assert not ParamList()


def test_models_are_frozen() -> None:
    p = Param.parse("Ks", 1)
    with pytest.raises(ValidationError):
        p.token = "Kd"  # type: ignore[misc]


@pytest.mark.parametrize("token", ["", " ", "\t\n"])  # type: ignore[misc]
def test_blank_token_rejected(token: str) -> None:
    with pytest.raises(ValidationError):
        Param.parse(token, 1)
