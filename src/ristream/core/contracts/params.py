"""Named parameter lists carried by most RenderMan procedures.

A parameter is written in RIB as a token followed by a value array::

    Sphere 1 -1 1 360 "uniform float Ks" [0.5] "Cs" [1 0 0]

This module defines two frozen Pydantic v2 models:

- `Param`     : one ``(token, type, value)`` entry. Inline declarations such as
  ``"uniform float Ks"`` are split into ``type="uniform float"`` and
  ``name="Ks"``; ``token`` always keeps the text exactly as written.
- `ParamList` : an ordered, immutable collection with unique parameter names.

Both models are hashable and compare structurally, which is what lets a
recorded command be checked against its replay in tests.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ParamValue = int | float | str


class Param(BaseModel):
    """One named parameter."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1, description="Parameter token as written")
    type: str = Field(default="", description="Declared type, e.g. 'uniform float'")
    value: tuple[ParamValue, ...] = Field(default_factory=tuple)

    @field_validator("token")
    @classmethod
    def _token_has_name(cls, v: str) -> str:
        if not v.split():
            raise ValueError("parameter token must contain a name")
        return v

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, v: Any) -> Any:
        """Accept a bare scalar or any sequence and store a tuple."""
        if isinstance(v, int | float | str):
            return (v,)
        if isinstance(v, list):
            return tuple(v)
        return v

    @property
    def name(self) -> str:
        """The parameter name without any inline declaration."""
        return self.token.split()[-1]

    @property
    def inline(self) -> bool:
        """True when the token carries its own type declaration."""
        return len(self.token.split()) > 1

    @classmethod
    def parse(cls, token: str, value: Any, declared: str = "") -> Param:
        """Build a parameter, taking the type from an inline declaration if any."""
        words = token.split()
        ptype = " ".join(words[:-1]) if len(words) > 1 else declared
        return cls(token=token, type=ptype, value=value)


class ParamList(BaseModel):
    """Ordered parameter list with unique names."""

    model_config = ConfigDict(frozen=True)

    items: tuple[Param, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _unique_names(self) -> ParamList:
        seen: set[str] = set()
        for p in self.items:
            if p.name in seen:
                raise ValueError(f"duplicate parameter {p.name!r} in parameter list")
            seen.add(p.name)
        return self

    @classmethod
    def of(cls, *params: Param) -> ParamList:
        return cls(items=params)

    @classmethod
    def from_pairs(cls, pairs: dict[str, Any]) -> ParamList:
        """Build from ``{token: value}``; handy in tests and scripts."""
        return cls(items=tuple(Param.parse(k, v) for k, v in pairs.items()))

    def get(self, name: str) -> Param | None:
        """Return the parameter called ``name`` or None."""
        for p in self.items:
            if p.name == name:
                return p
        return None

    def __iter__(self) -> Iterator[Param]:  # type: ignore[override]
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)


__all__ = ["Param", "ParamList", "ParamValue"]
