"""Pydantic contracts shared by the call interface and the RIB front end."""

from __future__ import annotations

from .params import Param, ParamList, ParamValue

__all__ = ["Param", "ParamList", "ParamValue"]
