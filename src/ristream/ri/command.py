"""Command records: one captured procedure invocation.

A :class:`Command` is the unit stored in a cached stream. It is immutable once
built: positional arguments are snapshotted into tuples at creation time and
parameter lists are frozen Pydantic models, so a stream can be replayed any
number of times and always yields the same calls.

Callables (filter functions, archive callbacks, error handlers) are kept by
reference; they live at least as long as the stream that holds them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ristream.core.contracts.params import ParamList

from .procedures import ProcSpec, procedure

if TYPE_CHECKING:
    from .renderer import Renderer


def _freeze(value: Any) -> Any:
    """Copy lists (recursively) into tuples; leave everything else alone."""
    if isinstance(value, list | tuple):
        return tuple(_freeze(v) for v in value)
    return value


def _jsonify(value: Any) -> Any:
    """Return a JSON-safe representation of an argument (shallow fallback to repr)."""
    if value is None or isinstance(value, bool | int | float | str):
        return value
    if isinstance(value, list | tuple):
        return [_jsonify(v) for v in value]
    if callable(value):
        return getattr(value, "__name__", repr(value))
    return repr(value)


@dataclass(frozen=True, slots=True)
class Command:
    """Immutable capture of one procedure call.

    Attributes
    ----------
    proc : str
        Procedure name, e.g. ``"Sphere"``.
    args : tuple[Any, ...]
        Positional arguments in call order.
    params : ParamList | None
        Named parameters; ``None`` for procedures that take none.
    """

    proc: str
    args: tuple[Any, ...] = ()
    params: ParamList | None = None

    @classmethod
    def create(
        cls,
        spec: ProcSpec | str,
        args: tuple[Any, ...] | list[Any] = (),
        params: ParamList | None = None,
    ) -> Command:
        """Snapshot a call to ``spec``, checking it against the procedure table.

        Raises
        ------
        TypeError
            If the number of positional arguments does not match, or a
            parameter list is given to a procedure that takes none.
        """
        if isinstance(spec, str):
            spec = procedure(spec)
        if len(args) != spec.arity:
            raise TypeError(
                f"{spec.name}() takes {spec.arity} positional arguments "
                f"({', '.join(spec.arg_names) or 'none'}) but {len(args)} were given"
            )
        if spec.has_params:
            params = params if params is not None else ParamList()
        elif params:
            raise TypeError(f"{spec.name}() does not accept a parameter list")
        else:
            params = None
        return cls(proc=spec.name, args=_freeze(tuple(args)), params=params)

    @property
    def spec(self) -> ProcSpec:
        return procedure(self.proc)

    def invoke(self, receiver: Renderer) -> None:
        """Re-issue this call against ``receiver`` through its public method."""
        spec = self.spec
        method = getattr(receiver, spec.method)
        if spec.has_params:
            method(*self.args, params=self.params)
        else:
            method(*self.args)

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-safe dict (used by traces, the CLI and the API)."""
        payload: dict[str, Any] = {
            "proc": self.proc,
            "args": [_jsonify(a) for a in self.args],
        }
        if self.params is not None:
            payload["params"] = [
                {"token": p.token, "type": p.type, "value": list(p.value)} for p in self.params
            ]
        return payload


__all__ = ["Command"]
