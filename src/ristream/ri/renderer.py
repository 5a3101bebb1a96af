"""The RenderMan call interface as a Python base class.

:class:`Renderer` has one public method per entry of
:data:`ristream.ri.procedures.PROCEDURES`, named after the procedure in
snake_case (``Sphere`` -> ``sphere``, ``Else`` -> ``else_``). Each method
snapshots its arguments into a :class:`~ristream.ri.command.Command` and hands
it to :meth:`Renderer.handle`, which subclasses implement.

Subclasses may also override individual procedure methods directly; replay
goes through the public methods (see :meth:`Command.invoke`), so such
overrides see replayed calls too.

Example
-------
>>> class Printer(Renderer):
...     def handle(self, command):
...         print(command.proc, command.args)
>>> Printer().translate(1, 0, 0)
Translate (1, 0, 0)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ristream.core.contracts.params import ParamList

from .command import Command
from .procedures import PROCEDURES, ProcSpec


class Renderer:
    """A stage that receives procedure calls."""

    def handle(self, command: Command) -> None:
        """Process one call. Every procedure method funnels into here."""
        raise NotImplementedError

    def call(self, name: str, *args: Any, params: ParamList | None = None) -> None:
        """Invoke a procedure by its RenderMan name."""
        spec = PROCEDURES[name]
        method = getattr(self, spec.method)
        if spec.has_params:
            method(*args, params=params)
        else:
            method(*args)


def _make_method(spec: ProcSpec) -> Callable[..., None]:
    if spec.has_params:

        def method(self: Renderer, *args: Any, params: ParamList | None = None) -> None:
            self.handle(Command.create(spec, args, params))

    else:

        def method(self: Renderer, *args: Any) -> None:
            self.handle(Command.create(spec, args))

    method.__name__ = spec.method
    method.__qualname__ = f"Renderer.{spec.method}"
    sig = ", ".join(spec.arg_names + (("params",) if spec.has_params else ()))
    method.__doc__ = f"RenderMan ``{spec.name}({sig})``."
    return method


for _spec in PROCEDURES.values():
    setattr(Renderer, _spec.method, _make_method(_spec))
del _spec


__all__ = ["Renderer"]
