"""Filter stages and the chain that links them.

A pipeline is an ordered list of stages ending in a *sink* (any
:class:`Renderer`). Each :class:`Filter` knows two things about its place in
the chain:

- ``next_filter``: the stage it forwards to,
- ``services``: the owning :class:`FilterChain`, through which it can reach
  the *first* stage (``services.first_filter()``) and the shared
  :class:`~ristream.core.errors.ErrorHandler`.

Forwarding moves one step down the chain; replaying re-enters at the head so
that every stage, including the one doing the replay, sees the replayed calls
as if they had been written inline.

Filters are added to the front of the chain, so the last filter added is the
first to see each call::

    chain = FilterChain(CommandCollector())
    chain.add_filter("inlinearchive")
    chain.add_filter("tap")             # tap -> inlinearchive -> collector
    chain.first_filter().sphere(1, -1, 1, 360)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias, TypeVar

from ristream.core.contracts.params import ParamList
from ristream.core.errors import ErrorHandler, UnknownFilterError
from ristream.core.settings import get_logger

from .command import Command
from .renderer import Renderer

logger = get_logger("ristream.chain")

FilterFactory: TypeAlias = Callable[["FilterChain", Renderer, ParamList | None], "Filter"]

# name -> factory, filled by :func:`register_filter`.
FILTER_FACTORIES: dict[str, FilterFactory] = {}

F = TypeVar("F", bound="Filter")


def register_filter(name: str) -> Callable[[type[F]], type[F]]:
    """Class decorator making a filter available to ``add_filter(name)``."""

    def deco(cls: type[F]) -> type[F]:
        FILTER_FACTORIES[name] = cls.create
        return cls

    return deco


class Filter(Renderer):
    """A stage that, by default, forwards every call unchanged."""

    def __init__(self, services: FilterChain, next_filter: Renderer) -> None:
        self._services = services
        self._next = next_filter

    @classmethod
    def create(
        cls, services: FilterChain, next_filter: Renderer, params: ParamList | None = None
    ) -> Filter:
        """Factory used by :class:`FilterChain`; subclasses may read ``params``."""
        return cls(services, next_filter)

    @property
    def services(self) -> FilterChain:
        return self._services

    @property
    def next_filter(self) -> Renderer:
        return self._next

    def handle(self, command: Command) -> None:
        command.invoke(self._next)


class FilterChain:
    """Owner of an ordered list of stages, head first."""

    def __init__(self, sink: Renderer, error_handler: ErrorHandler | None = None) -> None:
        self._sink = sink
        self._filters: list[Filter] = []
        self._errors = error_handler if error_handler is not None else ErrorHandler()

    @property
    def error_handler(self) -> ErrorHandler:
        return self._errors

    @property
    def sink(self) -> Renderer:
        return self._sink

    @property
    def filters(self) -> tuple[Filter, ...]:
        """Filters in call order (head first), not including the sink."""
        return tuple(self._filters)

    def first_filter(self) -> Renderer:
        """Return the head of the chain; the sink when no filter was added."""
        return self._filters[0] if self._filters else self._sink

    def add_filter(
        self, factory: str | FilterFactory, params: ParamList | None = None
    ) -> Filter:
        """Create a filter in front of the current head and return it.

        Raises
        ------
        UnknownFilterError
            If ``factory`` is a name nobody registered.
        """
        if isinstance(factory, str):
            try:
                make = FILTER_FACTORIES[factory]
            except KeyError:
                raise UnknownFilterError(f"unknown filter {factory!r}") from None
        else:
            make = factory
        flt = make(self, self.first_filter(), params)
        self._filters.insert(0, flt)
        logger.debug(
            "added %s at head of chain (%d filters)", type(flt).__name__, len(self._filters)
        )
        return flt


__all__ = ["FILTER_FACTORIES", "Filter", "FilterChain", "FilterFactory", "register_filter"]
