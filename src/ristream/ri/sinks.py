"""Terminal stages and observers.

- :class:`CommandCollector` ends a chain and keeps every call it receives.
- :class:`TapFilter` sits anywhere in a chain, keeps a copy of every call
  that passes through it and forwards it unchanged. Placed in front of an
  inline archive filter it shows what the head of the chain receives,
  replayed calls included.
"""

from __future__ import annotations

from typing import Any

from .command import Command
from .filter import Filter, FilterChain, register_filter
from .renderer import Renderer


class CommandCollector(Renderer):
    """Sink that stores received commands in order."""

    def __init__(self) -> None:
        self.commands: list[Command] = []

    def handle(self, command: Command) -> None:
        self.commands.append(command)

    def procs(self) -> list[str]:
        """Procedure names in arrival order."""
        return [c.proc for c in self.commands]

    def payloads(self) -> list[dict[str, Any]]:
        return [c.to_payload() for c in self.commands]

    def clear(self) -> None:
        self.commands.clear()


@register_filter("tap")
class TapFilter(Filter):
    """Pass-through filter that remembers what it saw."""

    def __init__(self, services: FilterChain, next_filter: Renderer) -> None:
        super().__init__(services, next_filter)
        self.seen: list[Command] = []

    def handle(self, command: Command) -> None:
        self.seen.append(command)
        super().handle(command)

    def procs(self) -> list[str]:
        return [c.proc for c in self.seen]


__all__ = ["CommandCollector", "TapFilter"]
