"""RenderMan call interface, command records and filter stages.

Importing this package registers the built-in filters (``"inlinearchive"``,
``"tap"``) so that ``FilterChain.add_filter(name)`` can find them.
"""

from __future__ import annotations

from .cache import CachedStream, StreamRegistry
from .command import Command
from .filter import FILTER_FACTORIES, Filter, FilterChain, register_filter
from .inline_archive import InlineArchiveFilter, ScopeState
from .procedures import PROCEDURES, SCOPE_PROCEDURES, ProcSpec, procedure
from .renderer import Renderer
from .sinks import CommandCollector, TapFilter

__all__ = [
    "FILTER_FACTORIES",
    "PROCEDURES",
    "SCOPE_PROCEDURES",
    "CachedStream",
    "Command",
    "CommandCollector",
    "Filter",
    "FilterChain",
    "InlineArchiveFilter",
    "ProcSpec",
    "Renderer",
    "ScopeState",
    "StreamRegistry",
    "TapFilter",
    "procedure",
    "register_filter",
]
