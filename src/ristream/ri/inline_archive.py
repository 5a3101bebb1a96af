"""Filter that caches inline archives and object instances and replays them.

Everything between ``ArchiveBegin(name)`` and the matching ``ArchiveEnd()`` is
recorded into memory under ``name`` instead of being passed on. A later
``ReadArchive(name)`` replays the recorded calls into the *first* filter of the
chain, so every stage sees the archive contents as if they had been written
at the point of reference. ``ObjectBegin``/``ObjectEnd``/``ObjectInstance``
work the same way for object instances.

Scope states
------------
``IDLE``
    Nothing is being recorded; calls are forwarded to the next stage.
``RECORDING_ARCHIVE``
    Filling an archive. Nested ``ArchiveBegin``/``ArchiveEnd`` pairs are
    recorded literally and tracked by ``nest_depth``; only the outermost
    ``ArchiveEnd`` closes the recording. Object definitions met here are
    recorded, never instantiated.
``DEFINING_OBJECT``
    Filling an object. Every call except ``ObjectEnd`` is recorded
    (archive scopes included, without affecting state).

Archive names and object handles may repeat; lookups use the first
definition with a matching name.

Error policy
------------
- ``ObjectInstance`` of an unknown handle reports ``BAD_HANDLE`` and is
  dropped.
- ``ReadArchive`` of an unknown name is forwarded: a later stage may find it
  on disk.
- ``ArchiveEnd``/``ObjectEnd`` with nothing open are ignored.
- A replay that would exceed ``max_replay_depth`` nested replays (e.g. an
  archive that reads itself) reports ``NESTING`` and is skipped.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from ristream.core.contracts.params import ParamList
from ristream.core.errors import ErrorCode
from ristream.core.settings import MAX_REPLAY_DEPTH_LIMIT, get_logger, load_settings
from ristream.core.trace import FilterSnapshot, StreamSummary, utc_timestamp

from .cache import CachedStream, StreamRegistry
from .command import Command
from .filter import Filter, FilterChain, register_filter
from .procedures import PROCEDURES, SCOPE_PROCEDURES
from .renderer import Renderer

logger = get_logger("ristream.inline_archive")


class ScopeState(str, Enum):
    """What the filter is currently doing with incoming calls."""

    IDLE = "idle"
    RECORDING_ARCHIVE = "recording_archive"
    DEFINING_OBJECT = "defining_object"


@register_filter("inlinearchive")
class InlineArchiveFilter(Filter):
    """Record archives/objects and replay them on reference."""

    def __init__(
        self,
        services: FilterChain,
        next_filter: Renderer,
        *,
        capture_archive_records: bool | None = None,
        max_replay_depth: int | None = None,
    ) -> None:
        super().__init__(services, next_filter)
        cfg = load_settings()
        self._capture_records = (
            cfg.capture_archive_records
            if capture_archive_records is None
            else capture_archive_records
        )
        self._max_replay_depth = (
            cfg.max_replay_depth if max_replay_depth is None else max_replay_depth
        )
        if not 1 <= self._max_replay_depth <= MAX_REPLAY_DEPTH_LIMIT:
            raise ValueError(
                f"max_replay_depth must be between 1 and {MAX_REPLAY_DEPTH_LIMIT}, "
                f"got {self._max_replay_depth}"
            )

        self._archives = StreamRegistry("archive")
        self._objects = StreamRegistry("object")
        self._active: CachedStream | None = None
        self._nested = 0
        self._in_object = False
        self._replay_depth = 0

        # Scope procedures plus ArchiveRecord; handler names follow the method table.
        self._scoped: dict[str, Callable[[Command], None]] = {
            name: getattr(self, "_" + PROCEDURES[name].method)
            for name in SCOPE_PROCEDURES | {"ArchiveRecord"}
        }

    @classmethod
    def create(
        cls, services: FilterChain, next_filter: Renderer, params: ParamList | None = None
    ) -> InlineArchiveFilter:
        """Build from an optional parameter list.

        Recognised parameters: ``"int capturerecords"`` and
        ``"int maxreplaydepth"``.
        """
        capture: bool | None = None
        depth: int | None = None
        if params is not None:
            p = params.get("capturerecords")
            if p is not None and p.value:
                capture = bool(p.value[0])
            p = params.get("maxreplaydepth")
            if p is not None and p.value:
                depth = int(p.value[0])
        return cls(services, next_filter, capture_archive_records=capture, max_replay_depth=depth)

    # ------------------------------- State ----------------------------------

    @property
    def state(self) -> ScopeState:
        if self._active is None:
            return ScopeState.IDLE
        if self._in_object:
            return ScopeState.DEFINING_OBJECT
        return ScopeState.RECORDING_ARCHIVE

    @property
    def nest_depth(self) -> int:
        return self._nested

    @property
    def active_stream(self) -> CachedStream | None:
        return self._active

    @property
    def archives(self) -> StreamRegistry:
        return self._archives

    @property
    def objects(self) -> StreamRegistry:
        return self._objects

    def snapshot(self, note: str | None = None) -> FilterSnapshot:
        """Capture the current scope state and registry contents."""
        return FilterSnapshot(
            timestamp=utc_timestamp(),
            state=self.state.value,
            nest_depth=self._nested,
            recording=self._active.name if self._active is not None else None,
            archives=tuple(StreamSummary(s.name, len(s)) for s in self._archives),
            objects=tuple(StreamSummary(s.name, len(s)) for s in self._objects),
            note=note,
        )

    # ------------------------------ Dispatch --------------------------------

    def handle(self, command: Command) -> None:
        special = self._scoped.get(command.proc)
        if special is not None:
            special(command)
        elif self._active is not None:
            self._active.append(command)
        else:
            command.invoke(self.next_filter)

    def _open(self, registry: StreamRegistry, name: str) -> None:
        self._active = registry.create(name)
        logger.debug("recording %s %r", registry.kind, name)

    def _close(self, stream: CachedStream) -> None:
        stream.close()
        logger.debug("closed %r with %d commands", stream.name, len(stream))
        self._active = None
        self._nested = 0
        self._in_object = False

    def _replay(self, stream: CachedStream, kind: str) -> None:
        if self._replay_depth >= self._max_replay_depth:
            self.services.error_handler.report(
                ErrorCode.NESTING,
                f'Replay depth {self._max_replay_depth} exceeded expanding {kind} "{stream.name}"',
            )
            return
        logger.debug("replaying %s %r (%d commands)", kind, stream.name, len(stream))
        self._replay_depth += 1
        try:
            stream.replay(self.services.first_filter())
        finally:
            self._replay_depth -= 1

    # ------------------------- Scope-sensitive calls ------------------------

    def _archive_begin(self, command: Command) -> None:
        if self._active is None:
            self._open(self._archives, command.args[0])
            return
        self._active.append(command)
        if not self._in_object:
            self._nested += 1

    def _archive_end(self, command: Command) -> None:
        if self._active is None:
            # Scoping error; ignored.
            return
        if self._in_object or self._nested > 0:
            self._active.append(command)
            if not self._in_object:
                self._nested -= 1
            return
        self._close(self._active)

    def _read_archive(self, command: Command) -> None:
        if self._active is not None:
            self._active.append(command)
            return
        stream = self._archives.find(command.args[0])
        if stream is not None:
            self._replay(stream, "archive")
            return
        # Probably on disk; let later stages resolve it.
        command.invoke(self.next_filter)

    def _object_begin(self, command: Command) -> None:
        if self._active is not None:
            self._active.append(command)
            return
        self._open(self._objects, command.args[0])
        self._in_object = True

    def _object_end(self, command: Command) -> None:
        if self._active is None:
            # Scoping error; ignored.
            return
        if self._in_object:
            self._close(self._active)
        else:
            self._active.append(command)

    def _object_instance(self, command: Command) -> None:
        if self._active is not None:
            self._active.append(command)
            return
        name = command.args[0]
        stream = self._objects.find(name)
        if stream is None:
            self.services.error_handler.report(ErrorCode.BAD_HANDLE, f'Bad object name "{name}"')
            return
        self._replay(stream, "object")

    def _archive_record(self, command: Command) -> None:
        if self._active is None:
            command.invoke(self.next_filter)
        elif self._capture_records:
            self._active.append(command)


__all__ = ["InlineArchiveFilter", "ScopeState"]
