"""Filter snapshot definition.

This module defines the immutable record of an inline archive filter's state
at one point in time. It lives apart from the filter itself so that the CLI
and the API can use it without importing the call interface.

Design Notes
------------
- **Immutability**: Once created, a snapshot does not change (``frozen=True``).
- **Serialization**: Timestamps are stored as ISO strings at capture time so
  that ``to_payload()`` is plain JSON.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any


def utc_timestamp() -> str:
    """Return the current UTC time as ``YYYY-MM-DDTHH:MM:SS.ffffffZ``."""
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


@dataclass(frozen=True, slots=True)
class StreamSummary:
    """Name and length of one cached stream."""

    name: str
    commands: int


@dataclass(frozen=True, slots=True)
class FilterSnapshot:
    """
    Immutable record of an inline archive filter.

    Attributes
    ----------
    timestamp : str
        ISO-8601 UTC capture time.
    state : str
        ``"idle"``, ``"recording_archive"`` or ``"defining_object"``.
    nest_depth : int
        Archive nesting depth inside the active recording.
    recording : str | None
        Name of the stream being recorded, if any.
    archives / objects : tuple[StreamSummary, ...]
        Registry contents in definition order.
    note : str | None
        Optional human-readable label (e.g. 'after frame 1').
    """

    timestamp: str
    state: str
    nest_depth: int
    recording: str | None
    archives: tuple[StreamSummary, ...] = field(default_factory=tuple)
    objects: tuple[StreamSummary, ...] = field(default_factory=tuple)
    note: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)
