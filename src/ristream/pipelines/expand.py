"""
Expand pipeline: from RIB text to RIB text with inline archives resolved.

Flow Overview
-------------
1. A :class:`RibParser` turns the input into procedure calls.
2. The calls enter a :class:`FilterChain` whose only filter is an
   :class:`InlineArchiveFilter`; archive and object definitions are cached,
   references to them are replayed at the head of the chain.
3. A :class:`RibWriter` at the end of the chain formats whatever comes out.

Unresolved ``ReadArchive`` calls (archives that live on disk) come out
unchanged; the pipeline never touches the filesystem.

Design Principles
-----------------
- **One shared ErrorHandler** for parser and filters, so the result lists
  syntax problems and stream errors together.
- **Plain payloads**: the result is a TypedDict of JSON-safe values, ready
  for the CLI and the HTTP API.
"""

from __future__ import annotations

from typing import Any, TypedDict, cast

from ristream.core.errors import ErrorHandler
from ristream.core.settings import get_logger
from ristream.ri.filter import FilterChain
from ristream.ri.inline_archive import InlineArchiveFilter
from ristream.rib.parser import RibParser
from ristream.rib.writer import RibWriter

logger = get_logger("ristream.pipelines")


class ExpandResult(TypedDict):
    """Structured payload returned by :func:`run_expand`.

    Attributes
    ----------
    rib:
        Expanded RIB text.
    requests:
        Number of requests read from the input.
    errors:
        Error report payloads (``code``, ``severity``, ``message``).
    snapshot:
        Final state of the inline archive filter (see ``FilterSnapshot``).
    """

    rib: str
    requests: int
    errors: list[dict[str, Any]]
    snapshot: dict[str, Any]


def build_chain(
    sink: RibWriter,
    *,
    capture_archive_records: bool | None = None,
    max_replay_depth: int | None = None,
    error_handler: ErrorHandler | None = None,
) -> tuple[FilterChain, InlineArchiveFilter]:
    """Create ``InlineArchiveFilter -> sink`` and return the chain and filter."""
    chain = FilterChain(sink, error_handler)
    flt = chain.add_filter(
        lambda services, nxt, _params: InlineArchiveFilter(
            services,
            nxt,
            capture_archive_records=capture_archive_records,
            max_replay_depth=max_replay_depth,
        )
    )
    return chain, cast(InlineArchiveFilter, flt)


def run_expand(
    text: str,
    *,
    capture_archive_records: bool | None = None,
    max_replay_depth: int | None = None,
) -> ExpandResult:
    """
    Expand every inline archive and object instance in ``text``.

    Parameters
    ----------
    text:
        ASCII RIB input.
    capture_archive_records:
        Keep comments found inside archive/object definitions; defaults to
        the ``RISTREAM_CAPTURE_RECORDS`` setting.
    max_replay_depth:
        Limit on nested replays; defaults to ``RISTREAM_MAX_REPLAY_DEPTH``.
    """
    writer = RibWriter()
    chain, flt = build_chain(
        writer,
        capture_archive_records=capture_archive_records,
        max_replay_depth=max_replay_depth,
    )
    parser = RibParser(chain.first_filter(), chain.error_handler)
    requests = parser.parse(text)

    snap = flt.snapshot(note="end of input")
    if snap.recording is not None:
        logger.warning("input ended while recording %s %r", snap.state, snap.recording)

    return {
        "rib": writer.text(),
        "requests": requests,
        "errors": [r.to_payload() for r in chain.error_handler.reports()],
        "snapshot": snap.to_payload(),
    }


__all__ = ["ExpandResult", "build_chain", "run_expand"]
