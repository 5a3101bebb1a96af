"""End-to-end tests for the expand pipeline (RIB text in, RIB text out)."""

from __future__ import annotations

import pytest

from ristream.core.settings import MAX_REPLAY_DEPTH_LIMIT, load_settings
from ristream.pipelines import run_expand

SCENE = """\
##RenderMan RIB
ArchiveBegin "leaf"
  Sphere 1 -1 1 360
ArchiveEnd
ObjectBegin 1
  Cylinder 1 0 1 360
ObjectEnd
WorldBegin
  ReadArchive "leaf"
  ReadArchive "external.rib"
  ObjectInstance 1
  ObjectInstance 7
WorldEnd
"""

LOOP = (
    'ArchiveBegin "loop"\nSphere 1 -1 1 360\nReadArchive "loop"\nArchiveEnd\n'
    'ReadArchive "loop"\n'
)


def test_scene_is_expanded() -> None:
    result = run_expand(SCENE)
    assert result["rib"] == (
        "##RenderMan RIB\n"
        "WorldBegin\n"
        "  Sphere 1 -1 1 360\n"
        '  ReadArchive "external.rib"\n'
        "  Cylinder 1 0 1 360\n"
        "WorldEnd\n"
    )
    assert result["requests"] == 12


def test_unknown_object_is_reported() -> None:
    result = run_expand(SCENE)
    assert result["errors"] == [
        {"code": "bad handle", "severity": "error", "message": 'Bad object name "7"'}
    ]


def test_snapshot_lists_definitions() -> None:
    snap = run_expand(SCENE)["snapshot"]
    assert snap["state"] == "idle"
    assert snap["recording"] is None
    assert snap["note"] == "end of input"
    assert [dict(a) for a in snap["archives"]] == [{"name": "leaf", "commands": 1}]
    assert [dict(o) for o in snap["objects"]] == [{"name": "1", "commands": 1}]


def test_comments_inside_archive_dropped_or_kept() -> None:
    rib = 'ArchiveBegin "a"\n# inside\nSphere 1 -1 1 360\nArchiveEnd\nReadArchive "a"\n'
    assert run_expand(rib)["rib"] == "Sphere 1 -1 1 360\n"
    assert run_expand(rib, capture_archive_records=True)["rib"] == (
        "# inside\nSphere 1 -1 1 360\n"
    )


def test_self_reference_stops_at_depth_limit() -> None:
    result = run_expand(LOOP, max_replay_depth=2)
    assert result["rib"].count("Sphere") == 2
    assert [e["code"] for e in result["errors"]] == ["nesting"]


def test_depth_limit_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RISTREAM_MAX_REPLAY_DEPTH", "4")
    load_settings.cache_clear()
    assert run_expand(LOOP)["rib"].count("Sphere") == 4


def test_unterminated_definition_is_left_recording() -> None:
    result = run_expand(
        'WorldBegin\nArchiveBegin "open"\nArchiveBegin "inner"\nSphere 1 -1 1 360\n'
    )
    assert result["rib"] == "WorldBegin\n"
    snap = result["snapshot"]
    assert snap["state"] == "recording_archive"
    assert snap["recording"] == "open"
    assert snap["nest_depth"] == 1


def test_syntax_and_stream_errors_share_one_list() -> None:
    result = run_expand('Bogus 1\nObjectInstance "nope"\n')
    assert [e["code"] for e in result["errors"]] == ["bad token", "bad handle"]
    assert result["rib"] == ""
    assert result["requests"] == 1


def test_deepest_allowed_limit_reports_once_and_continues() -> None:
    result = run_expand(
        LOOP + "WorldBegin\nWorldEnd\n", max_replay_depth=MAX_REPLAY_DEPTH_LIMIT
    )
    assert [e["code"] for e in result["errors"]] == ["nesting"]
    assert result["rib"].count("Sphere") == MAX_REPLAY_DEPTH_LIMIT
    assert result["rib"].endswith("WorldBegin\nWorldEnd\n")


def test_limit_above_maximum_is_rejected() -> None:
    with pytest.raises(ValueError):
        run_expand(LOOP, max_replay_depth=MAX_REPLAY_DEPTH_LIMIT + 1)
