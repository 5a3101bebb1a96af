"""Tests for RIB formatting and the indenting writer sink."""

from __future__ import annotations

from ristream.core.contracts.params import ParamList
from ristream.ri import Command
from ristream.rib import RibWriter, format_command, format_value, parse_rib


def test_format_value() -> None:
    assert format_value(1.0) == "1"
    assert format_value(-0.25) == "-0.25"
    assert format_value(True) == "1"
    assert format_value('say "hi"') == '"say \\"hi\\""'
    assert format_value((1, 2.5, "a")) == '[1 2.5 "a"]'
    assert format_value(None) == ""


def test_format_command_with_params() -> None:
    cmd = Command.create("Sphere", (1, -1, 1, 360), ParamList.from_pairs({"Ks": 0.5}))
    assert format_command(cmd) == 'Sphere 1 -1 1 360 "Ks" [0.5]'


def test_format_read_archive_skips_callback() -> None:
    assert format_command(Command.create("ReadArchive", ("x.rib", None))) == 'ReadArchive "x.rib"'


def test_format_archive_records() -> None:
    assert format_command(Command.create("ArchiveRecord", ("comment", " hi"))) == "# hi"
    assert format_command(Command.create("ArchiveRecord", ("structure", "Scene"))) == "##Scene"
    assert format_command(Command.create("ArchiveRecord", ("verbatim", "Raw 1"))) == "Raw 1"


def test_format_procedural_in_rib_order() -> None:
    cmd = Command.create(
        "Procedural", (["a.rib"], [-1, 1, -1, 1, -1, 1], "DelayedReadArchive", None)
    )
    assert format_command(cmd) == (
        'Procedural "DelayedReadArchive" ["a.rib"] [-1 1 -1 1 -1 1]'
    )


def test_writer_indents_by_scope() -> None:
    w = RibWriter()
    w.world_begin()
    w.attribute_begin()
    w.sphere(1, -1, 1, 360)
    w.attribute_end()
    w.world_end()
    assert w.text() == (
        "WorldBegin\n"
        "  AttributeBegin\n"
        "    Sphere 1 -1 1 360\n"
        "  AttributeEnd\n"
        "WorldEnd\n"
    )


def test_writer_tolerates_unbalanced_end() -> None:
    w = RibWriter(indent="\t")
    w.world_end()
    w.world_begin()
    w.translate(0, 0, 5)
    assert w.lines() == ["WorldEnd", "WorldBegin", "\tTranslate 0 0 5"]


def test_empty_writer() -> None:
    assert RibWriter().text() == ""


def test_parse_then_write_preserves_document() -> None:
    rib = (
        "WorldBegin\n"
        '  Surface "plastic" "Ks" [0.5]\n'
        "  Color [1 0 0]\n"
        '  ReadArchive "external.rib"\n'
        "WorldEnd\n"
    )
    w = RibWriter()
    parse_rib(rib, w)
    assert w.text() == rib
