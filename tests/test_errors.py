"""Unit tests for the error-reporting collaborator."""

from __future__ import annotations

import logging

import pytest

from ristream.core.errors import (
    ErrorCode,
    ErrorHandler,
    RibSyntaxError,
    Severity,
    UnknownFilterError,
)


def test_report_collects_and_counts() -> None:
    """Reports are kept in order and can be counted per kind."""
    h = ErrorHandler()
    h.report(ErrorCode.BAD_HANDLE, 'Bad object name "x"')
    h.report(ErrorCode.SYNTAX, "line 3: oops", Severity.WARNING)
    h.report(ErrorCode.BAD_HANDLE, 'Bad object name "y"')

    assert h.count() == 3
    assert h.count(ErrorCode.BAD_HANDLE) == 2
    assert h.count(ErrorCode.NESTING) == 0
    assert [r.code for r in h.reports()] == [
        ErrorCode.BAD_HANDLE,
        ErrorCode.SYNTAX,
        ErrorCode.BAD_HANDLE,
    ]

    h.clear()
    assert h.count() == 0


def test_report_logs_at_severity_level(caplog: pytest.LogCaptureFixture) -> None:
    """The message goes to the logger at the level matching its severity."""
    logger = logging.getLogger("tests.errors")
    logger.propagate = True
    h = ErrorHandler(logger)
    with caplog.at_level(logging.DEBUG, logger="tests.errors"):
        h.report(ErrorCode.NESTING, "too deep", Severity.SEVERE)
    assert caplog.records[-1].levelno == logging.CRITICAL
    assert "[nesting] too deep" in caplog.records[-1].getMessage()


def test_payload_is_json_safe() -> None:
    rep = ErrorHandler().report(ErrorCode.BAD_HANDLE, "nope")
    assert rep.to_payload() == {"code": "bad handle", "severity": "error", "message": "nope"}


def test_exceptions_carry_context() -> None:
    e = RibSyntaxError(12, "unterminated string", pos=40)
    assert e.line == 12 and e.pos == 40
    assert str(e) == "line 12: unterminated string"
    assert issubclass(UnknownFilterError, KeyError)
