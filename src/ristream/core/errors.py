"""Error kinds and the error-reporting collaborator shared by all stages.

Filters never raise for problems found in the incoming stream. They hand an
``(ErrorCode, message)`` pair to the chain's :class:`ErrorHandler`, which logs
it and keeps an in-memory record so callers (CLI, API, tests) can inspect
what went wrong after a run.

Exceptions are reserved for programming errors (bad arity, unknown filter
names) and for the RIB lexer, whose :class:`RibSyntaxError` is caught and
reported by the parser.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .settings import get_logger


class ErrorCode(str, Enum):
    """Kinds of recoverable stream errors."""

    BAD_HANDLE = "bad handle"
    NESTING = "nesting"
    BAD_TOKEN = "bad token"
    SYNTAX = "syntax"


class Severity(str, Enum):
    """Severity attached to an error report."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SEVERE = "severe"

    def log_level(self) -> int:
        return _LOG_LEVELS[self]


_LOG_LEVELS: dict[Severity, int] = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.SEVERE: logging.CRITICAL,
}


@dataclass(frozen=True, slots=True)
class ErrorReport:
    """One reported problem.

    Attributes
    ----------
    code : ErrorCode
        Machine-readable error kind.
    severity : Severity
        How serious the problem is; processing continues regardless.
    message : str
        Human-readable description, e.g. ``'Bad object name "O"'``.
    """

    code: ErrorCode
    severity: Severity
    message: str

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-safe dict for the API and CLI."""
        return {
            "code": self.code.value,
            "severity": self.severity.value,
            "message": self.message,
        }


class ErrorHandler:
    """Collect and log error reports; never raises."""

    __slots__ = ("_logger", "_reports")

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger if logger is not None else get_logger("ristream.errors")
        self._reports: list[ErrorReport] = []

    def report(
        self,
        code: ErrorCode,
        message: str,
        severity: Severity = Severity.ERROR,
    ) -> ErrorReport:
        """Record and log one problem, returning the stored report."""
        rep = ErrorReport(code=code, severity=severity, message=message)
        self._reports.append(rep)
        self._logger.log(severity.log_level(), "[%s] %s", code.value, message)
        return rep

    def reports(self) -> tuple[ErrorReport, ...]:
        """Return every report received so far, oldest first."""
        return tuple(self._reports)

    def count(self, code: ErrorCode | None = None) -> int:
        """Return how many reports were received, optionally of one kind."""
        if code is None:
            return len(self._reports)
        return sum(1 for r in self._reports if r.code is code)

    def clear(self) -> None:
        self._reports.clear()


class RistreamError(Exception):
    """Base class for exceptions raised by ristream."""


class RibSyntaxError(RistreamError):
    """Malformed RIB input found by the lexer or parser."""

    def __init__(self, line: int, message: str, pos: int | None = None) -> None:
        super().__init__(f"line {line}: {message}")
        self.line = line
        self.message = message
        self.pos = pos


class UnknownFilterError(RistreamError, KeyError):
    """Raised when a filter is requested by a name nobody registered."""


__all__ = [
    "ErrorCode",
    "ErrorHandler",
    "ErrorReport",
    "RibSyntaxError",
    "RistreamError",
    "Severity",
    "UnknownFilterError",
]
