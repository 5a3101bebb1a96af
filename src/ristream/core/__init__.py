"""Core package initializer for ristream.

Holds the ambient pieces shared by every stage:
    from ristream.core.settings import settings, load_settings, Settings, get_logger
    from ristream.core.errors import ErrorHandler, ErrorCode, Severity
"""

from __future__ import annotations

__all__ = ["__doc__"]
