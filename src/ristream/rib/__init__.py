"""ASCII RIB front end and writer."""

from __future__ import annotations

from .lexer import Token, TokenType, tokenize
from .parser import STANDARD_DECLARATIONS, RibParser, parse_rib
from .writer import RibWriter, format_command, format_value

__all__ = [
    "STANDARD_DECLARATIONS",
    "RibParser",
    "RibWriter",
    "Token",
    "TokenType",
    "format_command",
    "format_value",
    "parse_rib",
    "tokenize",
]
