"""
scriptlex Lexer Package

Implements the lexical scanner for the scripting language: source text in,
an ordered sequence of immutable tokens out.

Key Features:
- Unicode identifiers with \\uXXXX / \\u{...} escapes decoded before keyword checks
- Decimal, hex, binary and octal numbers with '_' separators
- Strings with full escape decoding; templates kept as single tokens
- Line-terminator hints for automatic semicolon insertion
- Source location tracking (line, column, code-point offset)
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, scan, scan_file
from .errors import LexError, Diagnostic, ERROR_CODES

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "LexError",
    "Diagnostic",
    "ERROR_CODES",
    "scan",
    "scan_file",
]
