"""
Error handling for the scriptlex scanner.

Provides error reporting with source location information and
IDE-friendly diagnostics. Scanning stops at the first error, so there is no
recovery machinery here: each helper builds one fully described LexError.
"""

from typing import Optional, List
from dataclasses import dataclass
from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """A located message shared by lexer and parser errors."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning", "info", "hint"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexError(Exception):
    """
    Exception raised when the scanner meets malformed input.

    ``reason`` is the short message, ``location`` where scanning stopped.
    """

    def __init__(
        self,
        reason: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(reason)
        self.reason = reason
        self.location = location
        self.code = code
        self.diagnostic = Diagnostic(
            message=reason,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Unterminated string literal",
    "L003": "Invalid numeric literal",
    "L004": "Unterminated template literal",
    "L005": "Identifier starts immediately after numeric literal",
    "L006": "Invalid escape sequence",
    "L007": "Unterminated block comment",
}


def create_invalid_character_error(char: str, location: SourceLocation) -> LexError:
    """Create an error for a character no rule accepts."""
    if char.isprintable():
        help_text = f"The character '{char}' cannot appear outside a string, template or comment."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexError(
        reason=f"Invalid character: '{char}'",
        location=location,
        code="L001",
        help_text=help_text,
    )


def create_unterminated_string_error(quote: str, location: SourceLocation) -> LexError:
    """Create an error for a string literal that hits a line end or EOF."""
    return LexError(
        reason="Unterminated string literal",
        location=location,
        code="L002",
        help_text=f"String literals must be closed with a matching {quote} on the same line.",
        suggestions=[f"Add a closing {quote}", "Use a template literal for multi-line text"]
    )


def create_invalid_number_error(lexeme: str, location: SourceLocation, reason: str) -> LexError:
    """Create an error for a malformed numeric literal."""
    return LexError(
        reason=f"Invalid numeric literal: '{lexeme}'",
        location=location,
        code="L003",
        help_text=reason,
        suggestions=["Check the numeric format", "Separators '_' must sit between two digits"]
    )


def create_unterminated_template_error(location: SourceLocation) -> LexError:
    """Create an error for a template literal missing its closing backtick."""
    return LexError(
        reason="Unterminated template literal",
        location=location,
        code="L004",
        help_text="Template literals must be closed with a matching backtick.",
        suggestions=["Add a closing '`'", "Check that every '${' has a matching '}'"]
    )


def create_identifier_after_number_error(lexeme: str, location: SourceLocation) -> LexError:
    """Create an error for input like ``3abc``."""
    return LexError(
        reason=f"Identifier cannot start with digit: '{lexeme}'",
        location=location,
        code="L005",
        help_text="A numeric literal must not be directly followed by an identifier.",
        suggestions=["Insert whitespace or an operator after the number",
                     "Rename the identifier so it starts with a letter, '_' or '$'"]
    )


def create_invalid_escape_error(sequence: str, location: SourceLocation,
                                reason: Optional[str] = None) -> LexError:
    """Create an error for an escape sequence that cannot be decoded."""
    return LexError(
        reason=f"Invalid escape sequence: '{sequence}'",
        location=location,
        code="L006",
        help_text=reason or "Supported escapes are \\n \\t \\r \\b \\f \\v \\0 \\xHH \\uXXXX \\u{X...} and quoted characters.",
    )


def create_unterminated_comment_error(location: SourceLocation) -> LexError:
    """Create an error for a '/*' comment with no '*/'."""
    return LexError(
        reason="Unterminated block comment",
        location=location,
        code="L007",
        help_text="Block comments do not nest and must be closed with '*/'.",
        suggestions=["Add a closing '*/'"]
    )
