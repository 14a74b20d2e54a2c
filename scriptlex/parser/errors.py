"""
Error handling for the scriptlex expression parser.

Provides error reporting with source location information and IDE-friendly
diagnostics. The parser does not recover: the first ParseError built here
propagates to the caller.
"""

from typing import Optional, List

from ..lexer.tokens import Token, SourceLocation
from ..lexer.errors import Diagnostic


class ParseError(Exception):
    """
    Exception raised when the parser encounters a syntax error.

    ``expected`` names what the parser was looking for, when that is known.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        expected: Optional[str] = None,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.location = location
        self.expected = expected
        self.token = token
        self.code = code
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


class InvalidAssignmentTargetError(ParseError):
    """The left side of an assignment or update cannot be assigned to."""


class UnexpectedSpreadError(ParseError):
    """``...`` used outside an array literal or argument list."""


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Expected token not found",
    "P004": "Unclosed delimiter",
    "P005": "Invalid expression",
    "P006": "Invalid assignment target",
    "P007": "Unexpected spread",
    "P009": "Invalid arrow function",
    "P010": "Unexpected end of input",
}

CLOSING_DELIMITERS = {
    "(": ")",
    "[": "]",
    "{": "}",
}


def describe_token(token: Token) -> str:
    """Short human-readable description of a token for messages."""
    if token.is_eof:
        return "end of input"
    return f"'{token.lexeme}'"


# Helper functions for creating common parser errors

def create_unexpected_token_error(found: Token, context: Optional[str] = None) -> ParseError:
    """Create an error for a token that cannot appear here."""
    if found.is_eof:
        return create_unexpected_eof_error("an expression", found.location)

    message = f"Unexpected token {describe_token(found)}"
    if context:
        message += f" {context}"

    return ParseError(
        message=message,
        location=found.location,
        token=found,
        code="P001",
        help_text=f"The token {describe_token(found)} cannot appear at this position.",
    )


def _quote(expected: str) -> str:
    # Descriptions such as "property name" are not quoted
    return expected if " " in expected else f"'{expected}'"


def create_expected_token_error(expected: str, found: Token) -> ParseError:
    """Create an error for a missing expected token."""
    if found.is_eof:
        return create_unexpected_eof_error(_quote(expected), found.location)

    return ParseError(
        message=f"Expected {_quote(expected)}, found {describe_token(found)}",
        location=found.location,
        expected=expected,
        token=found,
        code="P002",
        help_text=f"The parser expected to see {_quote(expected)} at this position.",
        suggestions=[f"Add {_quote(expected)} before {describe_token(found)}"]
    )


def create_unclosed_delimiter_error(open_token: Token, found: Token) -> ParseError:
    """Create an error for a bracket never closed before the end of input."""
    delimiter = open_token.lexeme
    closing = CLOSING_DELIMITERS.get(delimiter, delimiter)

    return ParseError(
        message=f"Unclosed delimiter '{delimiter}'",
        location=found.location,
        expected=closing,
        token=found,
        code="P004",
        help_text=f"The opening '{delimiter}' at {open_token.location} was never closed.",
        suggestions=[f"Add a closing '{closing}'", "Check for missing delimiters"]
    )


def create_invalid_expression_error(reason: str, location: SourceLocation,
                                    token: Optional[Token] = None) -> ParseError:
    """Create an error for an invalid expression."""
    return ParseError(
        message=f"Invalid expression: {reason}",
        location=location,
        token=token,
        code="P005",
        help_text=reason,
        suggestions=["Check the expression syntax", "Ensure all operators have operands"]
    )


def create_invalid_assignment_target_error(operator: str, location: SourceLocation,
                                           token: Optional[Token] = None) -> InvalidAssignmentTargetError:
    """Create an error for ``5 = 3``, ``a + b += 1``, ``f()++`` and the like."""
    return InvalidAssignmentTargetError(
        message=f"Invalid left-hand side in '{operator}'",
        location=location,
        token=token,
        code="P006",
        help_text="Only identifiers and non-optional member accesses can be assigned to.",
        suggestions=["Assign to a variable or a property such as 'obj.key'"]
    )


def create_unexpected_spread_error(token: Token, context: Optional[str] = None) -> UnexpectedSpreadError:
    """Create an error for ``...`` outside an array or argument list."""
    return UnexpectedSpreadError(
        message=f"Unexpected spread{' ' + context if context else ''}",
        location=token.location,
        token=token,
        code="P007",
        help_text="'...' may only appear as an array element or a call argument.",
    )


def create_invalid_arrow_error(reason: str, token: Token) -> ParseError:
    """Create an error for a malformed arrow function."""
    return ParseError(
        message=f"Invalid arrow function: {reason}",
        location=token.location,
        token=token,
        code="P009",
        help_text=reason,
    )


def create_unexpected_eof_error(expected: str, location: SourceLocation) -> ParseError:
    """Create an error for unexpected end of input."""
    return ParseError(
        message=f"Unexpected end of input, expected {expected}",
        location=location,
        expected=expected,
        code="P010",
        help_text=f"The parser reached the end of the input while expecting {expected}.",
        suggestions=[f"Add the missing {expected}", "Check for incomplete expressions"]
    )
