"""
Template literal substitutions.

The scanner keeps a template literal as one opaque token. This module splits
such a token into cooked text segments and the source of each ``${...}``
substitution, and can expand the substitutions into expression trees by
re-entering the scanner and parser.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..config import DEFAULT_CONFIG, GrammarConfig
from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.lexer import EscapeError, decode_escape
from ..lexer.errors import create_invalid_escape_error, create_unterminated_template_error
from .ast_nodes import Expression

logger = logging.getLogger(__name__)

# Escapes that only make sense inside a template
TEMPLATE_ESCAPES = {"$": "$"}


@dataclass(frozen=True)
class TemplateParts:
    """
    A template split around its substitutions.

    There is always exactly one more quasi than substitutions; an empty
    template has a single empty quasi.
    """
    quasis: Tuple[str, ...]
    substitutions: Tuple[str, ...]


def split_template(token: Token, config: Optional[GrammarConfig] = None) -> TemplateParts:
    """
    Split a TEMPLATE_LITERAL token into cooked text and substitution sources.

    Raises:
        ValueError: If the token is not a template literal
        LexError: If a text segment holds an invalid escape
    """
    if token.type != TokenType.TEMPLATE_LITERAL:
        raise ValueError(f"Expected a template literal token, got {token.type.name}")

    config = config or DEFAULT_CONFIG
    escapes = {**config.escapes, **TEMPLATE_ESCAPES}
    body = token.value

    quasis = []
    substitutions = []
    cooked = []
    i = 0

    while i < len(body):
        char = body[i]

        if char == '\\':
            if i + 1 >= len(body):
                raise create_unterminated_template_error(token.location)
            try:
                decoded, i = decode_escape(body, i + 1, escapes)
            except EscapeError as e:
                raise create_invalid_escape_error(e.sequence, _location_at(token, i), e.reason) from None
            cooked.append(decoded)
        elif body.startswith('${', i):
            end = _skip_substitution(token, body, i + 2)
            quasis.append(''.join(cooked))
            substitutions.append(body[i + 2:end - 1])
            cooked = []
            i = end
        elif char == '\r':
            # Raw line terminators cook to '\n'
            cooked.append('\n')
            i += 2 if body.startswith('\r\n', i) else 1
        else:
            cooked.append(char)
            i += 1

    quasis.append(''.join(cooked))
    return TemplateParts(tuple(quasis), tuple(substitutions))


def expand_template(token: Token, config: Optional[GrammarConfig] = None
                    ) -> Tuple[Tuple[str, ...], Tuple[Expression, ...]]:
    """
    Split a template and parse each substitution as an expression.

    Returns:
        (quasis, expressions)

    Raises:
        LexError: If a substitution fails to scan
        ParseError: If a substitution is not exactly one expression
    """
    from .parser import parse_string

    parts = split_template(token, config)
    logger.debug("expanding template at %s with %d substitution(s)",
                 token.location, len(parts.substitutions))

    expressions = tuple(
        parse_string(source, token.location.filename, config)
        for source in parts.substitutions
    )
    return parts.quasis, expressions


def _location_at(token: Token, index: int) -> SourceLocation:
    """Location of ``token.value[index]`` (the body starts after the backtick)."""
    prefix = token.value[:index]
    line = token.location.line
    column = token.location.column + 1 + index

    # Count '\r\n' once
    breaks = prefix.replace('\r\n', '\n').replace('\r', '\n')
    if '\n' in breaks:
        line += breaks.count('\n')
        column = len(breaks) - breaks.rfind('\n')

    return SourceLocation(token.location.filename, line, column, token.location.offset + 1 + index)


def _skip_substitution(token: Token, text: str, i: int) -> int:
    """Return the index just past the '}' closing a substitution opened before ``i``."""
    depth = 1
    while i < len(text):
        char = text[i]
        if char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return i + 1
        elif char in ('"', "'"):
            i = _skip_quoted(token, text, i)
            continue
        elif char == '`':
            i = _skip_nested_template(token, text, i + 1)
            continue
        i += 1

    raise create_unterminated_template_error(token.location)


def _skip_quoted(token: Token, text: str, i: int) -> int:
    quote = text[i]
    i += 1
    while i < len(text) and text[i] != quote:
        i += 2 if text[i] == '\\' else 1
    if i >= len(text):
        raise create_unterminated_template_error(token.location)
    return i + 1


def _skip_nested_template(token: Token, text: str, i: int) -> int:
    while i < len(text):
        if text[i] == '\\':
            i += 2
        elif text[i] == '`':
            return i + 1
        elif text.startswith('${', i):
            i = _skip_substitution(token, text, i + 2)
        else:
            i += 1

    raise create_unterminated_template_error(token.location)
