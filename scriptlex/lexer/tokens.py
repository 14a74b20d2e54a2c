"""
Token definitions for the scriptlex scanner.

This module defines the closed set of token kinds and the static lookup
tables the scanner is driven by:
- Keywords and literal words (true, false, null, undefined)
- Operators and punctuators (longest-match table)
- Single-character escape sequences for string literals

The tables are plain data. ``scriptlex.config.GrammarConfig`` wraps them in
read-only mappings and hands them to the lexer, so grammar variants never
touch scanner logic.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """
    Enumeration of all token kinds.

    Operators and punctuators share two coarse kinds; the lexeme tells them
    apart, which keeps the parser's dispatch tables keyed on plain strings.
    """

    IDENTIFIER = auto()             # name, $el, _private, \u006Eame
    KEYWORD = auto()                # if, typeof, new, this, ...

    # ========================================================================
    # Literals
    # ========================================================================
    NUMBER_LITERAL = auto()         # 42, 3.14, 1e-4, 0xFF, 0b1010, 0o17
    STRING_LITERAL = auto()         # "hello", 'world'
    TEMPLATE_LITERAL = auto()       # `sum: ${a + b}`
    BOOLEAN_LITERAL = auto()        # true, false
    NULL_LITERAL = auto()           # null
    UNDEFINED_LITERAL = auto()      # undefined

    # ========================================================================
    # Operators and punctuation
    # ========================================================================
    PUNCTUATOR = auto()             # ( ) [ ] { } ; , .
    OPERATOR = auto()               # + - === => ?. ... ??= etc.

    END_OF_INPUT = auto()


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    ``offset`` counts code points from the start of the input.
    """
    filename: str
    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents one lexical unit.

    Contains the token kind, lexeme (raw text), decoded value, source
    location, and whether a line terminator separated it from the previous
    token (the hint a statement parser needs for semicolon insertion).
    """
    type: TokenType
    lexeme: str
    value: Any
    location: SourceLocation
    preceded_by_line_terminator: bool = False

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r}, "
                f"nl={self.preceded_by_line_terminator})")

    @property
    def is_literal(self) -> bool:
        """Check if this token is a literal value."""
        return self.type in LITERAL_TYPES

    @property
    def is_keyword(self) -> bool:
        return self.type == TokenType.KEYWORD

    @property
    def is_operator(self) -> bool:
        return self.type in (TokenType.OPERATOR, TokenType.PUNCTUATOR)

    @property
    def is_identifier(self) -> bool:
        return self.type == TokenType.IDENTIFIER

    @property
    def is_eof(self) -> bool:
        return self.type == TokenType.END_OF_INPUT

    def is_symbol(self, lexeme: str) -> bool:
        """Check for a specific operator or punctuator."""
        return self.is_operator and self.lexeme == lexeme

    def is_word(self, word: str) -> bool:
        """Check for a specific keyword."""
        return self.is_keyword and self.value == word


LITERAL_TYPES = frozenset({
    TokenType.NUMBER_LITERAL,
    TokenType.STRING_LITERAL,
    TokenType.TEMPLATE_LITERAL,
    TokenType.BOOLEAN_LITERAL,
    TokenType.NULL_LITERAL,
    TokenType.UNDEFINED_LITERAL,
})


# Lookup tables for token recognition

# Reserved words. Operator-like words (typeof, in, new, ...) are keywords at
# the token level; the parser gives them operator meaning.
KEYWORDS = frozenset({
    "await", "break", "case", "catch", "class", "const", "continue",
    "debugger", "default", "delete", "do", "else", "export", "extends",
    "finally", "for", "function", "if", "import", "in", "instanceof",
    "let", "new", "return", "super", "switch", "this", "throw", "try",
    "typeof", "var", "void", "while", "with", "yield",
})

# Words that scan as literals: word -> (token type, decoded value)
LITERAL_WORDS = {
    "true": (TokenType.BOOLEAN_LITERAL, True),
    "false": (TokenType.BOOLEAN_LITERAL, False),
    "null": (TokenType.NULL_LITERAL, None),
    "undefined": (TokenType.UNDEFINED_LITERAL, None),
}

OPERATORS = {
    # Arithmetic
    "+": TokenType.OPERATOR,
    "-": TokenType.OPERATOR,
    "*": TokenType.OPERATOR,
    "/": TokenType.OPERATOR,
    "%": TokenType.OPERATOR,
    "**": TokenType.OPERATOR,
    "++": TokenType.OPERATOR,
    "--": TokenType.OPERATOR,

    # Assignment
    "=": TokenType.OPERATOR,
    "+=": TokenType.OPERATOR,
    "-=": TokenType.OPERATOR,
    "*=": TokenType.OPERATOR,
    "/=": TokenType.OPERATOR,
    "%=": TokenType.OPERATOR,
    "**=": TokenType.OPERATOR,
    "<<=": TokenType.OPERATOR,
    ">>=": TokenType.OPERATOR,
    ">>>=": TokenType.OPERATOR,
    "&=": TokenType.OPERATOR,
    "|=": TokenType.OPERATOR,
    "^=": TokenType.OPERATOR,
    "&&=": TokenType.OPERATOR,
    "||=": TokenType.OPERATOR,
    "??=": TokenType.OPERATOR,

    # Comparison
    "==": TokenType.OPERATOR,
    "!=": TokenType.OPERATOR,
    "===": TokenType.OPERATOR,
    "!==": TokenType.OPERATOR,
    "<": TokenType.OPERATOR,
    ">": TokenType.OPERATOR,
    "<=": TokenType.OPERATOR,
    ">=": TokenType.OPERATOR,

    # Logical
    "&&": TokenType.OPERATOR,
    "||": TokenType.OPERATOR,
    "??": TokenType.OPERATOR,
    "!": TokenType.OPERATOR,

    # Bitwise
    "&": TokenType.OPERATOR,
    "|": TokenType.OPERATOR,
    "^": TokenType.OPERATOR,
    "~": TokenType.OPERATOR,
    "<<": TokenType.OPERATOR,
    ">>": TokenType.OPERATOR,
    ">>>": TokenType.OPERATOR,

    # Conditional, arrows, chaining, spread
    "?": TokenType.OPERATOR,
    ":": TokenType.OPERATOR,
    "=>": TokenType.OPERATOR,
    "?.": TokenType.OPERATOR,
    "...": TokenType.OPERATOR,

    # Punctuation
    "(": TokenType.PUNCTUATOR,
    ")": TokenType.PUNCTUATOR,
    "[": TokenType.PUNCTUATOR,
    "]": TokenType.PUNCTUATOR,
    "{": TokenType.PUNCTUATOR,
    "}": TokenType.PUNCTUATOR,
    ";": TokenType.PUNCTUATOR,
    ",": TokenType.PUNCTUATOR,
    ".": TokenType.PUNCTUATOR,
}

# Single-character escapes inside string and template literals.
# \x, \u and line continuations are decoded by the lexer itself.
ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
    "`": "`",
    "/": "/",
}

LINE_TERMINATORS = frozenset({"\n", "\r"})

WHITESPACE = frozenset({" ", "\t", "\v", "\f", "\u00a0", "\ufeff"})

# Zero-width non-joiner / joiner may continue an identifier
IDENTIFIER_JOINERS = frozenset({"\u200c", "\u200d"})
