"""
scriptlex

A lexical scanner and expression parser for a JavaScript-like scripting
language.

Architecture:
    scriptlex/
    ├── lexer/           # Tokenization and lexical analysis
    ├── parser/          # Expression parsing, printing, templates
    ├── precedence.py    # Operator binding strengths
    ├── config.py        # Grammar tables and JSON overlays
    └── cli.py           # Command-line tool

License: MIT
"""

__version__ = "0.1.0"
__license__ = "MIT"

# The lexer package must load before config, which reads its token tables
from .lexer import Lexer, Token, TokenType, SourceLocation, LexError, scan, scan_file
from .config import GrammarConfig, ConfigError, DEFAULT_CONFIG, load_config
from .parser import (
    Parser, ParseError, parse_expression, parse_string, parse_file,
    print_expression, split_template, expand_template
)

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Token",
    "TokenType",
    "SourceLocation",
    "GrammarConfig",
    "DEFAULT_CONFIG",

    # Functions
    "scan",
    "scan_file",
    "parse_expression",
    "parse_string",
    "parse_file",
    "print_expression",
    "split_template",
    "expand_template",
    "load_config",

    # Errors
    "LexError",
    "ParseError",
    "ConfigError",

    # Version info
    "__version__",
    "__license__",
]
