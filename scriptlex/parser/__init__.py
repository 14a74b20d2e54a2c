"""
scriptlex Parser Package

Implements a Pratt (top-down operator precedence) parser for the expression
grammar, plus the printer and template helpers built on the same trees.

Key Features:
- Table-driven precedence climbing, configurable through GrammarConfig
- Arrow functions via speculative parameter-list parsing with rollback
- Optional chaining with explicit chain marking
- Immutable AST nodes with source spans and a structural dump
"""

from .ast_nodes import (
    ASTNode, ASTNodeType, ASTVisitor, SourceSpan, Expression,
    Literal, Identifier, ThisExpression, ArrayLiteral, ObjectLiteral, Property,
    Grouping, MemberAccess, Call, NewExpression, Spread, Unary, Update, Await,
    Binary, Logical, Assignment, Conditional, Sequence,
    Parameter, BlockPlaceholder, ArrowFunction
)
from .parser import Parser, parse_expression, parse_string, parse_file
from .errors import (
    ParseError, InvalidAssignmentTargetError, UnexpectedSpreadError, PARSER_ERROR_CODES
)
from .printer import ExpressionPrinter, print_expression
from .templates import TemplateParts, split_template, expand_template

__all__ = [
    # Core parser
    "Parser", "parse_expression", "parse_string", "parse_file",

    # AST nodes
    "ASTNode", "ASTNodeType", "ASTVisitor", "SourceSpan", "Expression",
    "Literal", "Identifier", "ThisExpression", "ArrayLiteral", "ObjectLiteral",
    "Property", "Grouping", "MemberAccess", "Call", "NewExpression", "Spread",
    "Unary", "Update", "Await", "Binary", "Logical", "Assignment",
    "Conditional", "Sequence", "Parameter", "BlockPlaceholder", "ArrowFunction",

    # Printing and templates
    "ExpressionPrinter", "print_expression",
    "TemplateParts", "split_template", "expand_template",

    # Error handling
    "ParseError", "InvalidAssignmentTargetError", "UnexpectedSpreadError",
    "PARSER_ERROR_CODES",
]
