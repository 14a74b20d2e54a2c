"""
Operator precedence tables for the expression parser.

Binding strength runs loosest to tightest. Binary operators map a lexeme to
an ``OperatorInfo``; adding or removing an operator is an edit to these
tables (or a ``GrammarConfig`` overlay), not to the parser.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum


class Precedence(IntEnum):
    """Operator precedence levels for precedence climbing."""
    NONE = 0
    COMMA = 1            # ,
    ASSIGNMENT = 2       # = += -= ... and arrow functions
    CONDITIONAL = 3      # ?:
    NULLISH = 4          # ??
    LOGICAL_OR = 5       # ||
    LOGICAL_AND = 6      # &&
    BITWISE_OR = 7       # |
    BITWISE_XOR = 8      # ^
    BITWISE_AND = 9      # &
    EQUALITY = 10        # == != === !==
    RELATIONAL = 11      # < > <= >= instanceof in
    SHIFT = 12           # << >> >>>
    ADDITIVE = 13        # + -
    MULTIPLICATIVE = 14  # * / %
    EXPONENT = 15        # **
    UNARY = 16           # ! ~ + - typeof void delete await, prefix ++ --
    POSTFIX = 17         # postfix ++ --
    CALL = 18            # . [] ?. () new
    PRIMARY = 19


class Associativity(Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class OperatorInfo:
    """Binding strength of one binary operator."""
    precedence: Precedence
    associativity: Associativity = Associativity.LEFT

    @property
    def right_precedence(self) -> Precedence:
        """Minimum precedence for the right operand."""
        if self.associativity == Associativity.RIGHT:
            return self.precedence
        return Precedence(self.precedence + 1)


BINARY_OPERATORS = {
    "??": OperatorInfo(Precedence.NULLISH),
    "||": OperatorInfo(Precedence.LOGICAL_OR),
    "&&": OperatorInfo(Precedence.LOGICAL_AND),

    "|": OperatorInfo(Precedence.BITWISE_OR),
    "^": OperatorInfo(Precedence.BITWISE_XOR),
    "&": OperatorInfo(Precedence.BITWISE_AND),

    "==": OperatorInfo(Precedence.EQUALITY),
    "!=": OperatorInfo(Precedence.EQUALITY),
    "===": OperatorInfo(Precedence.EQUALITY),
    "!==": OperatorInfo(Precedence.EQUALITY),

    "<": OperatorInfo(Precedence.RELATIONAL),
    ">": OperatorInfo(Precedence.RELATIONAL),
    "<=": OperatorInfo(Precedence.RELATIONAL),
    ">=": OperatorInfo(Precedence.RELATIONAL),
    "instanceof": OperatorInfo(Precedence.RELATIONAL),
    "in": OperatorInfo(Precedence.RELATIONAL),

    "<<": OperatorInfo(Precedence.SHIFT),
    ">>": OperatorInfo(Precedence.SHIFT),
    ">>>": OperatorInfo(Precedence.SHIFT),

    "+": OperatorInfo(Precedence.ADDITIVE),
    "-": OperatorInfo(Precedence.ADDITIVE),

    "*": OperatorInfo(Precedence.MULTIPLICATIVE),
    "/": OperatorInfo(Precedence.MULTIPLICATIVE),
    "%": OperatorInfo(Precedence.MULTIPLICATIVE),

    "**": OperatorInfo(Precedence.EXPONENT, Associativity.RIGHT),
}

# Binary operators that build Logical rather than Binary nodes
LOGICAL_OPERATORS = frozenset({"&&", "||", "??"})

# Prefix operators that build Unary nodes. await, ++ and -- have their own
# node kinds.
UNARY_OPERATORS = frozenset({"!", "~", "+", "-", "typeof", "void", "delete"})

ASSIGNMENT_OPERATORS = frozenset({
    "=", "+=", "-=", "*=", "/=", "%=", "**=",
    "<<=", ">>=", ">>>=", "&=", "|=", "^=",
    "&&=", "||=", "??=",
})

UPDATE_OPERATORS = frozenset({"++", "--"})
