"""
Abstract Syntax Tree node definitions for scriptlex expressions.

Each node records the source span it was parsed from and supports the
visitor pattern. Nodes are immutable once built: child sequences are tuples,
attributes cannot be reassigned, and there are no parent pointers, so a
tree can be shared freely between threads and callers.

``to_dict`` produces a span-free structural dump; two trees that print the
same source compare equal through it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from ..lexer.tokens import SourceLocation, Token


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Primary
    LITERAL = "Literal"
    IDENTIFIER = "Identifier"
    THIS = "ThisExpression"
    ARRAY_LITERAL = "ArrayLiteral"
    OBJECT_LITERAL = "ObjectLiteral"
    PROPERTY = "Property"
    GROUPING = "Grouping"

    # Member access and calls
    MEMBER_ACCESS = "MemberAccess"
    CALL = "Call"
    NEW_EXPRESSION = "NewExpression"
    SPREAD = "Spread"

    # Operators
    UNARY = "Unary"
    UPDATE = "Update"
    BINARY = "Binary"
    LOGICAL = "Logical"
    ASSIGNMENT = "Assignment"
    CONDITIONAL = "Conditional"
    SEQUENCE = "Sequence"
    AWAIT = "Await"

    # Functions
    ARROW_FUNCTION = "ArrowFunction"
    PARAMETER = "Parameter"
    BLOCK_PLACEHOLDER = "BlockPlaceholder"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


class ASTVisitor(ABC):
    """
    Abstract visitor interface for traversing AST nodes.

    ``visit`` dispatches to ``visit_<NodeType>`` (for example
    ``visit_MemberAccess``) and falls back to ``generic_visit``.
    """

    def visit(self, node: 'ASTNode') -> Any:
        """Visit a node by dispatching on its node type."""
        method = getattr(self, f"visit_{node.node_type.value}", None)
        if method is None:
            return self.generic_visit(node)
        return method(node)

    @abstractmethod
    def generic_visit(self, node: 'ASTNode') -> Any:
        """Visit a node with no dedicated method."""
        pass


class ASTNode(ABC):
    """Base class for all AST nodes."""

    def __init__(self, node_type: ASTNodeType, span: SourceSpan):
        self.node_type = node_type
        self.span = span

    def __setattr__(self, name: str, value: Any):
        if name in self.__dict__:
            raise AttributeError(f"{self.__class__.__name__}.{name} is read-only")
        super().__setattr__(name, value)

    def __delattr__(self, name: str):
        raise AttributeError(f"{self.__class__.__name__}.{name} is read-only")

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes."""
        pass

    @abstractmethod
    def _fields(self) -> Dict[str, Any]:
        """Structural fields, excluding the span."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Span-free structural dump, suitable for JSON and comparisons."""
        result: Dict[str, Any] = {"type": self.node_type.value}
        for key, value in self._fields().items():
            result[key] = _dump(value)
        return result

    def walk(self):
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children():
            yield from child.walk()

    def __str__(self) -> str:
        return f"{self.node_type.value}@{self.span}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(span={self.span})"


def _dump(value: Any) -> Any:
    if isinstance(value, ASTNode):
        return value.to_dict()
    if isinstance(value, Token):
        return value.lexeme
    if isinstance(value, tuple):
        return [_dump(item) for item in value]
    return value


# ============================================================================
# Primary expressions
# ============================================================================

class Expression(ASTNode):
    """Base class for expression nodes."""
    pass


class Literal(Expression):
    """
    Literal value: number, string, template, boolean, null or undefined.

    ``raw`` keeps the source text so the printer can reproduce it exactly.
    Template literals carry their raw body as ``value``.
    """

    def __init__(self, value: Any, literal_type: str, raw: str, span: SourceSpan):
        super().__init__(ASTNodeType.LITERAL, span)
        self.value = value
        self.literal_type = literal_type
        self.raw = raw

    def children(self) -> List[ASTNode]:
        return []

    def _fields(self) -> Dict[str, Any]:
        return {"value": self.value, "literal_type": self.literal_type, "raw": self.raw}


class Identifier(Expression):
    """Identifier reference; ``name`` is the decoded name."""

    def __init__(self, name: str, span: SourceSpan):
        super().__init__(ASTNodeType.IDENTIFIER, span)
        self.name = name

    def children(self) -> List[ASTNode]:
        return []

    def _fields(self) -> Dict[str, Any]:
        return {"name": self.name}


class ThisExpression(Expression):
    """The ``this`` keyword."""

    def __init__(self, span: SourceSpan):
        super().__init__(ASTNodeType.THIS, span)

    def children(self) -> List[ASTNode]:
        return []

    def _fields(self) -> Dict[str, Any]:
        return {}


class Spread(ASTNode):
    """``...argument``; legal only as an array element or call/new argument."""

    def __init__(self, argument: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.SPREAD, span)
        self.argument = argument

    def children(self) -> List[ASTNode]:
        return [self.argument]

    def _fields(self) -> Dict[str, Any]:
        return {"argument": self.argument}


class ArrayLiteral(Expression):
    """Array literal [a, b, ...c]."""

    def __init__(self, elements: Tuple[Union[Expression, Spread], ...], span: SourceSpan):
        super().__init__(ASTNodeType.ARRAY_LITERAL, span)
        self.elements = tuple(elements)

    def children(self) -> List[ASTNode]:
        return list(self.elements)

    def _fields(self) -> Dict[str, Any]:
        return {"elements": self.elements}


class Property(ASTNode):
    """
    One ``key: value`` entry of an object literal.

    ``key`` is an Identifier (plain names, keywords included), a Literal
    (string or number keys) or any expression when ``computed``.
    """

    def __init__(self, key: Expression, value: Expression, computed: bool,
                 shorthand: bool, span: SourceSpan):
        super().__init__(ASTNodeType.PROPERTY, span)
        self.key = key
        self.value = value
        self.computed = computed
        self.shorthand = shorthand

    def children(self) -> List[ASTNode]:
        if self.shorthand:
            return [self.value]
        return [self.key, self.value]

    def _fields(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "value": self.value,
            "computed": self.computed,
            "shorthand": self.shorthand,
        }


class ObjectLiteral(Expression):
    """Object literal { a: 1, b, [c]: 2 }."""

    def __init__(self, properties: Tuple[Property, ...], span: SourceSpan):
        super().__init__(ASTNodeType.OBJECT_LITERAL, span)
        self.properties = tuple(properties)

    def children(self) -> List[ASTNode]:
        return list(self.properties)

    def _fields(self) -> Dict[str, Any]:
        return {"properties": self.properties}


class Grouping(Expression):
    """Parenthesized expression, kept so printing reproduces the parentheses."""

    def __init__(self, expression: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.GROUPING, span)
        self.expression = expression

    def children(self) -> List[ASTNode]:
        return [self.expression]

    def _fields(self) -> Dict[str, Any]:
        return {"expression": self.expression}


# ============================================================================
# Member access, calls and construction
# ============================================================================

def is_in_optional_chain(node: ASTNode) -> bool:
    """True if ``node`` is a link of an optional chain."""
    # A Grouping has no such attribute, which is what ends a chain
    return getattr(node, "in_optional_chain", False)


class MemberAccess(Expression):
    """
    Property access ``object.property`` or ``object[property]``.

    ``optional`` marks a link written with ``?.``; ``in_optional_chain`` is
    set on that link and every later link of the same chain.
    """

    def __init__(self, object: Expression, property: Expression, computed: bool,
                 optional: bool, in_optional_chain: bool, span: SourceSpan):
        super().__init__(ASTNodeType.MEMBER_ACCESS, span)
        self.object = object
        self.property = property
        self.computed = computed
        self.optional = optional
        self.in_optional_chain = in_optional_chain

    @property
    def is_chain_start(self) -> bool:
        """True for the ``?.`` link that opens an optional chain."""
        return self.optional and not is_in_optional_chain(self.object)

    def children(self) -> List[ASTNode]:
        return [self.object, self.property]

    def _fields(self) -> Dict[str, Any]:
        return {
            "object": self.object,
            "property": self.property,
            "computed": self.computed,
            "optional": self.optional,
            "in_optional_chain": self.in_optional_chain,
        }


class Call(Expression):
    """Function call ``callee(arguments)``, optionally ``callee?.(arguments)``."""

    def __init__(self, callee: Expression, arguments: Tuple[Union[Expression, Spread], ...],
                 optional: bool, in_optional_chain: bool, span: SourceSpan):
        super().__init__(ASTNodeType.CALL, span)
        self.callee = callee
        self.arguments = tuple(arguments)
        self.optional = optional
        self.in_optional_chain = in_optional_chain

    @property
    def is_chain_start(self) -> bool:
        return self.optional and not is_in_optional_chain(self.callee)

    def children(self) -> List[ASTNode]:
        return [self.callee] + list(self.arguments)

    def _fields(self) -> Dict[str, Any]:
        return {
            "callee": self.callee,
            "arguments": self.arguments,
            "optional": self.optional,
            "in_optional_chain": self.in_optional_chain,
        }


class NewExpression(Expression):
    """``new callee(arguments)``; ``has_arguments`` is False for ``new X``."""

    def __init__(self, callee: Expression, arguments: Tuple[Union[Expression, Spread], ...],
                 has_arguments: bool, span: SourceSpan):
        super().__init__(ASTNodeType.NEW_EXPRESSION, span)
        self.callee = callee
        self.arguments = tuple(arguments)
        self.has_arguments = has_arguments

    def children(self) -> List[ASTNode]:
        return [self.callee] + list(self.arguments)

    def _fields(self) -> Dict[str, Any]:
        return {
            "callee": self.callee,
            "arguments": self.arguments,
            "has_arguments": self.has_arguments,
        }


# ============================================================================
# Operators
# ============================================================================

class Unary(Expression):
    """Prefix operator: ! ~ + - typeof void delete."""

    def __init__(self, operator: str, operand: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.UNARY, span)
        self.operator = operator
        self.operand = operand

    def children(self) -> List[ASTNode]:
        return [self.operand]

    def _fields(self) -> Dict[str, Any]:
        return {"operator": self.operator, "operand": self.operand}


class Update(Expression):
    """Increment or decrement, prefix (``++a``) or postfix (``a++``)."""

    def __init__(self, operator: str, operand: Expression, prefix: bool, span: SourceSpan):
        super().__init__(ASTNodeType.UPDATE, span)
        self.operator = operator
        self.operand = operand
        self.prefix = prefix

    def children(self) -> List[ASTNode]:
        return [self.operand]

    def _fields(self) -> Dict[str, Any]:
        return {"operator": self.operator, "operand": self.operand, "prefix": self.prefix}


class Await(Expression):
    """``await operand``."""

    def __init__(self, operand: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.AWAIT, span)
        self.operand = operand

    def children(self) -> List[ASTNode]:
        return [self.operand]

    def _fields(self) -> Dict[str, Any]:
        return {"operand": self.operand}


class Binary(Expression):
    """Binary operation (arithmetic, comparison, bitwise, ``in``, ``instanceof``)."""

    def __init__(self, left: Expression, operator: str, right: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.BINARY, span)
        self.left = left
        self.operator = operator
        self.right = right

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]

    def _fields(self) -> Dict[str, Any]:
        return {"operator": self.operator, "left": self.left, "right": self.right}


class Logical(Expression):
    """Short-circuit operation: && || ??."""

    def __init__(self, left: Expression, operator: str, right: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.LOGICAL, span)
        self.left = left
        self.operator = operator
        self.right = right

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]

    def _fields(self) -> Dict[str, Any]:
        return {"operator": self.operator, "left": self.left, "right": self.right}


class Assignment(Expression):
    """Assignment ``target op value``; target is an identifier or member access."""

    def __init__(self, target: Expression, operator: str, value: Expression, span: SourceSpan):
        super().__init__(ASTNodeType.ASSIGNMENT, span)
        self.target = target
        self.operator = operator
        self.value = value

    def children(self) -> List[ASTNode]:
        return [self.target, self.value]

    def _fields(self) -> Dict[str, Any]:
        return {"operator": self.operator, "target": self.target, "value": self.value}


class Conditional(Expression):
    """Ternary ``test ? consequent : alternate``."""

    def __init__(self, test: Expression, consequent: Expression, alternate: Expression,
                 span: SourceSpan):
        super().__init__(ASTNodeType.CONDITIONAL, span)
        self.test = test
        self.consequent = consequent
        self.alternate = alternate

    def children(self) -> List[ASTNode]:
        return [self.test, self.consequent, self.alternate]

    def _fields(self) -> Dict[str, Any]:
        return {"test": self.test, "consequent": self.consequent, "alternate": self.alternate}


class Sequence(Expression):
    """Comma expression; its value is the last expression."""

    def __init__(self, expressions: Tuple[Expression, ...], span: SourceSpan):
        super().__init__(ASTNodeType.SEQUENCE, span)
        self.expressions = tuple(expressions)

    def children(self) -> List[ASTNode]:
        return list(self.expressions)

    def _fields(self) -> Dict[str, Any]:
        return {"expressions": self.expressions}


# ============================================================================
# Arrow functions
# ============================================================================

class Parameter(ASTNode):
    """Arrow function parameter; ``rest`` marks ``...name``."""

    def __init__(self, name: str, rest: bool, span: SourceSpan):
        super().__init__(ASTNodeType.PARAMETER, span)
        self.name = name
        self.rest = rest

    def children(self) -> List[ASTNode]:
        return []

    def _fields(self) -> Dict[str, Any]:
        return {"name": self.name, "rest": self.rest}


class BlockPlaceholder(ASTNode):
    """
    Opaque block body of an arrow function.

    Statements are outside the expression grammar, so the tokens between the
    braces are kept unparsed for a statement parser to pick up.
    """

    def __init__(self, tokens: Tuple[Token, ...], span: SourceSpan):
        super().__init__(ASTNodeType.BLOCK_PLACEHOLDER, span)
        self.tokens = tuple(tokens)

    def children(self) -> List[ASTNode]:
        return []

    def _fields(self) -> Dict[str, Any]:
        return {"tokens": self.tokens}


class ArrowFunction(Expression):
    """Arrow function ``(params) => body``."""

    def __init__(self, params: Tuple[Parameter, ...],
                 body: Union[Expression, BlockPlaceholder], span: SourceSpan):
        super().__init__(ASTNodeType.ARROW_FUNCTION, span)
        self.params = tuple(params)
        self.body = body

    @property
    def rest_parameter(self) -> Optional[Parameter]:
        if self.params and self.params[-1].rest:
            return self.params[-1]
        return None

    def children(self) -> List[ASTNode]:
        return list(self.params) + [self.body]

    def _fields(self) -> Dict[str, Any]:
        return {"params": self.params, "body": self.body}
