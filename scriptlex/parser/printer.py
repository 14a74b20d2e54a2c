"""
Source printer for scriptlex expression trees.

Groupings are explicit nodes, so the printer never has to invent
parentheses: every tree prints back to source that parses to the same
structure. Output is normalised (single spaces around binary operators,
``", "`` between list items) rather than a copy of the original layout.
"""

from typing import Any

from .ast_nodes import (
    ASTNode, ASTVisitor, Literal, Identifier, ThisExpression, ArrayLiteral,
    ObjectLiteral, Property, Grouping, MemberAccess, Call, NewExpression, Spread,
    Unary, Update, Await, Binary, Logical, Assignment, Conditional, Sequence,
    Parameter, BlockPlaceholder, ArrowFunction
)


class ExpressionPrinter(ASTVisitor):
    """Visitor that turns an expression tree back into source text."""

    def print(self, node: ASTNode) -> str:
        return node.accept(self)

    def generic_visit(self, node: ASTNode) -> Any:
        raise TypeError(f"Cannot print node of type {node.node_type.value}")

    def _join(self, nodes) -> str:
        return ", ".join(node.accept(self) for node in nodes)

    # Primary

    def visit_Literal(self, node: Literal) -> str:
        return node.raw

    def visit_Identifier(self, node: Identifier) -> str:
        return node.name

    def visit_ThisExpression(self, node: ThisExpression) -> str:
        return "this"

    def visit_ArrayLiteral(self, node: ArrayLiteral) -> str:
        return f"[{self._join(node.elements)}]"

    def visit_ObjectLiteral(self, node: ObjectLiteral) -> str:
        if not node.properties:
            return "{}"
        return f"{{ {self._join(node.properties)} }}"

    def visit_Property(self, node: Property) -> str:
        if node.shorthand:
            return node.value.accept(self)
        key = node.key.accept(self)
        if node.computed:
            key = f"[{key}]"
        return f"{key}: {node.value.accept(self)}"

    def visit_Grouping(self, node: Grouping) -> str:
        return f"({node.expression.accept(self)})"

    # Member access and calls

    def visit_MemberAccess(self, node: MemberAccess) -> str:
        obj = node.object.accept(self)

        # '1.x' would scan as the number '1.' followed by 'x'
        if (isinstance(node.object, Literal) and node.object.literal_type == "number"
                and not node.computed and not node.optional
                and obj.replace("_", "").isdigit()):
            obj += " "

        prop = node.property.accept(self)
        if node.computed:
            return f"{obj}?.[{prop}]" if node.optional else f"{obj}[{prop}]"
        return f"{obj}?.{prop}" if node.optional else f"{obj}.{prop}"

    def visit_Call(self, node: Call) -> str:
        callee = node.callee.accept(self)
        link = "?." if node.optional else ""
        return f"{callee}{link}({self._join(node.arguments)})"

    def visit_NewExpression(self, node: NewExpression) -> str:
        result = f"new {node.callee.accept(self)}"
        if node.has_arguments:
            result += f"({self._join(node.arguments)})"
        return result

    def visit_Spread(self, node: Spread) -> str:
        return f"...{node.argument.accept(self)}"

    # Operators

    def visit_Unary(self, node: Unary) -> str:
        operand = node.operand.accept(self)
        if node.operator.isalpha():
            return f"{node.operator} {operand}"
        # '- -a' and '+ +a' must not fuse into '--' / '++'
        if node.operator in ("+", "-") and operand.startswith(node.operator):
            return f"{node.operator} {operand}"
        return f"{node.operator}{operand}"

    def visit_Update(self, node: Update) -> str:
        operand = node.operand.accept(self)
        if node.prefix:
            return f"{node.operator}{operand}"
        return f"{operand}{node.operator}"

    def visit_Await(self, node: Await) -> str:
        return f"await {node.operand.accept(self)}"

    def visit_Binary(self, node: Binary) -> str:
        return f"{node.left.accept(self)} {node.operator} {node.right.accept(self)}"

    def visit_Logical(self, node: Logical) -> str:
        return f"{node.left.accept(self)} {node.operator} {node.right.accept(self)}"

    def visit_Assignment(self, node: Assignment) -> str:
        return f"{node.target.accept(self)} {node.operator} {node.value.accept(self)}"

    def visit_Conditional(self, node: Conditional) -> str:
        return (f"{node.test.accept(self)} ? {node.consequent.accept(self)} "
                f": {node.alternate.accept(self)}")

    def visit_Sequence(self, node: Sequence) -> str:
        return self._join(node.expressions)

    # Arrow functions

    def visit_Parameter(self, node: Parameter) -> str:
        return f"...{node.name}" if node.rest else node.name

    def visit_BlockPlaceholder(self, node: BlockPlaceholder) -> str:
        if not node.tokens:
            return "{}"
        parts = []
        for token in node.tokens:
            parts.append("\n" if token.preceded_by_line_terminator else " ")
            parts.append(token.lexeme)
        return "{" + "".join(parts) + " }"

    def visit_ArrowFunction(self, node: ArrowFunction) -> str:
        return f"({self._join(node.params)}) => {node.body.accept(self)}"


def print_expression(node: ASTNode) -> str:
    """
    Convert an expression tree to source text.

    Re-parsing the result yields a tree with the same ``to_dict()`` as
    ``node``.
    """
    return ExpressionPrinter().print(node)
