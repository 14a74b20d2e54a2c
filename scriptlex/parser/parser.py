"""
scriptlex Pratt Parser Implementation

Implements a top-down operator precedence (Pratt) parser for the expression
grammar. Prefix and infix parsing functions are looked up in tables keyed on
operator lexemes, decoded keywords, or token types (for literals and
identifiers); binding strengths come from the active GrammarConfig, so a
grammar variant never needs a parser change.

Arrow functions are recognised where an assignment-level expression starts,
by speculatively reading a parameter list and rolling the cursor back when
no ``=>`` follows.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..config import DEFAULT_CONFIG, GrammarConfig
from ..lexer.lexer import decode_word
from ..lexer.tokens import Token, TokenType, SourceLocation
from ..precedence import Precedence, UPDATE_OPERATORS
from .ast_nodes import (
    SourceSpan, Expression, Literal, Identifier, ThisExpression, ArrayLiteral,
    ObjectLiteral, Property, Grouping, MemberAccess, Call, NewExpression, Spread,
    Unary, Update, Await, Binary, Logical, Assignment, Conditional, Sequence,
    Parameter, BlockPlaceholder, ArrowFunction, is_in_optional_chain
)
from .errors import (
    CLOSING_DELIMITERS, create_unexpected_token_error, create_expected_token_error,
    create_unclosed_delimiter_error, create_invalid_expression_error,
    create_invalid_assignment_target_error, create_unexpected_spread_error,
    create_invalid_arrow_error
)

logger = logging.getLogger(__name__)

LITERAL_KINDS = {
    TokenType.NUMBER_LITERAL: "number",
    TokenType.STRING_LITERAL: "string",
    TokenType.TEMPLATE_LITERAL: "template",
    TokenType.BOOLEAN_LITERAL: "boolean",
    TokenType.NULL_LITERAL: "null",
    TokenType.UNDEFINED_LITERAL: "undefined",
}

# Token kinds dispatched on their spelling rather than their type
LEXEME_KEYED = frozenset({TokenType.OPERATOR, TokenType.PUNCTUATOR, TokenType.KEYWORD})

# Words usable as a property name after '.' besides identifiers
NAME_LIKE = frozenset({
    TokenType.KEYWORD, TokenType.BOOLEAN_LITERAL,
    TokenType.NULL_LITERAL, TokenType.UNDEFINED_LITERAL,
})

ParserKey = Union[TokenType, str]


class Parser:
    """
    scriptlex Pratt parser.

    Consumes a token list ending in END_OF_INPUT and builds an expression
    tree. There is no error recovery: the first ParseError propagates.
    """

    def __init__(self, tokens: List[Token], config: Optional[GrammarConfig] = None):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: List of tokens from the lexer
            config: Grammar tables; DEFAULT_CONFIG when omitted
        """
        self.tokens = list(tokens)
        if not self.tokens or not self.tokens[-1].is_eof:
            location = (self.tokens[-1].location if self.tokens
                        else SourceLocation("<string>", 1, 1, 0))
            self.tokens.append(Token(TokenType.END_OF_INPUT, "", None, location))

        self.current = 0
        self.config = config or DEFAULT_CONFIG

        # Initialize parsing tables
        self._init_parsing_tables()

    def _init_parsing_tables(self):
        """Initialize operator precedence and parsing function tables."""

        # Prefix parsing functions (for tokens that can start expressions)
        self.prefix_parsers: Dict[ParserKey, Callable[[], Expression]] = {
            # Literals
            TokenType.NUMBER_LITERAL: self._parse_literal,
            TokenType.STRING_LITERAL: self._parse_literal,
            TokenType.TEMPLATE_LITERAL: self._parse_literal,
            TokenType.BOOLEAN_LITERAL: self._parse_literal,
            TokenType.NULL_LITERAL: self._parse_literal,
            TokenType.UNDEFINED_LITERAL: self._parse_literal,

            # Identifiers
            TokenType.IDENTIFIER: self._parse_identifier,
            "this": self._parse_this,

            # Brackets
            "(": self._parse_grouping,
            "[": self._parse_array_literal,
            "{": self._parse_object_literal,

            # Prefix operators with their own node kinds
            "new": self._parse_new,
            "await": self._parse_await,
            "...": self._parse_misplaced_spread,
        }

        for operator in self.config.unary_operators:
            self.prefix_parsers[operator] = self._parse_unary

        for operator in UPDATE_OPERATORS:
            self.prefix_parsers[operator] = self._parse_prefix_update

        # Infix parsing functions (binary operators and postfix operations)
        self.infix_parsers: Dict[str, Callable[[Expression], Expression]] = {
            ",": self._parse_sequence,
            "?": self._parse_conditional,
            ".": self._parse_member_access,
            "?.": self._parse_optional_chain,
            "[": self._parse_computed_member,
            "(": self._parse_call,
        }

        # Precedence table
        self.precedences: Dict[str, Precedence] = {
            ",": Precedence.COMMA,
            "?": Precedence.CONDITIONAL,
            ".": Precedence.CALL,
            "?.": Precedence.CALL,
            "[": Precedence.CALL,
            "(": Precedence.CALL,
        }

        for operator in UPDATE_OPERATORS:
            self.infix_parsers[operator] = self._parse_postfix_update
            self.precedences[operator] = Precedence.POSTFIX

        for operator in self.config.assignment_operators:
            self.infix_parsers[operator] = self._parse_assignment
            self.precedences[operator] = Precedence.ASSIGNMENT

        for operator, info in self.config.binary_operators.items():
            self.infix_parsers[operator] = self._parse_binary
            self.precedences[operator] = info.precedence

    def parse(self) -> Expression:
        """
        Parse the whole token list as one expression.

        Raises:
            ParseError: On a syntax error or if tokens remain afterwards
        """
        expression = self.parse_expression()

        if not self._peek().is_eof:
            raise create_unexpected_token_error(self._peek(), "after expression")

        return expression

    def parse_expression(self) -> Expression:
        """Parse one expression (comma sequences included) from the cursor."""
        return self._parse_precedence(Precedence.COMMA)

    def remaining_tokens(self) -> List[Token]:
        """Tokens not consumed yet, always ending with END_OF_INPUT."""
        return self.tokens[self.current:]

    def _parse_precedence(self, precedence: Precedence) -> Expression:
        """Parse expression with given minimum precedence."""
        left = None

        # Arrow functions sit at the assignment level
        if precedence <= Precedence.ASSIGNMENT:
            left = self._try_parse_arrow_function()

        if left is not None:
            follower = self._peek()
            if self._get_precedence(follower) > Precedence.COMMA:
                raise create_invalid_arrow_error(
                    f"an arrow function cannot be followed by {follower.lexeme!r}; "
                    "wrap it in parentheses", follower
                )
        else:
            token = self._peek()
            prefix_parser = self.prefix_parsers.get(self._key(token))
            if prefix_parser is None:
                raise create_unexpected_token_error(token, "in expression")

            # Parse left side with prefix parser
            left = prefix_parser()

        # Parse infix operators
        while precedence <= self._get_precedence(self._peek()):
            infix_parser = self.infix_parsers[self._key(self._peek())]
            left = infix_parser(left)

        return left

    def _key(self, token: Token) -> ParserKey:
        # Keywords dispatch on the decoded word, so \u0074ypeof is typeof
        if token.type == TokenType.KEYWORD:
            return token.value
        if token.type in LEXEME_KEYED:
            return token.lexeme
        return token.type

    def _get_precedence(self, token: Token) -> Precedence:
        """Get the infix precedence of a token (NONE if it is not infix)."""
        if token.type not in LEXEME_KEYED:
            return Precedence.NONE

        key = self._key(token)

        # No line terminator is allowed before postfix ++ / --
        if key in UPDATE_OPERATORS and token.preceded_by_line_terminator:
            return Precedence.NONE

        return self.precedences.get(key, Precedence.NONE)

    # Prefix parsers (tokens that can start expressions)

    def _parse_literal(self) -> Literal:
        """Parse number, string, template, boolean, null and undefined literals."""
        token = self._advance()
        return Literal(token.value, LITERAL_KINDS[token.type], token.lexeme, self._token_span(token))

    def _parse_identifier(self) -> Identifier:
        """Parse identifier."""
        token = self._advance()
        return Identifier(token.value, self._token_span(token))

    def _parse_this(self) -> ThisExpression:
        token = self._advance()
        return ThisExpression(self._token_span(token))

    def _parse_unary(self) -> Unary:
        """Parse unary operation."""
        operator_token = self._advance()

        # Parse operand with unary precedence
        operand = self._parse_precedence(Precedence.UNARY)

        span = SourceSpan(operator_token.location, operand.span.end)
        return Unary(self._key(operator_token), operand, span)

    def _parse_await(self) -> Await:
        await_token = self._advance()
        operand = self._parse_precedence(Precedence.UNARY)
        return Await(operand, SourceSpan(await_token.location, operand.span.end))

    def _parse_prefix_update(self) -> Update:
        """Parse ``++x`` / ``--x``."""
        operator_token = self._advance()
        operand = self._parse_precedence(Precedence.UNARY)
        self._check_assignment_target(operand, operator_token)

        span = SourceSpan(operator_token.location, operand.span.end)
        return Update(operator_token.lexeme, operand, True, span)

    def _parse_misplaced_spread(self) -> Expression:
        raise create_unexpected_spread_error(self._peek())

    def _parse_grouping(self) -> Grouping:
        """Parse parenthesized expression."""
        open_token = self._advance()  # Consume (

        if self._check(")"):
            raise create_invalid_expression_error(
                "empty parentheses are only allowed before '=>'",
                self._peek().location, self._peek()
            )

        expression = self._parse_precedence(Precedence.COMMA)

        close_token = self._consume_closing(open_token)
        return Grouping(expression, SourceSpan(open_token.location, close_token.location))

    def _parse_array_literal(self) -> ArrayLiteral:
        """Parse array literal [1, 2, ...rest]."""
        open_token = self._advance()  # Consume [

        elements = []
        while not self._check("]"):
            if self._check(","):
                raise create_invalid_expression_error(
                    "array holes are not supported", self._peek().location, self._peek()
                )
            elements.append(self._parse_element())
            if not self._match(","):
                break

        close_token = self._consume_closing(open_token)
        return ArrayLiteral(tuple(elements), SourceSpan(open_token.location, close_token.location))

    def _parse_object_literal(self) -> ObjectLiteral:
        """Parse object literal { key: value, shorthand, [computed]: value }."""
        open_token = self._advance()  # Consume {

        properties = []
        while not self._check("}"):
            properties.append(self._parse_property())
            if not self._match(","):
                break

        close_token = self._consume_closing(open_token)
        return ObjectLiteral(tuple(properties), SourceSpan(open_token.location, close_token.location))

    def _parse_property(self) -> Property:
        token = self._peek()

        if token.is_symbol("..."):
            raise create_unexpected_spread_error(token, "in object literal")

        if token.is_symbol("["):
            self._advance()
            key = self._parse_precedence(Precedence.ASSIGNMENT)
            self._consume_closing(token)
            self._consume(":")
            value = self._parse_precedence(Precedence.ASSIGNMENT)
            return Property(key, value, True, False, SourceSpan(token.location, value.span.end))

        if token.is_identifier and (self._peek(1).is_symbol(",") or self._peek(1).is_symbol("}")):
            self._advance()
            span = self._token_span(token)
            return Property(Identifier(token.value, span), Identifier(token.value, span),
                            False, True, span)

        if token.is_identifier:
            key = Identifier(token.value, self._token_span(token))
        elif token.type in NAME_LIKE:
            key = Identifier(decode_word(token.lexeme), self._token_span(token))
        elif token.type in (TokenType.STRING_LITERAL, TokenType.NUMBER_LITERAL):
            key = Literal(token.value, LITERAL_KINDS[token.type], token.lexeme, self._token_span(token))
        else:
            raise create_unexpected_token_error(token, "in object literal")

        self._advance()
        self._consume(":")
        value = self._parse_precedence(Precedence.ASSIGNMENT)
        return Property(key, value, False, False, SourceSpan(token.location, value.span.end))

    def _parse_new(self) -> NewExpression:
        """
        Parse ``new callee`` or ``new callee(args)``.

        The callee is a member chain without calls, so ``new a.b(c)`` passes
        ``c`` to ``a.b`` rather than constructing the result of ``a.b(c)``.
        """
        new_token = self._advance()

        if self._peek().is_word("new"):
            callee = self._parse_new()
        else:
            callee = self._parse_new_callee()

        while True:
            token = self._peek()
            if token.is_symbol("."):
                callee = self._parse_member_access(callee)
            elif token.is_symbol("["):
                callee = self._parse_computed_member(callee)
            elif token.is_symbol("?."):
                raise create_invalid_expression_error(
                    "optional chaining is not allowed in a 'new' callee", token.location, token
                )
            else:
                break

        if self._check("("):
            open_token = self._advance()
            arguments, close_token = self._parse_arguments(open_token)
            span = SourceSpan(new_token.location, close_token.location)
            return NewExpression(callee, arguments, True, span)

        return NewExpression(callee, (), False, SourceSpan(new_token.location, callee.span.end))

    def _parse_new_callee(self) -> Expression:
        token = self._peek()
        key = self._key(token)

        if token.type in LEXEME_KEYED and key not in ("(", "[", "{", "this"):
            raise create_unexpected_token_error(token, "after 'new'")

        prefix_parser = self.prefix_parsers.get(key)
        if prefix_parser is None:
            raise create_unexpected_token_error(token, "after 'new'")
        return prefix_parser()

    # Arrow functions

    def _try_parse_arrow_function(self) -> Optional[ArrowFunction]:
        """
        Parse an arrow function if one starts at the cursor.

        Returns None, with the cursor untouched, when the tokens are not an
        arrow function.
        """
        token = self._peek()

        if token.is_identifier and self._peek(1).is_symbol("=>"):
            self._advance()
            params = (Parameter(token.value, False, self._token_span(token)),)
            return self._finish_arrow_function(params, token)

        if not token.is_symbol("("):
            return None

        saved = self.current
        params = self._try_parse_parameter_list()

        if params is None or not self._check("=>"):
            logger.debug("arrow function speculation at %s rolled back", token.location)
            self.current = saved
            return None

        return self._finish_arrow_function(params, token)

    def _try_parse_parameter_list(self) -> Optional[Tuple[Parameter, ...]]:
        """Read ``( [name {, name}] [, ...name] [,] )``; None if it is not one."""
        self._advance()  # Consume (

        params = []
        if self._match(")"):
            return ()

        while True:
            rest_token = self._advance() if self._check("...") else None

            name_token = self._peek()
            if not name_token.is_identifier:
                return None
            self._advance()

            start = rest_token or name_token
            params.append(Parameter(name_token.value, rest_token is not None,
                                    SourceSpan(start.location, name_token.location)))

            if self._match(")"):
                return tuple(params)
            if not self._check(","):
                return None

            comma_token = self._advance()
            if rest_token is not None:
                if self._arrow_follows_parameters():
                    raise create_invalid_arrow_error(
                        "a rest parameter must be last and cannot have a trailing comma",
                        comma_token
                    )
                return None

            # Trailing comma
            if self._match(")"):
                return tuple(params)

    def _arrow_follows_parameters(self) -> bool:
        """Check whether the rest of the parameter list closes and is followed by '=>'."""
        index = self.current

        # Stop at the first token a parameter list cannot hold
        while index < len(self.tokens):
            token = self.tokens[index]
            if token.is_symbol(")"):
                return self.tokens[index + 1].is_symbol("=>")
            if not (token.is_identifier or token.is_symbol(",") or token.is_symbol("...")):
                return False
            index += 1

        return False

    def _finish_arrow_function(self, params: Tuple[Parameter, ...], start_token: Token) -> ArrowFunction:
        arrow_token = self._advance()  # Consume =>

        if arrow_token.preceded_by_line_terminator:
            raise create_invalid_arrow_error(
                "'=>' must be on the same line as the parameters", arrow_token
            )

        seen = set()
        for param in params:
            if param.name in seen:
                raise create_invalid_arrow_error(
                    f"duplicate parameter name '{param.name}'", start_token
                )
            seen.add(param.name)

        if self._check("{"):
            body = self._parse_block_placeholder()
        else:
            body = self._parse_precedence(Precedence.ASSIGNMENT)

        return ArrowFunction(params, body, SourceSpan(start_token.location, body.span.end))

    def _parse_block_placeholder(self) -> BlockPlaceholder:
        """Collect the balanced-brace tokens of a block body without parsing them."""
        open_token = self._advance()  # Consume {
        start = self.current
        depth = 1

        while True:
            token = self._peek()
            if token.is_eof:
                raise create_unclosed_delimiter_error(open_token, token)
            if token.is_symbol("{"):
                depth += 1
            elif token.is_symbol("}"):
                depth -= 1
                if depth == 0:
                    break
            self._advance()

        body_tokens = tuple(self.tokens[start:self.current])
        close_token = self._advance()
        return BlockPlaceholder(body_tokens, SourceSpan(open_token.location, close_token.location))

    # Infix parsers (binary operators and postfix operations)

    def _parse_binary(self, left: Expression) -> Expression:
        """Parse binary or logical operation."""
        operator_token = self._advance()
        operator = self._key(operator_token)

        info = self.config.binary_operators[operator]
        right = self._parse_precedence(info.right_precedence)

        span = SourceSpan(left.span.start, right.span.end)
        if operator in self.config.logical_operators:
            return Logical(left, operator, right, span)
        return Binary(left, operator, right, span)

    def _parse_assignment(self, left: Expression) -> Assignment:
        """Parse assignment operation."""
        # Assignment is right associative
        operator_token = self._advance()

        value = self._parse_precedence(Precedence.ASSIGNMENT)
        self._check_assignment_target(left, operator_token)

        span = SourceSpan(left.span.start, value.span.end)
        return Assignment(left, operator_token.lexeme, value, span)

    def _parse_conditional(self, test: Expression) -> Conditional:
        """Parse ``test ? consequent : alternate``."""
        self._advance()  # Consume ?

        consequent = self._parse_precedence(Precedence.ASSIGNMENT)
        self._consume(":")
        alternate = self._parse_precedence(Precedence.ASSIGNMENT)

        span = SourceSpan(test.span.start, alternate.span.end)
        return Conditional(test, consequent, alternate, span)

    def _parse_sequence(self, left: Expression) -> Sequence:
        """Parse a comma sequence, flattened into one node."""
        expressions = [left]

        while self._match(","):
            if self._check(")") or self._check("]"):
                raise create_invalid_expression_error(
                    "trailing comma is not allowed here", self._peek().location, self._peek()
                )
            expressions.append(self._parse_precedence(Precedence.ASSIGNMENT))

        span = SourceSpan(left.span.start, expressions[-1].span.end)
        return Sequence(tuple(expressions), span)

    def _parse_postfix_update(self, left: Expression) -> Update:
        """Parse ``x++`` / ``x--``."""
        operator_token = self._advance()
        self._check_assignment_target(left, operator_token)

        span = SourceSpan(left.span.start, operator_token.location)
        return Update(operator_token.lexeme, left, False, span)

    def _parse_member_access(self, left: Expression) -> MemberAccess:
        """Parse field access (dot operator)."""
        self._advance()  # Consume .

        name = self._parse_member_name()

        span = SourceSpan(left.span.start, name.span.end)
        return MemberAccess(left, name, False, False, is_in_optional_chain(left), span)

    def _parse_computed_member(self, left: Expression) -> MemberAccess:
        """Parse index access (object[key])."""
        open_token = self._advance()  # Consume [

        index = self._parse_precedence(Precedence.COMMA)

        close_token = self._consume_closing(open_token)
        span = SourceSpan(left.span.start, close_token.location)
        return MemberAccess(left, index, True, False, is_in_optional_chain(left), span)

    def _parse_call(self, left: Expression) -> Call:
        """Parse function call."""
        open_token = self._advance()  # Consume (

        arguments, close_token = self._parse_arguments(open_token)

        span = SourceSpan(left.span.start, close_token.location)
        return Call(left, arguments, False, is_in_optional_chain(left), span)

    def _parse_optional_chain(self, left: Expression) -> Expression:
        """Parse ``?.name``, ``?.[key]`` and ``?.(args)``."""
        self._advance()  # Consume ?.

        if self._check("("):
            open_token = self._advance()
            arguments, close_token = self._parse_arguments(open_token)
            span = SourceSpan(left.span.start, close_token.location)
            return Call(left, arguments, True, True, span)

        if self._check("["):
            open_token = self._advance()
            index = self._parse_precedence(Precedence.COMMA)
            close_token = self._consume_closing(open_token)
            span = SourceSpan(left.span.start, close_token.location)
            return MemberAccess(left, index, True, True, True, span)

        name = self._parse_member_name()
        span = SourceSpan(left.span.start, name.span.end)
        return MemberAccess(left, name, False, True, True, span)

    def _parse_member_name(self) -> Identifier:
        """Parse the name after '.' or '?.'; keywords are allowed."""
        token = self._peek()

        if token.is_identifier:
            name = token.value
        elif token.type in NAME_LIKE:
            name = decode_word(token.lexeme)
        else:
            raise create_expected_token_error("property name", token)

        self._advance()
        return Identifier(name, self._token_span(token))

    def _parse_arguments(self, open_token: Token) -> Tuple[Tuple[Union[Expression, Spread], ...], Token]:
        """Parse call arguments after '('; returns them with the closing token."""
        arguments = []
        while not self._check(")"):
            arguments.append(self._parse_element())
            if not self._match(","):
                break

        close_token = self._consume_closing(open_token)
        return tuple(arguments), close_token

    def _parse_element(self) -> Union[Expression, Spread]:
        """Parse an array element or call argument, either of which may spread."""
        if self._check("..."):
            spread_token = self._advance()
            argument = self._parse_precedence(Precedence.ASSIGNMENT)
            return Spread(argument, SourceSpan(spread_token.location, argument.span.end))
        return self._parse_precedence(Precedence.ASSIGNMENT)

    def _check_assignment_target(self, target: Expression, operator_token: Token):
        """Raise unless ``target`` is an identifier or plain member access."""
        inner = target
        while isinstance(inner, Grouping):
            inner = inner.expression

        if isinstance(inner, Identifier):
            return
        if isinstance(inner, MemberAccess) and not inner.in_optional_chain:
            return

        raise create_invalid_assignment_target_error(
            operator_token.lexeme, target.span.start, operator_token
        )

    # Utility methods

    def _match(self, lexeme: str) -> bool:
        """Check if current token is the given symbol and consume if so."""
        if self._check(lexeme):
            self._advance()
            return True
        return False

    def _check(self, lexeme: str) -> bool:
        """Check if current token is the given symbol without consuming."""
        return self._peek().is_symbol(lexeme)

    def _advance(self) -> Token:
        """Consume and return current token."""
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        """Check if we've reached the end of tokens."""
        return self._peek().is_eof

    def _peek(self, offset: int = 0) -> Token:
        """Return a token ahead of the cursor without consuming (END_OF_INPUT past the end)."""
        index = min(self.current + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _previous(self) -> Token:
        """Return previous token."""
        if self.current > 0:
            return self.tokens[self.current - 1]
        return self.tokens[0]

    def _consume(self, lexeme: str) -> Token:
        """Consume the given symbol or raise error."""
        if self._check(lexeme):
            return self._advance()
        raise create_expected_token_error(lexeme, self._peek())

    def _consume_closing(self, open_token: Token) -> Token:
        """Consume the bracket matching ``open_token``."""
        closing = CLOSING_DELIMITERS[open_token.lexeme]
        if self._check(closing):
            return self._advance()
        if self._is_at_end():
            raise create_unclosed_delimiter_error(open_token, self._peek())
        raise create_expected_token_error(closing, self._peek())

    def _token_span(self, token: Token) -> SourceSpan:
        return SourceSpan(token.location, token.location)


def parse_expression(tokens: List[Token],
                     config: Optional[GrammarConfig] = None) -> Tuple[Expression, List[Token]]:
    """
    Parse one expression from the front of a token list.

    Returns:
        (expression, remaining tokens); the remainder starts at the first
        unconsumed token and always ends with END_OF_INPUT

    Raises:
        ParseError: If parsing fails
    """
    parser = Parser(tokens, config)
    expression = parser.parse_expression()
    return expression, parser.remaining_tokens()


def parse_string(source: str, filename: str = "<string>",
                 config: Optional[GrammarConfig] = None) -> Expression:
    """
    Convenience function to parse a source string.

    The whole input must be one expression.

    Args:
        source: Source text
        filename: Filename for error reporting
        config: Grammar tables; DEFAULT_CONFIG when omitted

    Returns:
        Expression AST

    Raises:
        LexError: If scanning fails
        ParseError: If parsing fails
    """
    from ..lexer import scan

    tokens = scan(source, filename, config)
    parser = Parser(tokens, config)
    return parser.parse()


def parse_file(filepath: str, config: Optional[GrammarConfig] = None) -> Expression:
    """
    Convenience function to parse a source file.

    Raises:
        LexError: If scanning fails
        ParseError: If parsing fails
        OSError: If the file cannot be read
    """
    from ..lexer import scan_file

    tokens = scan_file(filepath, config)
    parser = Parser(tokens, config)
    return parser.parse()
