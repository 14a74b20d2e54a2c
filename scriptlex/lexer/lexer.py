"""
scriptlex Lexer - turns source text into tokens

Single pass, left to right. Each call either yields the whole token
sequence (ending in END_OF_INPUT) or raises the first LexError it meets;
there is no recovery, since the parser can do nothing useful with a
partially scanned buffer.

Line terminators never become tokens. They only set
``preceded_by_line_terminator`` on the next token so a statement parser can
apply semicolon insertion later.
"""

import logging
import re
import unicodedata
from typing import Iterator, List, Mapping, Optional, Tuple

from ..config import DEFAULT_CONFIG, GrammarConfig
from .tokens import (
    Token, TokenType, SourceLocation,
    LINE_TERMINATORS, WHITESPACE, IDENTIFIER_JOINERS
)
from .errors import (
    LexError, create_invalid_character_error, create_unterminated_string_error,
    create_invalid_number_error, create_unterminated_template_error,
    create_identifier_after_number_error, create_invalid_escape_error,
    create_unterminated_comment_error
)

logger = logging.getLogger(__name__)

ID_START_CATEGORIES = frozenset({'Lu', 'Ll', 'Lt', 'Lm', 'Lo', 'Nl'})
ID_CONTINUE_CATEGORIES = ID_START_CATEGORIES | {'Mn', 'Mc', 'Nd', 'Pc'}

HEX_DIGITS = frozenset('0123456789abcdefABCDEF')
DECIMAL_DIGITS = frozenset('0123456789')


class EscapeError(ValueError):
    """An escape sequence that cannot be decoded."""

    def __init__(self, sequence: str, reason: Optional[str] = None):
        super().__init__(reason or f"invalid escape {sequence!r}")
        self.sequence = sequence
        self.reason = reason


def _is_hex(text: str) -> bool:
    return bool(text) and all(c in HEX_DIGITS for c in text)


def decode_unicode_escape(source: str, pos: int) -> Tuple[str, int]:
    """
    Decode ``\\uXXXX`` or ``\\u{X...}``.

    Args:
        source: Text containing the escape
        pos: Index of the ``u`` (the backslash is already consumed)

    Returns:
        (decoded character, index just past the escape)

    Raises:
        EscapeError: If the digits are missing, malformed or out of range
    """
    if source.startswith('{', pos + 1):
        end = source.find('}', pos + 2)
        digits = source[pos + 2:end] if end != -1 else source[pos + 2:pos + 8]
        if end == -1 or not _is_hex(digits):
            raise EscapeError('\\u{' + digits, "\\u{...} needs hex digits and a closing '}'")
        code_point = int(digits, 16)
        if code_point > 0x10FFFF:
            raise EscapeError('\\u{' + digits + '}', "Code point is above U+10FFFF")
        return chr(code_point), end + 1

    digits = source[pos + 1:pos + 5]
    if len(digits) != 4 or not _is_hex(digits):
        raise EscapeError('\\u' + digits, "\\u must be followed by four hex digits")

    code_unit = int(digits, 16)
    end = pos + 5

    # Join a surrogate pair written as two escapes
    if 0xD800 <= code_unit <= 0xDBFF and source.startswith('\\u', end):
        low_digits = source[end + 2:end + 6]
        if len(low_digits) == 4 and _is_hex(low_digits):
            low = int(low_digits, 16)
            if 0xDC00 <= low <= 0xDFFF:
                combined = 0x10000 + ((code_unit - 0xD800) << 10) + (low - 0xDC00)
                return chr(combined), end + 6

    return chr(code_unit), end


def decode_word(lexeme: str) -> str:
    """
    Spell out an identifier-like lexeme with its ``\\u`` escapes decoded.

    Only for lexemes the scanner has already accepted as a name, keyword or
    literal word.
    """
    parts = []
    i = 0
    while i < len(lexeme):
        if lexeme[i] == '\\':
            decoded, i = decode_unicode_escape(lexeme, i + 1)
            parts.append(decoded)
        else:
            parts.append(lexeme[i])
            i += 1
    return ''.join(parts)


def decode_escape(source: str, pos: int, escapes: Mapping[str, str]) -> Tuple[str, int]:
    """
    Decode one string escape sequence.

    ``pos`` indexes the character right after the backslash. A backslash
    before a line terminator is a line continuation and decodes to nothing.

    Returns:
        (decoded text, index just past the escape)

    Raises:
        EscapeError: If the sequence is not a valid escape
    """
    ch = source[pos]

    if ch == '\r':
        return '', pos + 2 if source.startswith('\r\n', pos) else pos + 1
    if ch == '\n':
        return '', pos + 1

    if ch == 'x':
        digits = source[pos + 1:pos + 3]
        if len(digits) == 2 and _is_hex(digits):
            return chr(int(digits, 16)), pos + 3
        raise EscapeError('\\x' + digits, "\\x must be followed by two hex digits")

    if ch == 'u':
        return decode_unicode_escape(source, pos)

    if ch == '0' and pos + 1 < len(source) and source[pos + 1] in DECIMAL_DIGITS:
        raise EscapeError('\\0' + source[pos + 1], "Legacy octal escapes are not allowed")

    if ch in escapes:
        return escapes[ch], pos + 1

    raise EscapeError('\\' + ch)


class Lexer:
    """
    scriptlex lexical analyzer.

    Converts source text into a stream of tokens using the tables of a
    GrammarConfig. ``tokenize`` returns the full list; ``iter_tokens``
    produces the same tokens lazily.
    """

    def __init__(self, source: str, filename: str = "<string>",
                 config: Optional[GrammarConfig] = None):
        """
        Initialize the lexer with source text.

        Args:
            source: Source text (a sequence of code points)
            filename: Name used in token locations and error messages
            config: Grammar tables; DEFAULT_CONFIG when omitted
        """
        self.source = source
        self.filename = filename
        self.config = config or DEFAULT_CONFIG
        self.pos = 0
        self.line = 1
        self.column = 1

        self._max_operator_length = self.config.max_operator_length
        self._compile_patterns()

    def _compile_patterns(self):
        """Compile regex patterns used for numeric literals."""
        digits = r'\d(?:_?\d)*'

        self.decimal_pattern = re.compile(
            rf'(?:{digits}(?:\.(?:{digits})?)?|\.{digits})(?:[eE][+-]?{digits})?',
            re.ASCII
        )
        self.binary_pattern = re.compile(r'0[bB]([01](?:_?[01])*)?')
        self.octal_pattern = re.compile(r'0[oO]([0-7](?:_?[0-7])*)?')
        self.hex_pattern = re.compile(r'0[xX]([0-9a-fA-F](?:_?[0-9a-fA-F])*)?')

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source.

        Returns:
            List of tokens ending with END_OF_INPUT

        Raises:
            LexError: On the first malformed construct
        """
        return list(self.iter_tokens())

    def iter_tokens(self) -> Iterator[Token]:
        """Yield tokens one at a time, finishing with END_OF_INPUT."""
        self.pos = 0
        self.line = 1
        self.column = 1
        count = 0

        while True:
            preceded = self._skip_whitespace_and_comments()

            if self.pos >= len(self.source):
                break

            yield self._next_token(preceded)
            count += 1

        logger.debug("scanned %d tokens from %s", count, self.filename)
        yield Token(TokenType.END_OF_INPUT, "", None, self._location(), preceded)

    def _next_token(self, preceded: bool) -> Token:
        """Scan the token starting at the current position."""
        start = self._location()
        current_char = self.source[self.pos]

        # Numbers (a leading '.' counts when a digit follows)
        if current_char in DECIMAL_DIGITS or (current_char == '.' and self._peek() in DECIMAL_DIGITS):
            return self._tokenize_number(start, preceded)

        # Identifiers, keywords and literal words
        if self._is_identifier_start(current_char) or (current_char == '\\' and self._peek() == 'u'):
            return self._tokenize_identifier_or_keyword(start, preceded)

        if current_char in ('"', "'"):
            return self._tokenize_string(current_char, start, preceded)

        if current_char == '`':
            return self._tokenize_template(start, preceded)

        # Operators and punctuation, longest match first
        for op_len in range(self._max_operator_length, 0, -1):
            potential_op = self.source[self.pos:self.pos + op_len]
            if len(potential_op) < op_len or potential_op not in self.config.operators:
                continue

            # '?.5' is a conditional followed by a number, not optional chaining
            if potential_op == '?.' and self._peek(2) in DECIMAL_DIGITS:
                continue

            self._advance_by(op_len)
            return Token(
                self.config.operators[potential_op],
                potential_op,
                potential_op,
                start,
                preceded
            )

        raise create_invalid_character_error(current_char, start)

    def _tokenize_number(self, start: SourceLocation, preceded: bool) -> Token:
        """Tokenize decimal, hexadecimal, binary or octal literals."""
        remaining = self.source[self.pos:self.pos + 2]

        if remaining in ('0x', '0X'):
            return self._tokenize_prefixed_integer(self.hex_pattern, 16, start, preceded)
        if remaining in ('0b', '0B'):
            return self._tokenize_prefixed_integer(self.binary_pattern, 2, start, preceded)
        if remaining in ('0o', '0O'):
            return self._tokenize_prefixed_integer(self.octal_pattern, 8, start, preceded)

        match = self.decimal_pattern.match(self.source, self.pos)
        lexeme = match.group(0)
        self._advance_by(len(lexeme))

        self._check_number_end(lexeme, start)

        clean_lexeme = lexeme.replace('_', '')
        integer_part = clean_lexeme.split('.')[0].split('e')[0].split('E')[0]
        if len(integer_part) > 1 and integer_part.startswith('0'):
            raise create_invalid_number_error(
                lexeme, start, "Decimal literals cannot have leading zeros; use 0o for octal"
            )

        if any(c in clean_lexeme for c in '.eE'):
            value = float(clean_lexeme)
        else:
            value = int(clean_lexeme)

        return Token(TokenType.NUMBER_LITERAL, lexeme, value, start, preceded)

    def _tokenize_prefixed_integer(self, pattern, base: int, start: SourceLocation,
                                   preceded: bool) -> Token:
        """Tokenize a 0x / 0b / 0o literal."""
        match = pattern.match(self.source, self.pos)
        lexeme = match.group(0)
        self._advance_by(len(lexeme))

        if match.group(1) is None:
            raise create_invalid_number_error(
                lexeme, start, f"Expected at least one base-{base} digit after '{lexeme}'"
            )

        next_char = self._peek(0)
        if next_char == '_' or next_char.isalnum():
            raise create_invalid_number_error(
                lexeme + next_char, start,
                f"'{next_char}' is not a valid base-{base} digit here"
            )

        value = int(match.group(1).replace('_', ''), base)
        return Token(TokenType.NUMBER_LITERAL, lexeme, value, start, preceded)

    def _check_number_end(self, lexeme: str, start: SourceLocation):
        """Reject characters that may not directly follow a decimal literal."""
        next_char = self._peek(0)

        if next_char == '_':
            raise create_invalid_number_error(
                lexeme + '_', start, "Numeric separators must sit between two digits"
            )

        if next_char in ('e', 'E') and 'e' not in lexeme.lower():
            raise create_invalid_number_error(
                lexeme + next_char, start, "Exponent must be followed by digits"
            )

        if self._is_identifier_start(next_char) or next_char == '\\':
            end = self.pos
            while end < len(self.source) and self._is_identifier_continue(self.source[end]):
                end += 1
            raise create_identifier_after_number_error(self.source[start.offset:end], start)

    def _tokenize_identifier_or_keyword(self, start: SourceLocation, preceded: bool) -> Token:
        """
        Tokenize an identifier, keyword or literal word.

        ``\\uXXXX`` escapes are decoded before classification, so an escaped
        spelling of a keyword is still that keyword.
        """
        name_parts = []

        while self.pos < len(self.source):
            char = self.source[self.pos]
            is_first = not name_parts

            if char == '\\':
                escape_location = self._location()
                if self._peek() != 'u':
                    raise create_invalid_escape_error(
                        self.source[self.pos:self.pos + 2], escape_location,
                        "Only \\u escapes are allowed in identifiers"
                    )
                try:
                    decoded, end = decode_unicode_escape(self.source, self.pos + 1)
                except EscapeError as e:
                    raise create_invalid_escape_error(e.sequence, escape_location, e.reason) from None

                valid = (self._is_identifier_start(decoded) if is_first
                         else self._is_identifier_continue(decoded))
                if not valid:
                    raise create_invalid_escape_error(
                        self.source[self.pos:end], escape_location,
                        f"Escape decodes to {decoded!r}, which cannot appear in an identifier here"
                    )
                name_parts.append(decoded)
                self._advance_by(end - self.pos)
            elif self._is_identifier_start(char) or (not is_first and self._is_identifier_continue(char)):
                name_parts.append(char)
                self._advance()
            else:
                break

        lexeme = self.source[start.offset:self.pos]
        name = ''.join(name_parts)

        if name in self.config.literal_words:
            token_type, value = self.config.literal_words[name]
        elif name in self.config.keywords:
            token_type, value = TokenType.KEYWORD, name
        else:
            token_type, value = TokenType.IDENTIFIER, name

        return Token(token_type, lexeme, value, start, preceded)

    def _tokenize_string(self, quote: str, start: SourceLocation, preceded: bool) -> Token:
        """Tokenize a quoted string, decoding escapes eagerly."""
        self._advance()  # Skip opening quote

        value_parts = []

        while True:
            if self.pos >= len(self.source):
                raise create_unterminated_string_error(quote, start)

            char = self.source[self.pos]

            if char == quote:
                self._advance()
                break

            if char in LINE_TERMINATORS:
                raise create_unterminated_string_error(quote, start)

            if char == '\\':
                if self.pos + 1 >= len(self.source):
                    raise create_unterminated_string_error(quote, start)
                escape_location = self._location()
                try:
                    decoded, end = decode_escape(self.source, self.pos + 1, self.config.escapes)
                except EscapeError as e:
                    raise create_invalid_escape_error(e.sequence, escape_location, e.reason) from None
                value_parts.append(decoded)
                self._advance_by(end - self.pos)
            else:
                value_parts.append(char)
                self._advance()

        lexeme = self.source[start.offset:self.pos]
        return Token(TokenType.STRING_LITERAL, lexeme, ''.join(value_parts), start, preceded)

    def _tokenize_template(self, start: SourceLocation, preceded: bool) -> Token:
        """
        Tokenize a template literal as one opaque token.

        The value is the raw text between the backticks; substitutions are
        left for ``scriptlex.parser.templates`` to split and re-parse.
        """
        self._advance()  # Skip opening backtick
        self._skip_template_body(start)

        lexeme = self.source[start.offset:self.pos]
        return Token(TokenType.TEMPLATE_LITERAL, lexeme, lexeme[1:-1], start, preceded)

    def _skip_template_body(self, start: SourceLocation):
        """Advance past the closing backtick of a template already opened."""
        while True:
            if self.pos >= len(self.source):
                raise create_unterminated_template_error(start)

            char = self.source[self.pos]

            if char == '`':
                self._advance()
                return

            if char == '\\':
                self._advance_by(2)
            elif char == '$' and self._peek() == '{':
                self._advance_by(2)
                self._skip_substitution(start)
            else:
                self._advance()

    def _skip_substitution(self, start: SourceLocation):
        """Advance past the '}' closing a '${' span, honouring nesting."""
        depth = 1

        while True:
            if self.pos >= len(self.source):
                raise create_unterminated_template_error(start)

            char = self.source[self.pos]

            if char == '{':
                depth += 1
                self._advance()
            elif char == '}':
                depth -= 1
                self._advance()
                if depth == 0:
                    return
            elif char in ('"', "'"):
                self._skip_quoted(char, start)
            elif char == '`':
                self._advance()
                self._skip_template_body(start)
            else:
                self._advance()

    def _skip_quoted(self, quote: str, start: SourceLocation):
        """Skip a string nested inside a template substitution."""
        self._advance()
        while self.pos < len(self.source) and self.source[self.pos] != quote:
            self._advance_by(2 if self.source[self.pos] == '\\' else 1)
        if self.pos >= len(self.source):
            raise create_unterminated_template_error(start)
        self._advance()

    def _is_identifier_start(self, char: str) -> bool:
        """Check if character can start an identifier."""
        if not char:
            return False
        return (char in ('$', '_') or
                unicodedata.category(char) in ID_START_CATEGORIES)

    def _is_identifier_continue(self, char: str) -> bool:
        """Check if character can continue an identifier."""
        if not char:
            return False
        return (char == '$' or char in IDENTIFIER_JOINERS or
                unicodedata.category(char) in ID_CONTINUE_CATEGORIES)

    def _skip_whitespace_and_comments(self) -> bool:
        """
        Skip whitespace, line terminators and comments.

        Returns:
            True if a line terminator was skipped (directly or inside a
            block comment)
        """
        saw_line_terminator = False

        while self.pos < len(self.source):
            char = self.source[self.pos]

            if char in WHITESPACE:
                self._advance()
                continue

            if char in LINE_TERMINATORS:
                saw_line_terminator = True
                self._advance()
                continue

            # Line comments stop before the terminator, which is handled above
            if self.source.startswith('//', self.pos):
                while self.pos < len(self.source) and self.source[self.pos] not in LINE_TERMINATORS:
                    self._advance()
                continue

            if self.source.startswith('/*', self.pos):
                comment_start = self._location()
                end = self.source.find('*/', self.pos + 2)
                if end == -1:
                    raise create_unterminated_comment_error(comment_start)
                body = self.source[self.pos + 2:end]
                if any(c in LINE_TERMINATORS for c in body):
                    saw_line_terminator = True
                self._advance_by(end + 2 - self.pos)
                continue

            break

        return saw_line_terminator

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            char = self.source[self.pos]
            # '\r\n' counts as one terminator: the line moves on at the '\n'
            if char == '\n' or (char == '\r' and self._peek() != '\n'):
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        """Advance position by multiple characters."""
        for _ in range(count):
            self._advance()

    def _peek(self, offset: int = 1) -> str:
        """Peek at character ahead without advancing; '' past the end."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return ''


def scan(source: str, filename: str = "<string>",
         config: Optional[GrammarConfig] = None) -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source text
        filename: Filename for error reporting
        config: Grammar tables; DEFAULT_CONFIG when omitted

    Returns:
        List of tokens ending with END_OF_INPUT

    Raises:
        LexError: If scanning fails
    """
    return Lexer(source, filename, config).tokenize()


def scan_file(filepath: str, config: Optional[GrammarConfig] = None) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        LexError: If scanning fails
        OSError: If the file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return scan(source, filepath, config)
