"""
Test suite for the scriptlex lexer.

Tests cover:
- Identifiers, keywords and literal words (escapes included)
- Numeric, string and template literals
- Comments, whitespace and line-terminator hints
- Operator longest match
- Error codes and locations
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from scriptlex.config import GrammarConfig
from scriptlex.lexer import ERROR_CODES, Lexer, LexError, TokenType, scan


def lexemes(source):
    return [token.lexeme for token in scan(source) if not token.is_eof]


class TestIdentifiersAndKeywords(unittest.TestCase):
    """Identifier, keyword and literal-word classification."""

    def test_identifier_and_operator(self):
        tokens = scan("a + 1")
        self.assertEqual(
            [t.type for t in tokens],
            [TokenType.IDENTIFIER, TokenType.OPERATOR, TokenType.NUMBER_LITERAL, TokenType.END_OF_INPUT]
        )
        self.assertEqual(tokens[0].value, "a")
        self.assertEqual(tokens[1].value, "+")
        self.assertEqual(tokens[2].value, 1)
        self.assertTrue(tokens[2].is_literal)
        self.assertFalse(tokens[0].is_literal)

    def test_keyword_versus_identifier(self):
        tokens = scan("typeof typeofx")
        self.assertEqual(tokens[0].type, TokenType.KEYWORD)
        self.assertEqual(tokens[0].value, "typeof")
        self.assertEqual(tokens[1].type, TokenType.IDENTIFIER)
        self.assertEqual(tokens[1].value, "typeofx")

        tokens = scan("class classX")
        self.assertEqual([t.type for t in tokens[:2]], [TokenType.KEYWORD, TokenType.IDENTIFIER])

    def test_escaped_identifier_is_decoded(self):
        token = scan("\\u006Eame")[0]
        self.assertEqual(token.type, TokenType.IDENTIFIER)
        self.assertEqual(token.value, "name")
        self.assertEqual(token.lexeme, "\\u006Eame")

    def test_braced_escape_in_identifier(self):
        token = scan("a\\u{62}c")[0]
        self.assertEqual(token.value, "abc")

    def test_escaped_keyword_is_still_keyword(self):
        token = scan("\\u0069f")[0]
        self.assertEqual(token.type, TokenType.KEYWORD)
        self.assertEqual(token.value, "if")

    def test_escape_decoding_to_invalid_character(self):
        with self.assertRaises(LexError) as ctx:
            scan("\\u0020x")
        self.assertEqual(ctx.exception.code, "L006")

    def test_literal_words(self):
        tokens = scan("true false null undefined")
        self.assertEqual(
            [t.type for t in tokens[:4]],
            [TokenType.BOOLEAN_LITERAL, TokenType.BOOLEAN_LITERAL,
             TokenType.NULL_LITERAL, TokenType.UNDEFINED_LITERAL]
        )
        self.assertEqual([t.value for t in tokens[:4]], [True, False, None, None])

    def test_unicode_identifiers(self):
        tokens = scan("café $el _x a\u200db")
        self.assertEqual([t.value for t in tokens[:4]], ["café", "$el", "_x", "a\u200db"])
        self.assertTrue(all(t.type == TokenType.IDENTIFIER for t in tokens[:4]))

    def test_config_keywords(self):
        config = GrammarConfig.from_mapping({"add_keywords": ["async"], "remove_keywords": ["yield"]})
        tokens = scan("async yield", config=config)
        self.assertEqual(tokens[0].type, TokenType.KEYWORD)
        self.assertEqual(tokens[1].type, TokenType.IDENTIFIER)


class TestNumbers(unittest.TestCase):
    """Numeric literal scanning."""

    def test_number_values(self):
        cases = {
            "42": 42,
            "0": 0,
            "3.14": 3.14,
            ".5": 0.5,
            "1.": 1.0,
            "1e3": 1000.0,
            "2.5E-1": 0.25,
            "0xFF": 255,
            "0b1010": 10,
            "0o17": 15,
            "1_000_000": 1000000,
            "0xF_F": 255,
        }
        for source, expected in cases.items():
            with self.subTest(source=source):
                tokens = scan(source)
                self.assertEqual(tokens[0].type, TokenType.NUMBER_LITERAL)
                self.assertEqual(tokens[0].value, expected)
                self.assertEqual(tokens[0].lexeme, source)
                self.assertTrue(tokens[1].is_eof)

    def test_integer_and_float_types(self):
        self.assertIsInstance(scan("7")[0].value, int)
        self.assertIsInstance(scan("7.0")[0].value, float)

    def test_invalid_numbers(self):
        for source in ("0x", "0b", "1_", "1__0", "1e", "1e+", "0b102", "01", "1._5"):
            with self.subTest(source=source):
                with self.assertRaises(LexError) as ctx:
                    scan(source)
                self.assertEqual(ctx.exception.code, "L003")

    def test_identifier_after_number(self):
        with self.assertRaises(LexError) as ctx:
            scan("3abc")
        self.assertEqual(ctx.exception.code, "L005")
        self.assertIn("Identifier cannot start with digit", ctx.exception.reason)


class TestStrings(unittest.TestCase):
    """String literal scanning and escape decoding."""

    def test_simple_strings(self):
        self.assertEqual(scan('"hello"')[0].value, "hello")
        self.assertEqual(scan("'world'")[0].value, "world")

    def test_escapes(self):
        self.assertEqual(scan('"a\\nb\\t"')[0].value, "a\nb\t")
        self.assertEqual(scan("'it\\'s'")[0].value, "it's")
        self.assertEqual(scan('"\\x41\\u0042\\u{43}"')[0].value, "ABC")
        self.assertEqual(scan('"\\0"')[0].value, "\0")

    def test_line_continuation(self):
        self.assertEqual(scan('"a\\\nb"')[0].value, "ab")
        self.assertEqual(scan('"a\\\r\nb"')[0].value, "ab")

    def test_surrogate_pair_escapes_combine(self):
        self.assertEqual(scan('"\\uD83D\\uDE00"')[0].value, "\U0001F600")

    def test_lexeme_keeps_raw_text(self):
        token = scan('"a\\n"')[0]
        self.assertEqual(token.lexeme, '"a\\n"')

    def test_unterminated_string(self):
        for source in ('"abc', '"a\nb"', "'abc\\"):
            with self.subTest(source=source):
                with self.assertRaises(LexError) as ctx:
                    scan(source)
                self.assertEqual(ctx.exception.code, "L002")

    def test_unterminated_string_location(self):
        with self.assertRaises(LexError) as ctx:
            scan('x = "abc')
        self.assertEqual(ctx.exception.location.line, 1)
        self.assertEqual(ctx.exception.location.column, 5)

    def test_invalid_escapes(self):
        for source in ('"\\q"', '"\\u{110000}"', '"\\01"', '"\\xZ1"', '"\\u12"'):
            with self.subTest(source=source):
                with self.assertRaises(LexError) as ctx:
                    scan(source)
                self.assertEqual(ctx.exception.code, "L006")


class TestTemplates(unittest.TestCase):
    """Template literals scan as single tokens."""

    def test_template_is_one_token(self):
        tokens = scan("`a${b}c`")
        self.assertEqual(tokens[0].type, TokenType.TEMPLATE_LITERAL)
        self.assertEqual(tokens[0].value, "a${b}c")
        self.assertTrue(tokens[1].is_eof)

    def test_nested_templates_and_braces(self):
        for source in ("`x${ `y${z}` }w`", "`a${'}'}b`", "`${ {a: 1}.a }`", "`a\\`b`"):
            with self.subTest(source=source):
                tokens = scan(source)
                self.assertEqual(len(tokens), 2)
                self.assertEqual(tokens[0].lexeme, source)

    def test_multiline_template(self):
        tokens = scan("`a\nb` c")
        self.assertEqual(tokens[0].value, "a\nb")
        self.assertEqual(tokens[1].location.line, 2)

    def test_unterminated_template(self):
        for source in ("`abc", "`${a`", "`${a"):
            with self.subTest(source=source):
                with self.assertRaises(LexError) as ctx:
                    scan(source)
                self.assertEqual(ctx.exception.code, "L004")


class TestLayout(unittest.TestCase):
    """Whitespace, comments, positions and line-terminator hints."""

    def test_line_terminator_flag(self):
        tokens = scan("return\n5;")
        self.assertEqual(tokens[0].type, TokenType.KEYWORD)
        self.assertFalse(tokens[0].preceded_by_line_terminator)
        self.assertTrue(tokens[1].preceded_by_line_terminator)
        self.assertFalse(tokens[2].preceded_by_line_terminator)

    def test_comments(self):
        self.assertEqual(lexemes("a // comment\nb"), ["a", "b"])
        self.assertEqual(lexemes("a /* comment */ b"), ["a", "b"])
        self.assertTrue(scan("a // c\nb")[1].preceded_by_line_terminator)

    def test_block_comment_with_newline_counts_as_terminator(self):
        self.assertTrue(scan("a /* x\n */ b")[1].preceded_by_line_terminator)
        self.assertFalse(scan("a /* x */ b")[1].preceded_by_line_terminator)

    def test_unterminated_comment(self):
        with self.assertRaises(LexError) as ctx:
            scan("a /* never closed")
        self.assertEqual(ctx.exception.code, "L007")

    def test_positions(self):
        tokens = scan("a\n  b")
        b = tokens[1]
        self.assertEqual((b.location.line, b.location.column, b.location.offset), (2, 3, 4))

    def test_crlf_is_one_terminator(self):
        b = scan("a\r\nb")[1]
        self.assertEqual((b.location.line, b.location.column, b.location.offset), (2, 1, 3))

    def test_extra_whitespace(self):
        self.assertEqual(lexemes("\u00a0 a\ufeff\v\fb"), ["a", "b"])

    def test_offsets_are_monotonic(self):
        tokens = scan("f(a, b)?.c[0] /* x */ + `t${1}` // end")
        offsets = [t.location.offset for t in tokens]
        self.assertEqual(offsets, sorted(offsets))

    def test_empty_input(self):
        tokens = scan("")
        self.assertEqual(len(tokens), 1)
        self.assertTrue(tokens[0].is_eof)

    def test_filename_in_location(self):
        token = scan("a", filename="main.js")[0]
        self.assertEqual(str(token.location), "main.js:1:1")


class TestOperators(unittest.TestCase):
    """Operator and punctuator scanning."""

    def test_longest_match(self):
        self.assertEqual(lexemes("a >>>= b"), ["a", ">>>=", "b"])
        self.assertEqual(lexemes("a===b"), ["a", "===", "b"])
        self.assertEqual(lexemes("a ?? b ??= c"), ["a", "??", "b", "??=", "c"])
        self.assertEqual(lexemes("...a"), ["...", "a"])
        self.assertEqual(lexemes("x=>y"), ["x", "=>", "y"])

    def test_optional_chaining_versus_conditional(self):
        self.assertEqual(lexemes("a?.b"), ["a", "?.", "b"])
        self.assertEqual(lexemes("a?.5:b"), ["a", "?", ".5", ":", "b"])

    def test_punctuators(self):
        tokens = scan("(a, b);")
        self.assertEqual(tokens[0].type, TokenType.PUNCTUATOR)
        self.assertEqual(tokens[2].type, TokenType.PUNCTUATOR)
        self.assertTrue(tokens[0].is_symbol("("))

    def test_invalid_character(self):
        with self.assertRaises(LexError) as ctx:
            scan("a # b")
        self.assertEqual(ctx.exception.code, "L001")
        self.assertEqual(ERROR_CODES[ctx.exception.code], "Invalid character")
        self.assertEqual(ctx.exception.location.column, 3)
        self.assertIn("ERROR: Invalid character", str(ctx.exception))


class TestLazyScanning(unittest.TestCase):
    """iter_tokens yields tokens before a later error is reached."""

    def test_iter_tokens_stops_at_first_error(self):
        tokens = Lexer("a #").iter_tokens()
        self.assertEqual(next(tokens).value, "a")
        with self.assertRaises(LexError):
            next(tokens)

    def test_tokenize_matches_iter_tokens(self):
        source = "x => x * 2"
        self.assertEqual(Lexer(source).tokenize(), list(Lexer(source).iter_tokens()))


if __name__ == "__main__":
    unittest.main()
