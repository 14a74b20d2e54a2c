"""
Test suite for grammar configuration and JSON overlays.
"""

import dataclasses
import json
import os
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from scriptlex.config import ConfigError, DEFAULT_CONFIG, GrammarConfig, load_config
from scriptlex.lexer import TokenType
from scriptlex.parser import parse_string
from scriptlex.precedence import Associativity, OperatorInfo, Precedence


class TestDefaultConfig(unittest.TestCase):
    """The stock grammar tables."""

    def test_reserved_words(self):
        self.assertTrue(DEFAULT_CONFIG.is_reserved("typeof"))
        self.assertTrue(DEFAULT_CONFIG.is_reserved("null"))
        self.assertFalse(DEFAULT_CONFIG.is_reserved("name"))

    def test_max_operator_length(self):
        self.assertEqual(DEFAULT_CONFIG.max_operator_length, len(">>>="))

    def test_tables_are_read_only(self):
        with self.assertRaises(TypeError):
            DEFAULT_CONFIG.operators["@"] = TokenType.OPERATOR
        with self.assertRaises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.keywords = frozenset()

    def test_right_precedence(self):
        self.assertEqual(OperatorInfo(Precedence.ADDITIVE).right_precedence, Precedence.MULTIPLICATIVE)
        info = OperatorInfo(Precedence.EXPONENT, Associativity.RIGHT)
        self.assertEqual(info.right_precedence, Precedence.EXPONENT)


class TestOverlays(unittest.TestCase):
    """GrammarConfig.from_mapping."""

    def test_base_is_unchanged(self):
        config = GrammarConfig.from_mapping({
            "add_keywords": ["async"],
            "binary_operators": {"|>": {"precedence": "ADDITIVE"}},
        })
        self.assertIn("async", config.keywords)
        self.assertNotIn("async", DEFAULT_CONFIG.keywords)
        self.assertIn("|>", config.operators)
        self.assertNotIn("|>", DEFAULT_CONFIG.operators)

    def test_word_operator_becomes_keyword(self):
        config = GrammarConfig.from_mapping({
            "binary_operators": {"mod": {"precedence": "MULTIPLICATIVE"}}
        })
        self.assertIn("mod", config.keywords)
        self.assertNotIn("mod", config.operators)

    def test_overlay_on_custom_base(self):
        base = GrammarConfig.from_mapping({"add_keywords": ["async"]})
        config = GrammarConfig.from_mapping({"remove_keywords": ["with"]}, base)
        self.assertIn("async", config.keywords)
        self.assertNotIn("with", config.keywords)

    def test_right_associative_operator(self):
        config = GrammarConfig.from_mapping({
            "binary_operators": {"^^": {"precedence": "EXPONENT", "associativity": "right"}}
        })
        tree = parse_string("a ^^ b ^^ c", config=config)
        self.assertEqual(tree.operator, "^^")
        self.assertEqual(tree.right.operator, "^^")

    def test_unknown_key(self):
        with self.assertRaises(ConfigError):
            GrammarConfig.from_mapping({"keywords": ["x"]})

    def test_bad_operator_specs(self):
        bad_options = [
            {},
            {"precedence": "TIGHTEST"},
            {"precedence": "CALL"},
            {"precedence": "ASSIGNMENT"},
            {"precedence": "ADDITIVE", "associativity": "sideways"},
        ]
        for options in bad_options:
            with self.subTest(options=options):
                with self.assertRaises(ConfigError):
                    GrammarConfig.from_mapping({"binary_operators": {"<>": options}})

    def test_keyword_lists_must_hold_strings(self):
        # A bare string would otherwise add each character as a keyword
        bad_lists = ["async", ["async", 1], [""], {"async": True}]
        for key in ("add_keywords", "remove_keywords"):
            for words in bad_lists:
                with self.subTest(key=key, words=words):
                    with self.assertRaises(ConfigError):
                        GrammarConfig.from_mapping({key: words})

    def test_operator_options_must_be_objects(self):
        for options in ["ADDITIVE", 5, ["ADDITIVE"], None]:
            with self.subTest(options=options):
                with self.assertRaises(ConfigError) as ctx:
                    GrammarConfig.from_mapping({"binary_operators": {"|>": options}})
                self.assertIn("|>", str(ctx.exception))

    def test_binary_operators_must_be_an_object(self):
        with self.assertRaises(ConfigError):
            GrammarConfig.from_mapping({"binary_operators": ["|>"]})
        with self.assertRaises(ConfigError):
            GrammarConfig.from_mapping({"binary_operators": {"": {"precedence": "ADDITIVE"}}})

    def test_config_error_is_value_error(self):
        self.assertTrue(issubclass(ConfigError, ValueError))


class TestLoadConfig(unittest.TestCase):
    """Loading overlays from JSON files."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, text):
        path = os.path.join(self.tmpdir.name, "grammar.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_valid_file(self):
        path = self.write(json.dumps({"add_keywords": ["async"]}))
        config = load_config(path)
        self.assertIn("async", config.keywords)

    def test_invalid_json(self):
        path = self.write("{not json")
        with self.assertRaises(ConfigError) as ctx:
            load_config(path)
        self.assertIn("invalid JSON", str(ctx.exception))

    def test_non_object(self):
        path = self.write("[1, 2]")
        with self.assertRaises(ConfigError):
            load_config(path)

    def test_ill_typed_overlay_values(self):
        for overlay in [{"add_keywords": "async"}, {"binary_operators": {"|>": "ADDITIVE"}}]:
            with self.subTest(overlay=overlay):
                path = self.write(json.dumps(overlay))
                with self.assertRaises(ConfigError):
                    load_config(path)

    def test_missing_file(self):
        with self.assertRaises(OSError):
            load_config(os.path.join(self.tmpdir.name, "missing.json"))


if __name__ == "__main__":
    unittest.main()
