"""
Grammar configuration for scriptlex.

A ``GrammarConfig`` bundles every table the scanner and parser consult:
keywords, literal words, the operator/punctuator table, string escapes and
the parser's operator tables. Instances are immutable and passed explicitly
to ``Lexer`` and ``Parser``; ``DEFAULT_CONFIG`` is the stock grammar.

Overlays let a caller describe a grammar variant as data::

    {
        "add_keywords": ["async", "of"],
        "remove_keywords": ["with"],
        "binary_operators": {
            "|>": {"precedence": "ADDITIVE", "associativity": "left"}
        }
    }
"""

import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from .lexer.tokens import (
    TokenType, KEYWORDS, LITERAL_WORDS, OPERATORS, ESCAPES
)
from .precedence import (
    Precedence, Associativity, OperatorInfo,
    BINARY_OPERATORS, LOGICAL_OPERATORS, UNARY_OPERATORS, ASSIGNMENT_OPERATORS
)

logger = logging.getLogger(__name__)

_OVERLAY_KEYS = {"add_keywords", "remove_keywords", "binary_operators"}


class ConfigError(ValueError):
    """Raised when a grammar overlay cannot be applied."""


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class GrammarConfig:
    """Immutable set of lexical and operator tables."""
    keywords: FrozenSet[str] = KEYWORDS
    literal_words: Mapping[str, Tuple[TokenType, Any]] = field(
        default_factory=lambda: _frozen(LITERAL_WORDS))
    operators: Mapping[str, TokenType] = field(
        default_factory=lambda: _frozen(OPERATORS))
    escapes: Mapping[str, str] = field(
        default_factory=lambda: _frozen(ESCAPES))
    binary_operators: Mapping[str, OperatorInfo] = field(
        default_factory=lambda: _frozen(BINARY_OPERATORS))
    unary_operators: FrozenSet[str] = UNARY_OPERATORS
    assignment_operators: FrozenSet[str] = ASSIGNMENT_OPERATORS
    logical_operators: FrozenSet[str] = LOGICAL_OPERATORS

    @property
    def max_operator_length(self) -> int:
        return max(len(op) for op in self.operators)

    def is_reserved(self, word: str) -> bool:
        """Check if a word can never be an identifier."""
        return word in self.keywords or word in self.literal_words

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any],
                     base: Optional["GrammarConfig"] = None) -> "GrammarConfig":
        """
        Build a config by applying an overlay to ``base``.

        Args:
            data: Overlay with optional keys ``add_keywords``,
                ``remove_keywords`` and ``binary_operators``
            base: Config to start from (defaults to DEFAULT_CONFIG)

        Raises:
            ConfigError: If the overlay has unknown keys or bad values
        """
        base = base or DEFAULT_CONFIG

        unknown = set(data) - _OVERLAY_KEYS
        if unknown:
            raise ConfigError(f"Unknown grammar overlay keys: {', '.join(sorted(unknown))}")

        keywords = set(base.keywords)
        keywords.update(_word_list(data, "add_keywords"))
        keywords.difference_update(_word_list(data, "remove_keywords"))

        operators: Dict[str, TokenType] = dict(base.operators)
        binary_operators: Dict[str, OperatorInfo] = dict(base.binary_operators)

        overlay_operators = data.get("binary_operators", {})
        if not isinstance(overlay_operators, Mapping):
            raise ConfigError("binary_operators must map operator lexemes to options")

        for lexeme, options in overlay_operators.items():
            binary_operators[lexeme] = _operator_info(lexeme, options)
            if lexeme.isidentifier():
                keywords.add(lexeme)
            else:
                operators.setdefault(lexeme, TokenType.OPERATOR)

        logger.debug("grammar overlay applied: %d keywords, %d binary operators",
                     len(keywords), len(binary_operators))

        return cls(
            keywords=frozenset(keywords),
            literal_words=base.literal_words,
            operators=_frozen(operators),
            escapes=base.escapes,
            binary_operators=_frozen(binary_operators),
            unary_operators=base.unary_operators,
            assignment_operators=base.assignment_operators,
            logical_operators=base.logical_operators,
        )


def _word_list(data: Mapping[str, Any], key: str) -> List[str]:
    words = data.get(key, [])
    if not isinstance(words, (list, tuple)) or not all(isinstance(w, str) and w for w in words):
        raise ConfigError(f"{key} must be a list of non-empty strings")
    return list(words)


def _operator_info(lexeme: str, options: Mapping[str, Any]) -> OperatorInfo:
    if not isinstance(lexeme, str) or not lexeme:
        raise ConfigError(f"Operator lexeme must be a non-empty string, got {lexeme!r}")
    if not isinstance(options, Mapping):
        raise ConfigError(
            f"Operator '{lexeme}' needs an options object such as {{'precedence': 'ADDITIVE'}}"
        )

    try:
        precedence = Precedence[options["precedence"]]
    except KeyError:
        raise ConfigError(
            f"Operator '{lexeme}' needs a precedence name from "
            f"{', '.join(p.name for p in Precedence if p.name != 'NONE')}"
        ) from None

    # Only levels handled by the binary loop make sense for a new operator
    if not Precedence.NULLISH <= precedence <= Precedence.EXPONENT:
        raise ConfigError(f"Operator '{lexeme}' cannot bind at {precedence.name}")

    try:
        associativity = Associativity(options.get("associativity", "left"))
    except ValueError:
        raise ConfigError(
            f"Operator '{lexeme}' has invalid associativity {options.get('associativity')!r}"
        ) from None

    return OperatorInfo(precedence, associativity)


def load_config(path: str, base: Optional[GrammarConfig] = None) -> GrammarConfig:
    """
    Load a grammar overlay from a JSON file.

    Raises:
        ConfigError: If the file is not a JSON object or the overlay is invalid
        OSError: If the file cannot be read
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{path}: invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: grammar overlay must be a JSON object")

    return GrammarConfig.from_mapping(data, base)


DEFAULT_CONFIG = GrammarConfig()
