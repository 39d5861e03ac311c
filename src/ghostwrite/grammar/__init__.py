"""Local grammar checking."""

from .base import GrammarEngine
from .loader import GrammarEngineLoader
from .rules import DEFAULT_RULES, GrammarRule, RuleBasedGrammarEngine

__all__ = [
    "DEFAULT_RULES",
    "GrammarEngine",
    "GrammarEngineLoader",
    "GrammarRule",
    "RuleBasedGrammarEngine",
]
