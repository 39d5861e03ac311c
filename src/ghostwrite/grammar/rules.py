"""A small regex-driven grammar engine.

It covers the mechanical mistakes that survive an AI rewrite (doubled words,
stray spacing, a/an agreement, sentence capitalisation). Richer engines can be
plugged in through :class:`~ghostwrite.grammar.loader.GrammarEngineLoader`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
import dataclasses
import re

from ghostwrite.core.types import Finding


@dataclasses.dataclass(frozen=True, slots=True)
class GrammarRule:
    """One pattern and how to report its matches.

    ``group`` selects the part of the match the finding points at;
    ``suggest`` maps that matched text to a replacement.
    """

    name: str
    pattern: re.Pattern[str]
    message: str
    category: str = "grammar"
    suggest: Callable[[re.Match[str]], str | None] | None = None
    group: int = 0

    def findings(self, text: str) -> Iterable[Finding]:
        for match in self.pattern.finditer(text):
            start, end = match.span(self.group)
            yield Finding(
                span_start=start,
                span_end=end,
                message=self.message,
                suggestion=self.suggest(match) if self.suggest else None,
                category=self.category,
            )


def _article_suggestion(match: re.Match[str]) -> str:
    return "An" if match.group(1) == "A" else "an"


DEFAULT_RULES: tuple[GrammarRule, ...] = (
    GrammarRule(
        name="repeated-word",
        pattern=re.compile(r"\b(\w+)\s+(\1)\b", re.IGNORECASE),
        message="Repeated word",
        suggest=lambda m: m.group(1),
    ),
    GrammarRule(
        name="multiple-spaces",
        pattern=re.compile(r"(?<=\S) {2,}(?=\S)"),
        message="Multiple consecutive spaces",
        category="style",
        suggest=lambda m: " ",  # noqa: ARG005
    ),
    GrammarRule(
        name="article-agreement",
        pattern=re.compile(r"\b([Aa])\s+(?=[aeioAEIO]\w)"),
        message='Use "an" before a word starting with a vowel sound',
        suggest=_article_suggestion,
        group=1,
    ),
    GrammarRule(
        name="sentence-capitalization",
        pattern=re.compile(r"(?:^|[.!?]\s+)([a-z])"),
        message="Sentence should start with a capital letter",
        suggest=lambda m: m.group(1).upper(),
        group=1,
    ),
    GrammarRule(
        name="space-before-punctuation",
        pattern=re.compile(r"(?<=\w)( +)[,.;:!?]"),
        message="Remove the space before punctuation",
        category="style",
        suggest=lambda m: "",  # noqa: ARG005
        group=1,
    ),
)


class RuleBasedGrammarEngine:
    """Default engine; runs every rule and returns findings in text order."""

    name = "rules"

    def __init__(self, rules: Iterable[GrammarRule] = DEFAULT_RULES):
        self.rules = tuple(rules)

    async def lint(self, text: str) -> list[Finding]:
        findings = [f for rule in self.rules for f in rule.findings(text)]
        return sorted(findings, key=lambda f: (f.span_start, f.span_end))
