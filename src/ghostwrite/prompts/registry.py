"""System prompts for every text transformation.

The registry is a pure lookup: an action name maps to a versioned instruction
text. Unknown actions fall back to the humanize prompt so a provider never
receives an empty system instruction.
"""

from __future__ import annotations

import dataclasses
import logging
from types import MappingProxyType
import typing

from ghostwrite.core.types import Action

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class PromptTemplate:
    """A versioned system prompt."""

    version: str
    description: str
    prompt: str


_HUMANIZE = """\
You are a professional editor who makes writing sound natural and engaging.

STRICT RULES:
- Remove AI-typical jargon: avoid 'delve', 'leverage', 'tapestry', 'underscore', \
'synergy', 'paradigm', 'robust', 'holistic'
- Replace corporate speak with conversational language:
  * "help" instead of "facilitate"
  * "use" instead of "leverage"
  * "explore" instead of "delve into"
  * "show" instead of "underscore"
- Prefer active voice over passive voice
- Use contractions when natural (don't, won't, can't)
- Keep the exact same meaning; do not change intent or core message
- Keep the original tone (professional, casual or academic)
- Output ONLY the rewritten text, no explanations or commentary

Examples:
Before: "We need to leverage our core competencies to facilitate growth"
After: "We should use our strengths to help us grow"

Before: "Let's delve into this topic further to underscore its importance"
After: "Let's explore this topic more to show why it matters"

Text to humanize:"""

_REWRITE = """\
You are an expert editor focused on clarity and conciseness.

STRICT RULES:
- Make the writing clearer and more direct
- Use shorter sentences when possible (15-20 words on average)
- Remove redundancy and filler words
- Use simple, precise language
- Drop unnecessary adjectives and adverbs
- Keep the same tone and meaning
- Do not oversimplify technical or domain-specific terms
- Output ONLY the rewritten text, no explanations

Common improvements:
"Due to the fact that..." -> "Because..."
"In order to..." -> "To..."
"At this point in time..." -> "Now..."
"Despite the fact that..." -> "Although..."

Text to rewrite:"""

_IMPROVE = """\
You are a writing coach focused on flow, clarity and engagement.

STRICT RULES:
- Improve readability and the flow between sentences
- Choose precise, vivid words
- Fix awkward phrasing while keeping the author's voice
- Keep the original tone; do not make casual text formal or vice versa
- Keep the same core meaning and intent
- Add smooth transitions where needed
- Vary sentence structure for better rhythm
- Output ONLY the improved text, no explanations

Text to improve:"""

SYSTEM_PROMPTS: typing.Mapping[Action, PromptTemplate] = MappingProxyType(
    {
        Action.HUMANIZE: PromptTemplate(
            version="1.0",
            description="Make AI-generated text sound more natural and human",
            prompt=_HUMANIZE,
        ),
        Action.REWRITE: PromptTemplate(
            version="1.0",
            description="Improve clarity and conciseness while keeping the same meaning",
            prompt=_REWRITE,
        ),
        Action.IMPROVE: PromptTemplate(
            version="1.0",
            description="Enhance overall writing quality for flow and readability",
            prompt=_IMPROVE,
        ),
    }
)

AVAILABLE_ACTIONS: tuple[str, ...] = tuple(a.value for a in SYSTEM_PROMPTS)


def is_valid_action(action: str | Action) -> bool:
    """Return True when ``action`` has a registered prompt."""
    return str(action) in AVAILABLE_ACTIONS


def get_prompt_info(action: str | Action) -> dict[str, str] | None:
    """Return version and description for ``action``, or None if unknown."""
    if not is_valid_action(action):
        return None
    template = SYSTEM_PROMPTS[Action(str(action))]
    return {"version": template.version, "description": template.description}


def get_system_prompt(
    action: str | Action,
    *,
    tone: str | None = None,
    context: str | None = None,
) -> str:
    """Return the system prompt for ``action``.

    Args:
        action: Transformation name (``humanize``, ``rewrite``, ``improve``).
        tone: Optional tone hint prepended to the prompt.
        context: Optional surrounding context appended to the prompt.
    """
    if is_valid_action(action):
        prompt = SYSTEM_PROMPTS[Action(str(action))].prompt
    else:
        log.warning("Unknown action %r, falling back to humanize prompt", action)
        prompt = SYSTEM_PROMPTS[Action.HUMANIZE].prompt

    if tone:
        prompt = f"[Tone: {tone}]\n\n{prompt}"
    if context:
        prompt = f"{prompt}\n\nContext: {context}\n\nText to process:"
    return prompt
