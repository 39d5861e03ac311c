"""Prompt registry for GhostWrite text transformations."""

from .registry import (
    AVAILABLE_ACTIONS,
    SYSTEM_PROMPTS,
    PromptTemplate,
    get_prompt_info,
    get_system_prompt,
    is_valid_action,
)

__all__ = [
    "AVAILABLE_ACTIONS",
    "SYSTEM_PROMPTS",
    "PromptTemplate",
    "get_prompt_info",
    "get_system_prompt",
    "is_valid_action",
]
