"""Prompt registry lookups."""

import logging

import pytest

from ghostwrite.prompts import (
    AVAILABLE_ACTIONS,
    SYSTEM_PROMPTS,
    get_prompt_info,
    get_system_prompt,
    is_valid_action,
)

pytestmark = pytest.mark.unit


def test_available_actions():
    assert AVAILABLE_ACTIONS == ("humanize", "rewrite", "improve")


@pytest.mark.parametrize("action", ["humanize", "rewrite", "improve"])
def test_every_action_has_versioned_prompt(action):
    info = get_prompt_info(action)

    assert is_valid_action(action)
    assert info is not None
    assert info["version"] == "1.0"
    assert get_system_prompt(action).startswith("You are")


def test_unknown_action_falls_back_to_humanize(caplog):
    with caplog.at_level(logging.WARNING, logger="ghostwrite.prompts.registry"):
        prompt = get_system_prompt("summarize")

    assert prompt == get_system_prompt("humanize")
    assert "falling back" in caplog.text
    assert get_prompt_info("summarize") is None
    assert not is_valid_action("summarize")


def test_tone_and_context_wrap_prompt():
    prompt = get_system_prompt("rewrite", tone="casual", context="an email to a friend")

    assert prompt.startswith("[Tone: casual]")
    assert "Context: an email to a friend" in prompt
    assert prompt.endswith("Text to process:")


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        SYSTEM_PROMPTS["humanize"] = None  # type: ignore[index]
