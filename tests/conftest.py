"""
Global test configuration with support for different test types.
"""

import logging
import os

import pytest

# --- Environment Isolation (Autouse) ---


@pytest.fixture(autouse=True)
def isolate_ghostwrite_env(request, monkeypatch):
    """Ensure a clean GHOSTWRITE_* environment for each test.

    Removes every GHOSTWRITE_* variable and the debug/telemetry toggles, and
    provider keys that would otherwise let a provider reach a real API.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the env unchanged.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ):
        if key.startswith("GHOSTWRITE_"):
            monkeypatch.delenv(key, raising=False)
    for key in ("DEBUG", "GEMINI_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def neutral_home_config(request, monkeypatch, tmp_path):
    """Point the home config directory at an empty temp directory.

    Prevents reading a developer's real ~/.config/ghostwrite.toml.

    Escape hatch: @pytest.mark.allow_real_home_config.
    """
    if request.node.get_closest_marker("allow_real_home_config"):
        return

    fake_home_dir = tmp_path / "home_config_isolated"
    fake_home_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("GHOSTWRITE_CONFIG_HOME", str(fake_home_dir))


@pytest.fixture(autouse=True)
def quiet_noisy_libraries():
    """Reduce log noise from HTTP clients during tests."""
    for name in ("httpx", "httpcore", "openai", "google_genai"):
        logging.getLogger(name).setLevel(logging.WARNING)


def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with faked transports",
        "contract: Protocol conformance tests for pluggable collaborators",
        "allow_env_pollution: Keep the caller's GHOSTWRITE_* environment",
        "allow_real_home_config: Read the real home configuration file",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


@pytest.fixture
def mock_api_key():
    """Provide a consistent, fake API key for tests."""
    return "gw_test_key_12345_67890_abcdef"
