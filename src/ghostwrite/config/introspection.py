"""Inspect the effective configuration from the command line.

Usage:
    python -m ghostwrite.config
    python -m ghostwrite.config --json
    python -m ghostwrite.config --check
"""

import argparse
import json
import sys
from typing import Any

from .api import resolve_config
from .types import ResolvedConfig

# ruff: noqa: T201


def check_config_validation(*, profile: str | None = None) -> bool:
    """Return True when configuration resolves without errors."""
    try:
        resolve_config(profile=profile)
    except Exception:
        return False
    return True


def get_config_warnings(resolved: ResolvedConfig) -> list[str]:
    """Non-fatal configuration issues worth telling the user about."""
    warnings = []
    if resolved.transform_mode == "local" and not (
        resolved.gemini_api_key or resolved.openai_api_key
    ):
        warnings.append("Local transform mode without any provider API key - AI features will fail")
    if resolved.transform_mode == "remote" and not resolved.api_endpoint.startswith("https://"):
        warnings.append("Service endpoint is not HTTPS - the API key is sent in clear text")
    if resolved.recheck_interval_seconds < 60:
        warnings.append("Recheck interval under a minute - expect frequent status requests")
    if resolved.grammar_module is None and resolved.grammar_plugin_path is None:
        warnings.append("No grammar engine configured - mode will be ERROR")
    return warnings


def get_config_info(*, profile: str | None = None) -> dict[str, Any]:
    """Structured description of the effective configuration."""
    try:
        resolved = resolve_config(profile=profile)
    except Exception as e:
        return {
            "status": "invalid",
            "error": str(e),
            "config": None,
            "sources": {},
            "validation": {"errors": [str(e)], "warnings": []},
        }

    return {
        "status": "valid",
        "config": resolved.to_frozen().to_dict(),
        "sources": dict(resolved.origin),
        "validation": {"errors": [], "warnings": get_config_warnings(resolved)},
    }


def print_config_debug(*, profile: str | None = None, show_sources: bool = True) -> None:
    try:
        resolved = resolve_config(profile=profile)
    except Exception as e:
        print(f"❌ Configuration Error: {e}", file=sys.stderr)
        sys.exit(1)

    print("=== Effective Configuration ===")
    for field, value in resolved.to_frozen().to_dict().items():
        print(f"  {field}: {value}")

    if show_sources:
        print("\n=== Configuration Sources ===")
        print("\n".join(f"  {line}" for line in resolved.audit().splitlines()))

    warnings = get_config_warnings(resolved)
    print("\n=== Validation Results ===")
    print("✅ Configuration is valid")
    for warning in warnings:
        print(f"  ⚠️  {warning}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Inspect GhostWrite configuration",
        prog="python -m ghostwrite.config",
    )
    parser.add_argument("--profile", help="Configuration profile to use")
    parser.add_argument(
        "--no-sources", action="store_true", help="Don't show configuration sources"
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only validate (exit code 0=valid, 1=invalid)",
    )
    args = parser.parse_args(argv)

    if args.check:
        sys.exit(0 if check_config_validation(profile=args.profile) else 1)

    if args.json:
        print(json.dumps(get_config_info(profile=args.profile), indent=2))
    else:
        print_config_debug(profile=args.profile, show_sources=not args.no_sources)


if __name__ == "__main__":
    main()
