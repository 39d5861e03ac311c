"""Presentation adapters driven by the capability manager.

The manager never talks to a UI directly. It pushes a badge to an
:class:`Indicator`, user-facing alerts to a :class:`Notifier` and state
updates to a :class:`Broadcaster`. The logging implementations here are the
defaults for headless use.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
import dataclasses
import logging
from typing import Any, Literal, Protocol, runtime_checkable
import webbrowser

from ghostwrite.core.types import Mode

log = logging.getLogger(__name__)

type Priority = Literal[0, 1, 2]


@dataclasses.dataclass(frozen=True, slots=True)
class BadgeSpec:
    text: str
    color: str
    title: str


BADGES: Mapping[Mode, BadgeSpec] = {
    Mode.AI_READY: BadgeSpec("✨", "#10b981", "GhostWrite: AI Ready ({credits} credits)"),
    Mode.BASIC_ONLY: BadgeSpec("📝", "#6b7280", "GhostWrite: Basic mode (grammar only)"),
    Mode.ERROR: BadgeSpec("⚠️", "#ef4444", "GhostWrite: Error - Grammar engine failed"),
    Mode.INITIALIZING: BadgeSpec("⏳", "#f59e0b", "GhostWrite: Initializing..."),
}


def badge_for(mode: Mode, credits: int) -> BadgeSpec:
    """Return the badge for ``mode`` with the credit count filled in."""
    spec = BADGES[mode]
    return dataclasses.replace(spec, title=spec.title.format(credits=credits))


@runtime_checkable
class Indicator(Protocol):
    async def set_badge(self, badge: BadgeSpec) -> None: ...


@runtime_checkable
class Notifier(Protocol):
    async def notify(self, title: str, message: str, *, priority: Priority = 1) -> None: ...


@runtime_checkable
class Broadcaster(Protocol):
    async def broadcast(self, message: Mapping[str, Any]) -> None: ...


class LoggingIndicator:
    def __init__(self) -> None:
        self.current: BadgeSpec | None = None

    async def set_badge(self, badge: BadgeSpec) -> None:
        if badge != self.current:
            log.info("%s %s", badge.text, badge.title)
        self.current = badge


class LoggingNotifier:
    async def notify(self, title: str, message: str, *, priority: Priority = 1) -> None:
        level = logging.WARNING if priority >= 2 else logging.INFO
        log.log(level, "%s: %s", title, message)


class LoggingBroadcaster:
    async def broadcast(self, message: Mapping[str, Any]) -> None:
        log.debug("broadcast %s", message.get("type"))


type UrlOpener = Callable[[str], Awaitable[bool]]


async def open_in_browser(url: str) -> bool:
    """Open ``url`` with the system browser without blocking the loop."""
    return await asyncio.to_thread(webbrowser.open, url)
