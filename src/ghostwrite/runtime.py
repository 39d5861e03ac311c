"""Explicitly constructed runtime context.

:class:`GhostwriteRuntime` owns one capability manager and everything wired to
it: the message router, the broadcast and low-credit listeners and the
periodic recheck. Request handlers and timers receive the runtime (or its
router) rather than reaching for a module-level instance.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
import logging
from pathlib import Path
from types import TracebackType
from typing import Any, Self

import httpx

from ghostwrite.config import FrozenConfig, resolve_config
from ghostwrite.connectivity import ConnectivityProbe, SocketConnectivityProbe
from ghostwrite.core.types import CapabilityState, StatusProjection
from ghostwrite.credentials import CredentialStore, FileCredentialStore
from ghostwrite.grammar import GrammarEngineLoader
from ghostwrite.manager import CapabilityManager
from ghostwrite.providers import build_provider_chain
from ghostwrite.router import MessageRouter
from ghostwrite.scheduler import RecheckScheduler
from ghostwrite.surface import (
    Broadcaster,
    Indicator,
    LoggingBroadcaster,
    LoggingIndicator,
    LoggingNotifier,
    Notifier,
    UrlOpener,
    open_in_browser,
)
from ghostwrite.telemetry import TelemetryContext, TelemetryContextProtocol, TelemetryReporter
from ghostwrite.transform import LocalTransform, RemoteTransform, TransformCapability

log = logging.getLogger(__name__)

CAPABILITY_UPDATE = "CAPABILITY_UPDATE"


class LowCreditWarning:
    """Listener that warns once per distinct low balance.

    Fires when ``0 < credits <= threshold`` and the balance differs from the
    one last warned about.
    """

    def __init__(self, threshold: int):
        self.threshold = threshold
        self._last_warned: int | None = None

    def should_warn(self, status: StatusProjection) -> bool:
        credits = status.credits_remaining
        if not 0 < credits <= self.threshold:
            self._last_warned = None
            return False
        if credits == self._last_warned:
            return False
        self._last_warned = credits
        return True


class GhostwriteRuntime:
    """Wires and owns the capability manager and its surfaces.

    Use as an async context manager, or call :meth:`start` and :meth:`stop`.
    """

    def __init__(
        self,
        manager: CapabilityManager,
        *,
        config: FrozenConfig | None = None,
        notifier: Notifier | None = None,
        broadcaster: Broadcaster | None = None,
        open_url: UrlOpener = open_in_browser,
    ):
        self.config = config or FrozenConfig()
        self.manager = manager
        self.router = MessageRouter(
            manager, upgrade_url=self.config.upgrade_url, open_url=open_url
        )
        self.scheduler = RecheckScheduler(manager, self.config.recheck_interval_seconds)
        self._notifier = notifier or LoggingNotifier()
        self._broadcaster = broadcaster or LoggingBroadcaster()
        self._low_credit = LowCreditWarning(self.config.low_credit_threshold)
        self._tasks: set[asyncio.Task[Any]] = set()

        manager.subscribe(self._on_status)

    @classmethod
    def from_config(
        cls,
        config: FrozenConfig | None = None,
        *,
        transform: TransformCapability | None = None,
        credentials: CredentialStore | None = None,
        connectivity: ConnectivityProbe | None = None,
        indicator: Indicator | None = None,
        notifier: Notifier | None = None,
        broadcaster: Broadcaster | None = None,
        open_url: UrlOpener = open_in_browser,
        reporters: tuple[TelemetryReporter, ...] = (),
        http_client: httpx.AsyncClient | None = None,
    ) -> Self:
        """Build a runtime from configuration.

        Any collaborator passed explicitly replaces the one the configuration
        would have produced.
        """
        config = config or resolve_config().to_frozen()
        telemetry: TelemetryContextProtocol = TelemetryContext(
            *reporters, enabled=config.telemetry_enabled or None
        )
        notifier = notifier or LoggingNotifier()

        if transform is None:
            if config.transform_mode == "local":
                transform = LocalTransform(build_provider_chain(config, telemetry=telemetry))
            else:
                transform = RemoteTransform(
                    config.api_endpoint,
                    timeout=config.request_timeout_seconds,
                    client=http_client,
                )

        manager = CapabilityManager(
            transform=transform,
            grammar_loader=GrammarEngineLoader(
                config.grammar_module or "",
                plugin_path=config.grammar_plugin_path,
            ),
            credentials=credentials or FileCredentialStore(Path(config.credential_path)),
            connectivity=connectivity
            or SocketConnectivityProbe(config.connectivity_host, config.connectivity_port),
            indicator=indicator or LoggingIndicator(),
            notifier=notifier,
            telemetry=telemetry,
        )
        return cls(
            manager,
            config=config,
            notifier=notifier,
            broadcaster=broadcaster,
            open_url=open_url,
        )

    async def start(self, *, schedule_rechecks: bool = True) -> CapabilityState:
        """Initialize capabilities and, optionally, start periodic rechecks."""
        state = await self.manager.initialize()
        if schedule_rechecks:
            self.scheduler.start()
        return state

    async def stop(self) -> None:
        await self.scheduler.stop()
        await self.drain()
        self.manager.unsubscribe(self._on_status)
        await self.manager.aclose()

    async def drain(self) -> None:
        """Wait for pending broadcast and warning tasks."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def dispatch(self, message: dict[str, Any]) -> dict[str, Any]:
        return await self.router.dispatch(message)

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.stop()

    def _on_status(self, status: StatusProjection) -> None:
        self._spawn(
            self._broadcaster.broadcast({"type": CAPABILITY_UPDATE, "status": status.to_dict()}),
            "broadcast",
        )
        if self._low_credit.should_warn(status):
            self._spawn(
                self._notifier.notify(
                    "Low Credits",
                    f"You have {status.credits_remaining} credits remaining. "
                    "Consider upgrading.",
                    priority=1,
                ),
                "low-credit warning",
            )

    def _spawn(self, coro: Coroutine[Any, Any, None], what: str) -> None:
        task = asyncio.get_running_loop().create_task(self._guard(coro, what))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @staticmethod
    async def _guard(coro: Coroutine[Any, Any, None], what: str) -> None:
        try:
            await coro
        except Exception as e:
            log.warning("%s failed: %s", what.capitalize(), e)
