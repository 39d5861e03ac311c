"""Network reachability probes.

Used only to classify a failed status check: an unreachable network is
reported as ``offline`` rather than as a service ``error``.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Protocol, runtime_checkable

from ghostwrite.constants import CONNECTIVITY_HOST, CONNECTIVITY_PORT, CONNECTIVITY_TIMEOUT


@runtime_checkable
class ConnectivityProbe(Protocol):
    async def is_online(self) -> bool: ...


class SocketConnectivityProbe:
    """Opens a TCP connection to a well-known host to test reachability."""

    def __init__(
        self,
        host: str = CONNECTIVITY_HOST,
        port: int = CONNECTIVITY_PORT,
        *,
        timeout: float = CONNECTIVITY_TIMEOUT,
    ):
        self.host = host
        self.port = port
        self.timeout = timeout

    async def is_online(self) -> bool:
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port), timeout=self.timeout
            )
        except (OSError, TimeoutError):
            return False
        writer.close()
        with contextlib.suppress(OSError):
            await writer.wait_closed()
        return True


class StaticConnectivity:
    """A probe with a fixed answer."""

    def __init__(self, online: bool = True):
        self.online = online

    async def is_online(self) -> bool:
        return self.online
