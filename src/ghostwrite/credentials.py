"""Credential persistence.

The only secret GhostWrite stores is the service API key. It is written as a
small JSON document readable by the owning user only.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Protocol, runtime_checkable

from ghostwrite.constants import CREDENTIAL_STORAGE_KEY, DEFAULT_CREDENTIAL_FILE

log = logging.getLogger(__name__)


@runtime_checkable
class CredentialStore(Protocol):
    async def load(self) -> str | None: ...
    async def save(self, credential: str) -> None: ...
    async def clear(self) -> None: ...


class FileCredentialStore:
    """Stores the API key as ``{"apiKey": "..."}`` in a user-private file."""

    def __init__(self, path: str | Path = DEFAULT_CREDENTIAL_FILE):
        self.path = Path(path).expanduser()

    async def load(self) -> str | None:
        return await asyncio.to_thread(self._read)

    async def save(self, credential: str) -> None:
        await asyncio.to_thread(self._write, credential)
        log.info("API key saved to %s", self.path)

    async def clear(self) -> None:
        await asyncio.to_thread(self.path.unlink, missing_ok=True)

    def _read(self) -> str | None:
        if not self.path.exists():
            return None
        data = json.loads(self.path.read_text(encoding="utf-8"))
        value = data.get(CREDENTIAL_STORAGE_KEY) if isinstance(data, dict) else None
        return value if isinstance(value, str) and value else None

    def _write(self, credential: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".credentials-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({CREDENTIAL_STORAGE_KEY: credential}, f)
            os.chmod(tmp, 0o600)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


class MemoryCredentialStore:
    """Process-local store for tests and ephemeral sessions."""

    def __init__(self, credential: str | None = None):
        self._credential = credential

    async def load(self) -> str | None:
        return self._credential

    async def save(self, credential: str) -> None:
        self._credential = credential

    async def clear(self) -> None:
        self._credential = None
