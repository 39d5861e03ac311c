"""Message router between surfaces and the capability manager.

Surfaces (popup, content script, CLI) send ``{"action": ..., ...}`` messages
and always get a JSON-safe mapping back. No exception crosses this boundary:
typed errors become ``{success: false, error, kind}`` and anything unexpected
is logged and reported with kind ``internal``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr
import pydantic

from ghostwrite.constants import UPGRADE_URL
from ghostwrite.core.exceptions import ErrorKind, GhostwriteError, ValidationError
from ghostwrite.core.types import Action
from ghostwrite.manager import CapabilityManager
from ghostwrite.surface import UrlOpener, open_in_browser

log = logging.getLogger(__name__)

type Response = dict[str, Any]
type Handler = Callable[[Mapping[str, Any]], Awaitable[Response]]


class _TextPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: StrictStr


class _ApiKeyPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    api_key: StrictStr = pydantic.Field(alias="apiKey")


def _parse[M: BaseModel](model: type[M], message: Mapping[str, Any]) -> M:
    try:
        return model.model_validate(message)
    except pydantic.ValidationError as e:
        field = ".".join(str(p) for p in e.errors()[0]["loc"]) if e.errors() else "payload"
        raise ValidationError(f"Invalid input: {field} is required") from e


class MessageRouter:
    """Dispatches surface messages to the capability manager."""

    def __init__(
        self,
        manager: CapabilityManager,
        *,
        upgrade_url: str = UPGRADE_URL,
        open_url: UrlOpener = open_in_browser,
    ):
        self.manager = manager
        self.upgrade_url = upgrade_url
        self._open_url = open_url
        self._handlers: dict[str, Handler] = {
            "GET_STATUS": self._get_status,
            "CHECK_GRAMMAR": self._check_grammar,
            "HUMANIZE_TEXT": self._humanize,
            "REWRITE_TEXT": self._rewrite,
            "SAVE_API_KEY": self._save_api_key,
            "RECHECK_API": self._recheck,
            "OPEN_UPGRADE": self._open_upgrade,
        }

    @property
    def actions(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    async def dispatch(self, message: Mapping[str, Any]) -> Response:
        """Handle one message and return its response."""
        action = message.get("action") if isinstance(message, Mapping) else None
        handler = self._handlers.get(action) if isinstance(action, str) else None
        if handler is None:
            return {"success": False, "error": f"Unknown action: {action}"}

        try:
            return await handler(message)
        except GhostwriteError as e:
            log.info("%s failed (%s): %s", action, e.kind, e)
            return e.to_payload()
        except Exception as e:
            log.exception("Unexpected error while handling %s", action)
            return {"success": False, "error": str(e), "kind": ErrorKind.INTERNAL.value}

    async def _get_status(self, message: Mapping[str, Any]) -> Response:  # noqa: ARG002
        return self.manager.status().to_dict()

    async def _check_grammar(self, message: Mapping[str, Any]) -> Response:
        payload = _parse(_TextPayload, message)
        findings = await self.manager.check_grammar_only(payload.text)
        return {"success": True, "errors": [f.to_dict() for f in findings]}

    async def _humanize(self, message: Mapping[str, Any]) -> Response:
        return await self._transform(message, Action.HUMANIZE)

    async def _rewrite(self, message: Mapping[str, Any]) -> Response:
        return await self._transform(message, Action.REWRITE)

    async def _transform(self, message: Mapping[str, Any], action: Action) -> Response:
        payload = _parse(_TextPayload, message)
        result = await self.manager.run_pipeline(payload.text, action.value)
        return result.to_response()

    async def _save_api_key(self, message: Mapping[str, Any]) -> Response:
        payload = _parse(_ApiKeyPayload, message)
        await self.manager.save_credential(payload.api_key)
        return {"success": True}

    async def _recheck(self, message: Mapping[str, Any]) -> Response:  # noqa: ARG002
        await self.manager.recheck_remote_service()
        return self.manager.status().to_dict()

    async def _open_upgrade(self, message: Mapping[str, Any]) -> Response:  # noqa: ARG002
        await self._open_url(self.upgrade_url)
        return {"success": True, "url": self.upgrade_url}
