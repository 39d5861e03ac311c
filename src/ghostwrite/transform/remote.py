"""Credit-metered transform capability backed by the GhostWrite service.

Responses are parsed fail-closed: a payload that does not match the expected
shape raises :class:`~ghostwrite.core.exceptions.ResponseParseError` rather
than being coerced to defaults.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, StrictInt
import pydantic

from ghostwrite.constants import IDEMPOTENCY_HEADER, NETWORK_TIMEOUT, STATUS_PATH
from ghostwrite.core.exceptions import (
    GhostwriteError,
    InsufficientCreditsError,
    ResponseParseError,
    ServiceUnavailableError,
    TransientNetworkError,
    UnauthenticatedError,
    ValidationError,
)
from ghostwrite.core.types import Tier

from .base import AccountSnapshot, TransformOutcome

log = logging.getLogger(__name__)

Credits = Annotated[StrictInt, Field(ge=0)]


class _TransformBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: Literal[True]
    result: Annotated[str, Field(min_length=1)]
    provider: Annotated[str, Field(min_length=1)]
    credits_remaining: Credits | None = None
    should_check_grammar: bool = False


class _StatusUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | int
    email: str | None = None
    tier: Tier
    credits_remaining: Credits


class _StatusBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: Literal[True]
    user: _StatusUser


_STATUS_ERRORS: dict[int, type[GhostwriteError]] = {
    400: ValidationError,
    401: UnauthenticatedError,
    403: UnauthenticatedError,
    402: InsufficientCreditsError,
    503: ServiceUnavailableError,
}


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return None


class RemoteTransform:
    """Talks to the ``/status``, ``/humanize`` and ``/rewrite`` endpoints."""

    metered = True
    requires_credential = True

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float = NETWORK_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch_status(self, credential: str | None) -> AccountSnapshot:
        data = await self._post(STATUS_PATH, credential)
        body = self._parse(_StatusBody, data)
        return AccountSnapshot(credits=body.user.credits_remaining, tier=body.user.tier)

    async def transform(
        self,
        text: str,
        action: str,
        credential: str | None,
        *,
        idempotency_key: str | None = None,
    ) -> TransformOutcome:
        data = await self._post(
            f"/{action}",
            credential,
            payload={"text": text, "action": action},
            idempotency_key=idempotency_key,
        )
        body = self._parse(_TransformBody, data)
        return TransformOutcome(
            text=body.result,
            provider=body.provider,
            credits_remaining=body.credits_remaining,
            should_check_grammar=body.should_check_grammar,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _post(
        self,
        path: str,
        credential: str | None,
        *,
        payload: dict[str, Any] | None = None,
        idempotency_key: str | None = None,
    ) -> Any:
        if not credential:
            raise UnauthenticatedError("No API key configured")

        headers = {"Authorization": f"Bearer {credential}"}
        if idempotency_key:
            headers[IDEMPOTENCY_HEADER] = idempotency_key

        try:
            response = await self._client.post(
                f"{self.endpoint}{path}", headers=headers, json=payload
            )
        except httpx.TransportError as e:
            raise TransientNetworkError(f"Could not reach GhostWrite service: {e}") from e

        if not response.is_success:
            error_type = _STATUS_ERRORS.get(response.status_code, ServiceUnavailableError)
            message = _error_message(response) or f"API returned {response.status_code}"
            log.debug("POST %s returned %d: %s", path, response.status_code, message)
            raise error_type(message)

        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(f"{path} returned a non-JSON body") from e

    @staticmethod
    def _parse[M: BaseModel](model: type[M], data: Any) -> M:
        try:
            return model.model_validate(data)
        except pydantic.ValidationError as e:
            raise ResponseParseError(
                f"Unexpected response shape: {e.error_count()} validation error(s)"
            ) from e
