"""Framework-agnostic request handlers for the GhostWrite service.

Each handler takes the pieces of an HTTP request it needs and returns a
:class:`ServiceResponse`. Any web framework (or the in-process transport used
in tests) can adapt them.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
from datetime import UTC, datetime
import logging
from typing import Any

from ghostwrite.constants import CREDITS_PER_TRANSFORM
from ghostwrite.core.exceptions import InsufficientCreditsError, ServiceUnavailableError
from ghostwrite.prompts import AVAILABLE_ACTIONS, is_valid_action
from ghostwrite.providers import FallbackProvider

from .ledger import ChargeReceipt, CreditLedger, UserAccount

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class ServiceResponse:
    status: int
    body: dict[str, Any]


def _error(status: int, error: str, /, **extra: Any) -> ServiceResponse:
    return ServiceResponse(status, {"success": False, "error": error, **extra})


def _receipt_body(receipt: ChargeReceipt) -> dict[str, Any]:
    return {
        "success": True,
        "result": receipt.result,
        "credits_remaining": receipt.credits_remaining,
        "provider": receipt.provider,
        "should_check_grammar": True,
    }


class TransformService:
    """Serves ``/humanize``, ``/rewrite``, ``/improve`` and ``/status``."""

    def __init__(
        self,
        ledger: CreditLedger,
        provider: FallbackProvider,
        *,
        credits_per_transform: int = CREDITS_PER_TRANSFORM,
    ):
        self.ledger = ledger
        self.provider = provider
        self.credits_per_transform = credits_per_transform

    async def handle_transform(
        self,
        action: str,
        *,
        method: str,
        authorization: str | None,
        body: Any,
        idempotency_key: str | None = None,
    ) -> ServiceResponse:
        if method.upper() != "POST":
            return _error(405, "Method not allowed")
        try:
            return await self._transform(action, authorization, body, idempotency_key)
        except Exception as e:
            log.exception("Unexpected error in /%s", action)
            return _error(500, "Internal server error", message=str(e))

    async def handle_status(
        self, *, method: str, authorization: str | None
    ) -> ServiceResponse:
        if method.upper() != "POST":
            return _error(405, "Method not allowed")
        try:
            user = await self._authenticate(authorization)
            if isinstance(user, ServiceResponse):
                return user
            credits = await self.ledger.get_credit_balance(user.id)
        except Exception as e:
            log.exception("Unexpected error in /status")
            return _error(500, "Internal server error", message=str(e))

        return ServiceResponse(
            200,
            {
                "success": True,
                "user": {
                    "id": user.id,
                    "email": user.email,
                    "tier": user.tier.value,
                    "credits_remaining": credits,
                },
                "service_status": {
                    "api": "operational",
                    "timestamp": datetime.now(UTC).isoformat(),
                },
            },
        )

    async def _transform(
        self,
        action: str,
        authorization: str | None,
        body: Any,
        idempotency_key: str | None,
    ) -> ServiceResponse:
        text = body.get("text") if isinstance(body, Mapping) else None
        if not isinstance(text, str) or not text.strip():
            return _error(400, "Invalid input: text is required")
        if not is_valid_action(action):
            return _error(
                400, f"Invalid action. Must be one of: {', '.join(AVAILABLE_ACTIONS)}"
            )

        user = await self._authenticate(authorization)
        if isinstance(user, ServiceResponse):
            return user

        if idempotency_key:
            previous = await self.ledger.find_charge(user.id, idempotency_key)
            if previous is not None:
                return ServiceResponse(200, _receipt_body(previous))

        if not await self.ledger.has_enough_credits(user.id, self.credits_per_transform):
            return _error(402, "Insufficient credits", credits_remaining=0)

        try:
            generated = await self.provider.process_with_provider(text, action)
        except ServiceUnavailableError as e:
            return _error(503, e.message, details=e.details)
        log.info("/%s served by %s for user %s", action, generated.provider, user.id)

        try:
            receipt = await self.ledger.charge(
                user.id,
                action=action,
                text_length=len(text),
                result=generated.text,
                provider=generated.provider,
                idempotency_key=idempotency_key,
                credits=self.credits_per_transform,
            )
        except InsufficientCreditsError:
            return _error(402, "Insufficient credits", credits_remaining=0)
        return ServiceResponse(200, _receipt_body(receipt))

    async def _authenticate(self, authorization: str | None) -> UserAccount | ServiceResponse:
        if not authorization or not authorization.startswith("Bearer "):
            return _error(401, "Missing or invalid API key")
        user = await self.ledger.get_user_by_api_key(authorization.removeprefix("Bearer "))
        if user is None:
            return _error(401, "Invalid API key")
        return user
