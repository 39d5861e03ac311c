"""Credit ledger gateway.

The ledger authenticates API keys and owns credit balances. A charge is the
single place a balance changes: it debits, records usage and stores a
receipt keyed by the request's idempotency key, all under one lock. A
repeated key returns the stored receipt instead of charging again.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import dataclasses
import itertools
import logging
import secrets
import time
from typing import Protocol, runtime_checkable

from ghostwrite.constants import CREDITS_PER_TRANSFORM, TRIAL_CREDITS
from ghostwrite.core.exceptions import InsufficientCreditsError, ValidationError
from ghostwrite.core.types import Tier

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class UserAccount:
    id: str
    email: str
    api_key: str
    tier: Tier
    credits_remaining: int
    created_at: float


@dataclasses.dataclass(frozen=True, slots=True)
class UsageRecord:
    user_id: str
    action: str
    text_length: int
    credits_used: int
    provider: str
    created_at: float


@dataclasses.dataclass(frozen=True, slots=True)
class ChargeReceipt:
    """What a charged transform returned; replayed for a repeated key."""

    idempotency_key: str | None
    user_id: str
    action: str
    result: str
    provider: str
    credits_remaining: int


@runtime_checkable
class CreditLedger(Protocol):
    async def get_user_by_api_key(self, api_key: str) -> UserAccount | None: ...
    async def get_credit_balance(self, user_id: str) -> int: ...
    async def has_enough_credits(
        self, user_id: str, required: int = CREDITS_PER_TRANSFORM
    ) -> bool: ...
    async def charge(
        self,
        user_id: str,
        *,
        action: str,
        text_length: int,
        result: str,
        provider: str,
        idempotency_key: str | None = None,
        credits: int = CREDITS_PER_TRANSFORM,
    ) -> ChargeReceipt: ...
    async def find_charge(self, user_id: str, idempotency_key: str) -> ChargeReceipt | None: ...
    async def create_user(
        self,
        email: str,
        api_key: str | None = None,
        *,
        initial_credits: int = TRIAL_CREDITS,
    ) -> UserAccount: ...
    async def update_user_tier(
        self, user_id: str, tier: Tier, *, credits_to_add: int = 0
    ) -> UserAccount: ...


def generate_api_key() -> str:
    return f"gw_{secrets.token_urlsafe(24)}"


class InMemoryCreditLedger:
    """Process-local ledger for development, tests and single-node deployments."""

    def __init__(self, *, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._lock = asyncio.Lock()
        self._ids = itertools.count(1)
        self._users: dict[str, UserAccount] = {}
        self._by_key: dict[str, str] = {}
        self._receipts: dict[tuple[str, str], ChargeReceipt] = {}
        self.usage: list[UsageRecord] = []

    async def get_user_by_api_key(self, api_key: str) -> UserAccount | None:
        user_id = self._by_key.get(api_key)
        return self._users.get(user_id) if user_id else None

    async def get_credit_balance(self, user_id: str) -> int:
        user = self._users.get(user_id)
        return user.credits_remaining if user else 0

    async def has_enough_credits(
        self, user_id: str, required: int = CREDITS_PER_TRANSFORM
    ) -> bool:
        return await self.get_credit_balance(user_id) >= required

    async def charge(
        self,
        user_id: str,
        *,
        action: str,
        text_length: int,
        result: str,
        provider: str,
        idempotency_key: str | None = None,
        credits: int = CREDITS_PER_TRANSFORM,
    ) -> ChargeReceipt:
        """Debit ``credits`` and store the transform result.

        Raises:
            InsufficientCreditsError: The balance is below ``credits``.
        """
        async with self._lock:
            if idempotency_key is not None:
                existing = self._receipts.get((user_id, idempotency_key))
                if existing is not None:
                    log.info("Replaying charge %s for user %s", idempotency_key, user_id)
                    return existing

            user = self._users.get(user_id)
            if user is None or user.credits_remaining < credits:
                raise InsufficientCreditsError("Insufficient credits")

            user = dataclasses.replace(user, credits_remaining=user.credits_remaining - credits)
            self._users[user_id] = user
            self.usage.append(
                UsageRecord(
                    user_id=user_id,
                    action=action,
                    text_length=text_length,
                    credits_used=credits,
                    provider=provider,
                    created_at=self._clock(),
                )
            )
            receipt = ChargeReceipt(
                idempotency_key=idempotency_key,
                user_id=user_id,
                action=action,
                result=result,
                provider=provider,
                credits_remaining=user.credits_remaining,
            )
            if idempotency_key is not None:
                self._receipts[(user_id, idempotency_key)] = receipt
            return receipt

    async def find_charge(self, user_id: str, idempotency_key: str) -> ChargeReceipt | None:
        return self._receipts.get((user_id, idempotency_key))

    async def create_user(
        self,
        email: str,
        api_key: str | None = None,
        *,
        initial_credits: int = TRIAL_CREDITS,
    ) -> UserAccount:
        if not email:
            raise ValidationError("Invalid input: email is required")
        async with self._lock:
            api_key = api_key or generate_api_key()
            if api_key in self._by_key:
                raise ValidationError("API key already registered")
            user = UserAccount(
                id=str(next(self._ids)),
                email=email,
                api_key=api_key,
                tier=Tier.TRIAL,
                credits_remaining=initial_credits,
                created_at=self._clock(),
            )
            self._users[user.id] = user
            self._by_key[api_key] = user.id
            return user

    async def update_user_tier(
        self, user_id: str, tier: Tier, *, credits_to_add: int = 0
    ) -> UserAccount:
        async with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise KeyError(user_id)
            user = dataclasses.replace(
                user,
                tier=tier,
                credits_remaining=user.credits_remaining + credits_to_add,
            )
            self._users[user_id] = user
            return user
