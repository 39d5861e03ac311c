"""Transform capability protocol.

The capability manager runs the same state machine regardless of where text
is transformed. What differs is plugged in at construction: a remote,
credit-metered service or an unmetered on-device provider chain.
"""

from __future__ import annotations

import dataclasses
from typing import Protocol, runtime_checkable

from ghostwrite.core.types import Tier


@dataclasses.dataclass(frozen=True, slots=True)
class AccountSnapshot:
    """Balance and tier reported by a status check."""

    credits: int
    tier: Tier


@dataclasses.dataclass(frozen=True, slots=True)
class TransformOutcome:
    """Result of a single AI transform.

    ``credits_remaining`` is the authoritative balance after the debit, or
    None when the service did not report one.
    """

    text: str
    provider: str
    credits_remaining: int | None
    should_check_grammar: bool


@runtime_checkable
class TransformCapability(Protocol):
    """Where and how the AI transform is performed."""

    metered: bool
    requires_credential: bool

    async def fetch_status(self, credential: str | None) -> AccountSnapshot:
        """Check reachability and balance; raises a typed error on failure."""
        ...

    async def transform(
        self,
        text: str,
        action: str,
        credential: str | None,
        *,
        idempotency_key: str | None = None,
    ) -> TransformOutcome:
        """Transform ``text``; raises a typed error on failure."""
        ...

    async def aclose(self) -> None: ...
