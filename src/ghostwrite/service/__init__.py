"""Server side of the GhostWrite service: credit ledger and request handlers."""

from .handlers import ServiceResponse, TransformService
from .ledger import (
    ChargeReceipt,
    CreditLedger,
    InMemoryCreditLedger,
    UsageRecord,
    UserAccount,
    generate_api_key,
)
from .transport import InProcessTransport

__all__ = [
    "ChargeReceipt",
    "CreditLedger",
    "InMemoryCreditLedger",
    "InProcessTransport",
    "ServiceResponse",
    "TransformService",
    "UsageRecord",
    "UserAccount",
    "generate_api_key",
]
