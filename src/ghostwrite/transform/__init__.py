"""Pluggable transform capabilities (remote metered or local unmetered)."""

from .base import AccountSnapshot, TransformCapability, TransformOutcome
from .local import LocalTransform
from .remote import RemoteTransform

__all__ = [
    "AccountSnapshot",
    "LocalTransform",
    "RemoteTransform",
    "TransformCapability",
    "TransformOutcome",
]
