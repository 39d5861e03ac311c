"""GhostWrite: AI humanize/rewrite with grammar checking and metered credits."""

import importlib.metadata
import logging

from ghostwrite.config import FrozenConfig, ResolvedConfig, resolve_config
from ghostwrite.core.exceptions import (
    CapabilityUnavailableError,
    ErrorKind,
    GhostwriteError,
    InsufficientCreditsError,
    ServiceUnavailableError,
    TransientNetworkError,
    UnauthenticatedError,
    ValidationError,
)
from ghostwrite.core.types import (
    CapabilityState,
    Finding,
    Mode,
    PipelineResult,
    StatusProjection,
)
from ghostwrite.manager import CapabilityManager
from ghostwrite.router import MessageRouter
from ghostwrite.runtime import GhostwriteRuntime
from ghostwrite.telemetry import TelemetryContext, TelemetryReporter
from ghostwrite.transform import LocalTransform, RemoteTransform, TransformCapability

try:
    __version__ = importlib.metadata.version("ghostwrite")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Runtime
    "GhostwriteRuntime",
    "CapabilityManager",
    "MessageRouter",
    # Transform capabilities
    "TransformCapability",
    "RemoteTransform",
    "LocalTransform",
    # State
    "Mode",
    "CapabilityState",
    "StatusProjection",
    "PipelineResult",
    "Finding",
    # Errors
    "ErrorKind",
    "GhostwriteError",
    "UnauthenticatedError",
    "InsufficientCreditsError",
    "ServiceUnavailableError",
    "CapabilityUnavailableError",
    "ValidationError",
    "TransientNetworkError",
    # Configuration
    "resolve_config",
    "ResolvedConfig",
    "FrozenConfig",
    # Telemetry
    "TelemetryContext",
    "TelemetryReporter",
]
