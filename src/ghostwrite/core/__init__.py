"""Core types, errors and mode derivation shared by every GhostWrite layer."""

from .exceptions import (
    ConfigFileError,
    CapabilityUnavailableError,
    ErrorKind,
    GhostwriteError,
    InsufficientCreditsError,
    ProviderError,
    ResponseParseError,
    ServiceUnavailableError,
    TransientNetworkError,
    UnauthenticatedError,
    ValidationError,
)
from .modes import derive_mode, derive_mode_for
from .types import (
    Action,
    CapabilityState,
    Failure,
    FeatureStatus,
    Finding,
    GrammarEngineState,
    Mode,
    PipelineResult,
    RemoteServiceState,
    Result,
    ServiceStatus,
    StatusProjection,
    Success,
    Tier,
    UpgradePrompt,
    project_status,
)

__all__ = [  # noqa: RUF022
    # Errors
    "ErrorKind",
    "GhostwriteError",
    "UnauthenticatedError",
    "InsufficientCreditsError",
    "ServiceUnavailableError",
    "ResponseParseError",
    "ProviderError",
    "CapabilityUnavailableError",
    "ValidationError",
    "TransientNetworkError",
    "ConfigFileError",
    # State
    "Action",
    "Mode",
    "ServiceStatus",
    "Tier",
    "GrammarEngineState",
    "RemoteServiceState",
    "CapabilityState",
    "Finding",
    "PipelineResult",
    "FeatureStatus",
    "UpgradePrompt",
    "StatusProjection",
    "project_status",
    "derive_mode",
    "derive_mode_for",
    # Results
    "Success",
    "Failure",
    "Result",
]
