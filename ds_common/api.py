"""Public API surface for ds_common."""

from ds_common.errors import (
    CommandError,
    CommandFailedError,
    CommandTimeoutError,
    ConfigurationError,
    DSError,
    EngineUnavailableError,
    error_to_payload,
)
from ds_common.logging import configure_logging

__all__ = [
    "configure_logging",
    "CommandError",
    "CommandFailedError",
    "CommandTimeoutError",
    "ConfigurationError",
    "DSError",
    "EngineUnavailableError",
    "error_to_payload",
]
