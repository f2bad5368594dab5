"""Error handling framework for ShipRisk.

This package provides:
- Error code registry with E-XXXX format codes
- Typed pipeline exceptions carrying those codes

Error categories:
- E-1xxx: Client input errors
- E-2xxx: Upstream parse errors
- E-3xxx: External service errors
- E-4xxx: Configuration errors
"""

from src.errors.domain import (
    ConfigurationError,
    ExternalServiceError,
    ExternalServiceTimeout,
    InputError,
    PipelineError,
    UpstreamParseError,
)
from src.errors.registry import (
    ERROR_REGISTRY,
    ErrorCategory,
    ErrorCode,
    get_error,
    get_errors_by_category,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    # Exceptions
    "PipelineError",
    "InputError",
    "UpstreamParseError",
    "ExternalServiceError",
    "ExternalServiceTimeout",
    "ConfigurationError",
]
