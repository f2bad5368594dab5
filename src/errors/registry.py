"""Error code registry with E-XXXX format codes.

This module defines the error code system for ShipRisk, organizing errors
into categories:
- E-1xxx: Client input errors
- E-2xxx: Upstream parse errors (completion output we could not read)
- E-3xxx: External service errors (shipment API, prediction, completion)
- E-4xxx: Configuration errors

Each error carries a stable user-facing message. Callers never see the
underlying exception text.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    INPUT = "input"  # E-1xxx
    UPSTREAM_PARSE = "upstream_parse"  # E-2xxx
    EXTERNAL_SERVICE = "external_service"  # E-3xxx
    CONFIGURATION = "configuration"  # E-4xxx


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        user_message: Stable message safe to return to API callers.
        is_retryable: Whether the request can be retried without user action.
    """

    code: str
    category: ErrorCategory
    title: str
    user_message: str
    is_retryable: bool = False


ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Input errors (E-1xxx)
    "E-1001": ErrorCode(
        code="E-1001",
        category=ErrorCategory.INPUT,
        title="Missing Message",
        user_message="Missing or invalid 'message' in request.",
    ),
    "E-1002": ErrorCode(
        code="E-1002",
        category=ErrorCategory.INPUT,
        title="Invalid Request Body",
        user_message="Invalid JSON in request body.",
    ),
    "E-1003": ErrorCode(
        code="E-1003",
        category=ErrorCategory.INPUT,
        title="No Filters",
        user_message="You must specify at least one filter.",
    ),
    "E-1004": ErrorCode(
        code="E-1004",
        category=ErrorCategory.INPUT,
        title="Invalid Filter Field",
        user_message="The filter references a field that cannot be queried.",
    ),
    # Upstream parse errors (E-2xxx)
    "E-2001": ErrorCode(
        code="E-2001",
        category=ErrorCategory.UPSTREAM_PARSE,
        title="Unreadable Filter Extraction",
        user_message="Failed to extract filter criteria from the message.",
    ),
    "E-2002": ErrorCode(
        code="E-2002",
        category=ErrorCategory.UPSTREAM_PARSE,
        title="Unreadable Risk Assessment",
        user_message="Failed to read the shipment risk assessment.",
    ),
    # External service errors (E-3xxx)
    "E-3001": ErrorCode(
        code="E-3001",
        category=ErrorCategory.EXTERNAL_SERVICE,
        title="Shipment Service Error",
        user_message="Database error occurred.",
        is_retryable=True,
    ),
    "E-3002": ErrorCode(
        code="E-3002",
        category=ErrorCategory.EXTERNAL_SERVICE,
        title="Prediction Service Error",
        user_message="SLA prediction is currently unavailable.",
        is_retryable=True,
    ),
    "E-3003": ErrorCode(
        code="E-3003",
        category=ErrorCategory.EXTERNAL_SERVICE,
        title="Completion Service Error",
        user_message="The language service is currently unavailable.",
        is_retryable=True,
    ),
    "E-3004": ErrorCode(
        code="E-3004",
        category=ErrorCategory.EXTERNAL_SERVICE,
        title="External Service Timeout",
        user_message="An upstream service did not respond in time.",
        is_retryable=True,
    ),
    # Configuration errors (E-4xxx)
    "E-4001": ErrorCode(
        code="E-4001",
        category=ErrorCategory.CONFIGURATION,
        title="Missing Configuration",
        user_message="The service is not configured.",
    ),
    "E-4999": ErrorCode(
        code="E-4999",
        category=ErrorCategory.CONFIGURATION,
        title="Unexpected Error",
        user_message="An unexpected error occurred.",
    ),
}

SERVICE_ERROR_CODES: dict[str, str] = {
    "shipment_api": "E-3001",
    "prediction": "E-3002",
    "completion": "E-3003",
}


def get_error(code: str) -> ErrorCode | None:
    """Get error definition by code.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Get all error codes in a category."""
    return [e for e in ERROR_REGISTRY.values() if e.category == category]
