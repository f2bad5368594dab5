"""Typed pipeline exceptions for API error mapping.

Every exception carries a registry code so routes can return a stable,
category-appropriate message without leaking the internal detail that
was logged.

Usage:
    # In service layer
    raise ExternalServiceError("shipment_api", "HTTP 503 from shipment API")

    # In route handler
    try:
        result = await orchestrator.run(message)
    except InputError as e:
        return JSONResponse(status_code=400, content={"error_code": e.code, "message": e.user_message})
"""

from src.errors.registry import SERVICE_ERROR_CODES, get_error


class PipelineError(Exception):
    """Base exception for all pipeline errors.

    Attributes:
        code: Registry code in E-XXXX format.
        detail: Internal description for logs. Never returned to callers.
    """

    default_code = "E-4999"

    def __init__(self, detail: str, code: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.code = code or self.default_code

    @property
    def user_message(self) -> str:
        """Stable message safe to show to API callers."""
        error_def = get_error(self.code)
        if error_def is None:
            return "An unexpected error occurred."
        return error_def.user_message

    @property
    def is_retryable(self) -> bool:
        """Whether the registry marks this code as retryable."""
        error_def = get_error(self.code)
        return bool(error_def and error_def.is_retryable)

    def __str__(self) -> str:
        return f"[{self.code}] {self.detail}"


class InputError(PipelineError):
    """Client input was missing or unusable. Maps to HTTP 400."""

    default_code = "E-1001"


class UpstreamParseError(PipelineError):
    """Completion text could not be parsed where JSON was expected.

    Always recovered close to where it is raised; it should never reach
    the HTTP layer.

    Attributes:
        raw_text: The completion output that failed to parse.
    """

    default_code = "E-2001"

    def __init__(self, detail: str, raw_text: str = "", code: str | None = None) -> None:
        super().__init__(detail, code)
        self.raw_text = raw_text


class ExternalServiceError(PipelineError):
    """Transport or protocol failure of an external collaborator.

    Attributes:
        service: Short service name ("shipment_api", "prediction", "completion").
    """

    def __init__(self, service: str, detail: str, code: str | None = None) -> None:
        super().__init__(detail, code or SERVICE_ERROR_CODES.get(service, "E-4999"))
        self.service = service


class ExternalServiceTimeout(ExternalServiceError):
    """An external call did not complete within its time budget."""

    def __init__(self, service: str, timeout_seconds: float) -> None:
        super().__init__(
            service,
            f"{service} call timed out after {timeout_seconds:g}s",
            code="E-3004",
        )
        self.timeout_seconds = timeout_seconds


class ConfigurationError(PipelineError):
    """Required configuration is missing. Fatal at startup.

    Attributes:
        missing: Dotted names of the missing settings.
    """

    default_code = "E-4001"

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required configuration: {', '.join(missing)}")
        self.missing = missing
