"""Unit tests for src/errors/registry.py and the typed pipeline exceptions."""

import pytest

from src.errors import (
    ConfigurationError,
    ExternalServiceError,
    ExternalServiceTimeout,
    InputError,
    PipelineError,
    UpstreamParseError,
)
from src.errors.registry import ERROR_REGISTRY, ErrorCategory, get_error, get_errors_by_category


@pytest.mark.parametrize(
    "code,category",
    [
        ("E-1001", ErrorCategory.INPUT),
        ("E-1002", ErrorCategory.INPUT),
        ("E-1003", ErrorCategory.INPUT),
        ("E-2001", ErrorCategory.UPSTREAM_PARSE),
        ("E-3001", ErrorCategory.EXTERNAL_SERVICE),
        ("E-3004", ErrorCategory.EXTERNAL_SERVICE),
        ("E-4001", ErrorCategory.CONFIGURATION),
    ],
)
def test_codes_registered(code, category):
    """Every code the pipeline raises is registered."""
    error = get_error(code)
    assert error is not None, f"{code} not found in registry"
    assert error.category == category


def test_code_prefix_matches_category():
    """E-1xxx is input, E-2xxx parse, E-3xxx external, E-4xxx configuration."""
    prefixes = {
        ErrorCategory.INPUT: "E-1",
        ErrorCategory.UPSTREAM_PARSE: "E-2",
        ErrorCategory.EXTERNAL_SERVICE: "E-3",
        ErrorCategory.CONFIGURATION: "E-4",
    }
    for code, error in ERROR_REGISTRY.items():
        assert code == error.code
        assert code.startswith(prefixes[error.category])


def test_unknown_code():
    assert get_error("E-9999") is None


def test_errors_by_category():
    codes = {e.code for e in get_errors_by_category(ErrorCategory.INPUT)}
    assert codes == {"E-1001", "E-1002", "E-1003", "E-1004"}


class TestPipelineExceptions:
    """Tests for the typed exceptions."""

    def test_input_error_defaults(self):
        err = InputError("no message field")
        assert err.code == "E-1001"
        assert err.user_message == "Missing or invalid 'message' in request."
        assert str(err) == "[E-1001] no message field"
        assert not err.is_retryable

    def test_detail_never_in_user_message(self):
        err = ExternalServiceError("shipment_api", "connect to 10.0.0.5:443 refused")
        assert "10.0.0.5" not in err.user_message
        assert err.user_message == "Database error occurred."

    @pytest.mark.parametrize(
        "service,code",
        [("shipment_api", "E-3001"), ("prediction", "E-3002"), ("completion", "E-3003"), ("other", "E-4999")],
    )
    def test_service_codes(self, service, code):
        assert ExternalServiceError(service, "x").code == code

    def test_timeout_is_external_service_error(self):
        err = ExternalServiceTimeout("prediction", 2.5)
        assert isinstance(err, ExternalServiceError)
        assert err.code == "E-3004"
        assert err.is_retryable
        assert "2.5s" in err.detail

    def test_upstream_parse_error_keeps_raw_text(self):
        err = UpstreamParseError("bad json", raw_text="oops")
        assert err.raw_text == "oops"
        assert err.code == "E-2001"

    def test_configuration_error_lists_missing(self):
        err = ConfigurationError(["shipment_api.url", "completion.api_key"])
        assert err.missing == ["shipment_api.url", "completion.api_key"]
        assert "shipment_api.url" in err.detail

    def test_unregistered_code_falls_back(self):
        assert PipelineError("x", code="E-0000").user_message == "An unexpected error occurred."
