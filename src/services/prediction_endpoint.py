"""SLA prediction endpoint client and mock prediction source.

The endpoint accepts ``{"data": [feature, ...]}`` with a bearer credential
and answers ``{"prediction": [...], "probability": [...]}``, positionally
aligned with the submitted features.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

import httpx

from src.errors import ExternalServiceError, ExternalServiceTimeout
from src.orchestrator.models.shipment import PredictionResult
from src.services.external_call import bounded_call

logger = logging.getLogger(__name__)

SERVICE_NAME = "prediction"


class PredictionEndpoint(Protocol):
    """Batch SLA-breach prediction."""

    async def predict(self, features: list[dict[str, Any]]) -> PredictionResult:
        """Score a batch of feature rows."""
        ...


def parse_prediction_body(body: Any, require_both: bool = True) -> PredictionResult:
    """Read the two arrays from a prediction response or mock table.

    Args:
        body: Decoded JSON.
        require_both: When True a missing array empties the whole result,
            which annotates nothing. When False a missing array is
            treated as empty on its own.
    """
    if not isinstance(body, dict):
        return PredictionResult()
    prediction = body.get("prediction")
    probability = body.get("probability")
    if require_both and (not isinstance(prediction, list) or not isinstance(probability, list)):
        return PredictionResult()
    if not isinstance(prediction, list):
        prediction = []
    if not isinstance(probability, list):
        probability = []
    return PredictionResult(prediction=prediction, probability=probability)


class HttpPredictionEndpoint:
    """PredictionEndpoint over HTTP with bearer authentication.

    Args:
        endpoint: Scoring URL.
        api_key: Bearer credential.
        timeout_seconds: Budget for the scoring call.
        client: Optional shared httpx client.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._api_key = api_key
        self._timeout_seconds = timeout_seconds
        self._client = client

    async def predict(self, features: list[dict[str, Any]]) -> PredictionResult:
        """Submit the whole batch in one call.

        Raises:
            ExternalServiceError: On transport failure, non-2xx status or
                an unreadable body.
            ExternalServiceTimeout: If the call exceeds its budget.
        """
        return await bounded_call(SERVICE_NAME, self._send(features), self._timeout_seconds)

    async def _send(self, features: list[dict[str, Any]]) -> PredictionResult:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        payload = {"data": features}
        try:
            if self._client is not None:
                response = await self._client.post(self._endpoint, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                    response = await client.post(self._endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise ExternalServiceTimeout(SERVICE_NAME, self._timeout_seconds) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(
                SERVICE_NAME, f"Prediction request failed: {type(e).__name__}"
            ) from e

        if response.is_error:
            raise ExternalServiceError(
                SERVICE_NAME, f"Prediction endpoint returned HTTP {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ExternalServiceError(SERVICE_NAME, "Prediction endpoint returned invalid JSON") from e

        return parse_prediction_body(body)


def load_mock_predictions(path: str | Path | None) -> PredictionResult | None:
    """Load the static prediction table.

    Args:
        path: JSON file holding ``prediction`` and ``probability`` arrays.

    Returns:
        The table, or None when no path is configured or the file is
        missing.

    Raises:
        ValueError: If the file exists but is not valid JSON.
    """
    if not path:
        return None
    mock_path = Path(path)
    if not mock_path.is_file():
        logger.warning("Mock predictions file not found: %s", mock_path)
        return None
    with open(mock_path, encoding="utf-8") as f:
        body = json.load(f)
    return parse_prediction_body(body, require_both=False)


__all__ = [
    "HttpPredictionEndpoint",
    "PredictionEndpoint",
    "load_mock_predictions",
    "parse_prediction_body",
]
