"""SLA-breach prediction over shipment records.

``SlaPredictionAdapter`` runs in exactly one mode, chosen at construction:

- live: engineer one feature row per shipment, score the batch through
  the PredictionEndpoint and zip the answers back by position;
- mock: read a static prediction table and reuse its rows cyclically.

A failed live call is logged and retried in mock mode on the same input.
If the mock attempt also fails, the original live error propagates.

The adapter never mutates its input; it returns annotated copies with
``slaBreach`` and ``slaBreachProbability`` added.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any, Optional

from src.orchestrator.models.shipment import PredictionResult
from src.orchestrator.value_parsing import parse_datetime, parse_int
from src.services.prediction_endpoint import PredictionEndpoint, load_mock_predictions

logger = logging.getLogger(__name__)

# Modes with a dedicated per-transport risk field.
MODE_RISK_FIELDS: dict[str, str] = {
    "Air": "airRisk",
    "Ocean": "oceanRisk",
    "Surface": "surfaceRisk",
}

DEFAULT_RISK_SCORE = 5

PASS_THROUGH_FEATURES: tuple[str, ...] = (
    "shipmentMode",
    "carrierService",
    "originCity",
    "destinationCity",
    "originCountry",
    "destinationCountry",
)


def coerce_breach(value: Any) -> bool:
    """Read a prediction cell as a boolean.

    Native booleans pass through; strings are true only for "true" (any
    case) or "1"; numbers are true above 0.5; anything else is false.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() == "true" or value == "1"
    if isinstance(value, (int, float)):
        return value > 0.5
    return False


def coerce_probability(value: Any) -> Optional[float]:
    """Read a probability cell. Only numbers count; anything else is absent."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def extract_risk_score(shipment: Mapping[str, Any], mode: str) -> Optional[int]:
    """Select the risk score feature for a transport mode.

    Known modes read their own risk field. For any other mode the score
    is the port-congestion score when the shipment declares that exact
    mode and the score parses, otherwise the default of 5.
    """
    field = MODE_RISK_FIELDS.get(mode)
    if field is not None:
        return parse_int(_text(shipment.get(field)))
    if shipment.get("shipmentMode") == mode:
        port_risk = parse_int(_text(shipment.get("portCongestionRiskScore")))
        if port_risk is not None:
            return port_risk
    return DEFAULT_RISK_SCORE


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _whole_days(later, earlier) -> Optional[int]:
    if later is None or earlier is None:
        return None
    return int((later - earlier).total_seconds() / 86400)


def build_features(shipment: Mapping[str, Any]) -> dict[str, Any]:
    """Engineer the model feature row for one shipment."""
    created = parse_datetime(shipment.get("shipmentCreationDatetime"))
    pickup = parse_datetime(shipment.get("pickupDatetime"))
    eta = parse_datetime(shipment.get("deliveryETADatetime"))

    features: dict[str, Any] = {name: _text(shipment.get(name)) for name in PASS_THROUGH_FEATURES}
    features.update(
        {
            "creation_hour": created.hour if created else None,
            "pickup_hour": pickup.hour if pickup else None,
            "eta_hour": eta.hour if eta else None,
            "days_to_pickup": _whole_days(pickup, created),
            "days_to_eta": _whole_days(eta, created),
            "airRisk": extract_risk_score(shipment, "Air"),
            "oceanRisk": extract_risk_score(shipment, "Ocean"),
            "surfaceRisk": extract_risk_score(shipment, "Surface"),
        }
    )
    return features


def _annotate(shipment: dict[str, Any], prediction: Any, probability: Any) -> None:
    shipment["slaBreach"] = coerce_breach(prediction)
    shipment["slaBreachProbability"] = coerce_probability(probability)


def apply_live_predictions(
    shipments: Sequence[Mapping[str, Any]],
    result: PredictionResult,
) -> list[dict[str, Any]]:
    """Zip endpoint output onto shipments by position.

    Only the first ``min(len(shipments), len(result.prediction))``
    shipments are annotated; the rest are returned unchanged.
    """
    annotated = [dict(shipment) for shipment in shipments]
    for i in range(min(len(annotated), len(result.prediction))):
        probability = result.probability[i] if i < len(result.probability) else None
        _annotate(annotated[i], result.prediction[i], probability)
    return annotated


def apply_mock_predictions(
    shipments: Sequence[Mapping[str, Any]],
    table: PredictionResult,
) -> list[dict[str, Any]]:
    """Annotate every shipment from the mock table, reusing rows cyclically.

    Shipment ``i`` takes mock row ``i % len(table.prediction)``.
    """
    annotated = [dict(shipment) for shipment in shipments]
    cycle = len(table.prediction) or 1
    for i, shipment in enumerate(annotated):
        row = i % cycle
        prediction = table.prediction[row] if row < len(table.prediction) else None
        probability = table.probability[row] if row < len(table.probability) else None
        _annotate(shipment, prediction, probability)
    return annotated


class SlaPredictionAdapter:
    """Annotate shipments with SLA-breach predictions.

    Args:
        endpoint: Live prediction endpoint. Required unless ``use_mock``.
        use_mock: Use the static mock table and never call the endpoint.
        mock_predictions_path: JSON file with the mock table.
        mock_loader: Override for reading the mock table (tests).

    Raises:
        ValueError: If live mode is selected without an endpoint.
    """

    def __init__(
        self,
        endpoint: PredictionEndpoint | None = None,
        use_mock: bool = False,
        mock_predictions_path: str | Path | None = None,
        mock_loader: Callable[[str | Path | None], PredictionResult | None] = load_mock_predictions,
    ) -> None:
        if not use_mock and endpoint is None:
            raise ValueError("A prediction endpoint is required unless mock predictions are enabled")
        self._endpoint = endpoint
        self._use_mock = use_mock
        self._mock_predictions_path = mock_predictions_path
        self._mock_loader = mock_loader

    @property
    def uses_mock(self) -> bool:
        return self._use_mock

    async def predict(self, shipments: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
        """Return annotated copies of ``shipments``.

        Raises:
            Exception: The live failure, when the mock fallback also fails.
        """
        if self._use_mock:
            logger.info("Applying mock SLA predictions to %d shipment(s)", len(shipments))
            return self._predict_mock(shipments)

        try:
            return await self._predict_live(shipments)
        except Exception as live_error:
            logger.error("Error in SLA prediction: %s", live_error)
            logger.warning("Falling back to mock predictions...")
            try:
                return self._predict_mock(shipments)
            except Exception as fallback_error:
                logger.error("Fallback error: %s", fallback_error)
                raise live_error

    async def _predict_live(self, shipments: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
        features = [build_features(shipment) for shipment in shipments]
        logger.info("Requesting live SLA predictions for %d shipment(s)", len(features))
        result = await self._endpoint.predict(features)
        return apply_live_predictions(shipments, result)

    def _predict_mock(self, shipments: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
        table = self._mock_loader(self._mock_predictions_path)
        if table is None:
            logger.warning("Mock predictions unavailable; returning shipments unmodified")
            return [dict(shipment) for shipment in shipments]
        return apply_mock_predictions(shipments, table)


__all__ = [
    "SlaPredictionAdapter",
    "apply_live_predictions",
    "apply_mock_predictions",
    "build_features",
    "coerce_breach",
    "coerce_probability",
    "extract_risk_score",
]
