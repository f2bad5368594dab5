"""Shipment record, risk and prediction models."""

from typing import Any, Optional, TypedDict

from pydantic import BaseModel, ConfigDict, Field


class ShipmentRecord(TypedDict, total=False):
    """Flat shipment record as returned by the shipment store.

    Every attribute is an optional string. The pipeline treats records as
    read-only and adds ``slaBreach`` / ``slaBreachProbability`` only on
    the copies it returns from prediction.
    """

    id: str
    upsShipmentNumber: str
    shipmentMode: str
    carrierService: str
    shipmentCreationDatetime: str
    pickupDatetime: str
    deliveryETADatetime: str
    actualDeliveryDatetime: str
    milestoneStatus: str
    deliveryStatus: str
    isAtRisk: str
    atRiskSeverity: str
    weatherMetar: str
    weatherCondition: str
    trafficCondition: str
    originPortCode: str
    destinationPortCode: str
    flightIATA: str
    containerNumber: str
    originCity: str
    destinationCity: str
    originCountry: str
    destinationCountry: str
    weatherConditionRiskScore: str
    trafficConditionRiskScore: str
    portCongestionRiskScore: str
    airportCongestionRiskScore: str
    flightDelayRiskScore: str
    airRisk: str
    oceanRisk: str
    surfaceRisk: str
    slaBreach: bool
    slaBreachProbability: Optional[float]


class ShipmentRisk(BaseModel):
    """Per-shipment risk verdict from the risk assessment step."""

    model_config = ConfigDict(populate_by_name=True)

    ups_shipment_number: Optional[str] = Field(default=None, alias="upsShipmentNumber")
    risk_level: Optional[str] = Field(default=None, alias="RiskLevel")
    risk_reason: Optional[str] = Field(default=None, alias="RiskReason")


class ShipmentFetchResult(BaseModel):
    """Records returned by the shipment store.

    An empty list is a valid result, not an error.
    """

    shipments: list[dict[str, Any]] = Field(default_factory=list)
    success: bool = True


class PredictionResult(BaseModel):
    """Positionally aligned prediction arrays.

    ``prediction[i]`` and ``probability[i]`` belong to the i-th shipment
    that was submitted. There is no identifier-based join.
    """

    prediction: list[Any] = Field(default_factory=list)
    probability: list[Any] = Field(default_factory=list)
