"""Filter set, time frame and query models.

A filter set is a plain ``dict[str, str]`` keyed by shipment attribute
names. Keys must come from ``SHIPMENT_FIELDS``; values are always strings,
even for booleans and numbers. A missing key means "unconstrained".
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

FilterSet = dict[str, str]

# Attributes of a shipment record as returned by the shipment store.
RECORD_FIELDS: tuple[str, ...] = (
    "id",
    "upsShipmentNumber",
    "shipmentMode",
    "carrierService",
    "shipmentCreationDatetime",
    "pickupDatetime",
    "deliveryETADatetime",
    "actualDeliveryDatetime",
    "milestoneStatus",
    "deliveryStatus",
    "isAtRisk",
    "atRiskSeverity",
    "weatherMetar",
    "weatherCondition",
    "trafficCondition",
    "originPortCode",
    "destinationPortCode",
    "flightIATA",
    "containerNumber",
    "originCity",
    "destinationCity",
    "originCountry",
    "destinationCountry",
    "weatherConditionRiskScore",
    "trafficConditionRiskScore",
    "portCongestionRiskScore",
    "airportCongestionRiskScore",
    "flightDelayRiskScore",
    "airRisk",
    "oceanRisk",
    "surfaceRisk",
)

# Filter keys that carry a relative time phrase, mapped to the record
# field they constrain.
TIME_PHRASE_FIELDS: dict[str, str] = {
    "shipmentCreationDateTime": "shipmentCreationDatetime",
    "shipmentCreationDatetime": "shipmentCreationDatetime",
    "deliveryETADateTime": "deliveryETADatetime",
    "deliveryETADatetime": "deliveryETADatetime",
}

# Filter-only aliases that are not record attributes themselves.
FILTER_ALIASES: tuple[str, ...] = (
    "atRisk",
    "shipmentCreationDateTime",
    "deliveryETADateTime",
)

# Record field each alias stands for when a filter is sent to the store.
ALIAS_RECORD_FIELDS: dict[str, str] = {
    "atRisk": "isAtRisk",
    "shipmentCreationDateTime": "shipmentCreationDatetime",
    "deliveryETADateTime": "deliveryETADatetime",
}

SHIPMENT_FIELDS: frozenset[str] = frozenset(RECORD_FIELDS + FILTER_ALIASES)

RISK_SCORE_FIELDS: frozenset[str] = frozenset(
    name
    for name in RECORD_FIELDS
    if name in ("airRisk", "oceanRisk", "surfaceRisk") or name.endswith("RiskScore")
)


class TimeFrame(BaseModel):
    """Absolute datetime range resolved from a relative phrase.

    Both ends are inclusive. Unrecognized phrases produce a frame with
    both ends absent, which constrains nothing.

    Attributes:
        start: First instant in the range (naive, local wall clock).
        end: Last instant in the range (naive, local wall clock).
    """

    model_config = ConfigDict(frozen=True)

    start: Optional[datetime] = Field(default=None, description="Inclusive start")
    end: Optional[datetime] = Field(default=None, description="Inclusive end")

    @classmethod
    def unbounded(cls) -> "TimeFrame":
        """Return a frame that constrains nothing."""
        return cls()

    @property
    def is_bounded(self) -> bool:
        """True when both ends are present."""
        return self.start is not None and self.end is not None

    def contains(self, moment: datetime) -> bool:
        """Inclusive range check. Unbounded frames contain everything."""
        if not self.is_bounded:
            return True
        return self.start <= moment <= self.end


class ShipmentTimeFrames(BaseModel):
    """Resolved frames for the two time-constrained record fields."""

    model_config = ConfigDict(frozen=True)

    creation: TimeFrame = Field(default_factory=TimeFrame.unbounded)
    delivery: TimeFrame = Field(default_factory=TimeFrame.unbounded)

    @property
    def any_bounded(self) -> bool:
        return self.creation.is_bounded or self.delivery.is_bounded


class ParameterizedQuery(BaseModel):
    """Query text paired with its named parameter bindings.

    Every ``@name`` placeholder in ``text`` has exactly one entry in
    ``parameters``.

    Attributes:
        text: Query text with ``@field`` placeholders.
        parameters: Placeholder name (including ``@``) to bound value.
    """

    text: str = Field(..., description="Query text with named placeholders")
    parameters: dict[str, str] = Field(
        default_factory=dict,
        description="Placeholder name to value",
    )

    def to_filters(self) -> FilterSet:
        """Re-derive the filter set this query was built from."""
        return {name.removeprefix("@"): value for name, value in self.parameters.items()}
