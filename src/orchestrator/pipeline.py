"""Request pipeline for natural-language shipment questions.

One request moves through a fixed sequence of steps:

    classify -> extract filters -> resolve -> fetch -> [predict] -> summarize

GENERAL questions stop after classification with static help text.
SHIPMENT questions return the matching records with a risk assessment.
SLA questions run the SLA-breach prediction and return a narrative
summary. External calls happen strictly one after another because each
depends on the previous result.

The orchestrator holds no per-request state; every collaborator is
injected at construction.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from src.errors import InputError
from src.orchestrator.filter_normalizer import split_time_phrases, to_record_fields
from src.orchestrator.models.filter_set import TIME_PHRASE_FIELDS, FilterSet
from src.orchestrator.models.intent import QueryIntent
from src.orchestrator.models.result import PipelineResult
from src.orchestrator.models.shipment import ShipmentFetchResult
from src.orchestrator.nl_engine.filter_extractor import (
    extract_sla_criteria,
    extract_shipment_filters,
)
from src.orchestrator.nl_engine.intent_classifier import classify_intent
from src.orchestrator.nl_engine.narrative import assess_shipment_risks, summarize_sla_risk
from src.orchestrator.nl_engine.prompts import GENERAL_HELP_MESSAGE
from src.orchestrator.query_builder import QueryMode, build_query, select_combinator
from src.orchestrator.shipment_matcher import MATCHER_FIELDS, filter_shipments
from src.services.shipment_store import ShipmentStore
from src.services.sla_prediction import SlaPredictionAdapter
from src.services.text_completion import TextCompletionService

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """Answer shipment questions end to end.

    Args:
        completion: Text-completion service for classification,
            extraction, risk assessment and summaries.
        store: Shipment store.
        predictor: SLA prediction adapter.
        query_mode: How the shipment branch encodes filter values.
        clock: Source of "now" for time-phrase resolution.
    """

    def __init__(
        self,
        completion: TextCompletionService,
        store: ShipmentStore,
        predictor: SlaPredictionAdapter,
        query_mode: QueryMode = "parameterized",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._completion = completion
        self._store = store
        self._predictor = predictor
        self._query_mode = query_mode
        self._clock = clock

    async def run(self, message: Optional[str]) -> PipelineResult:
        """Process one user message.

        Raises:
            InputError: If the message is missing or no filters could be
                extracted for a shipment question.
            ExternalServiceError: If the shipment store, the prediction
                fallback or a completion call after classification fails.
        """
        if not isinstance(message, str) or not message.strip():
            raise InputError("Request has no usable 'message'")

        intent = await classify_intent(self._completion, message)
        if intent == QueryIntent.SLA:
            return await self._answer_sla(message)
        if intent == QueryIntent.SHIPMENT:
            return await self._answer_shipment(message)
        return PipelineResult(intent=QueryIntent.GENERAL, message=GENERAL_HELP_MESSAGE)

    async def _answer_shipment(self, message: str) -> PipelineResult:
        filters = await extract_shipment_filters(self._completion, message)
        if not filters:
            raise InputError("No filters extracted from message", code="E-1003")

        shipments = await self.find_shipments(filters)
        risks = await assess_shipment_risks(self._completion, shipments)
        return PipelineResult(
            intent=QueryIntent.SHIPMENT,
            message=f"Fetched {len(shipments)} shipment record(s)",
            shipments=shipments,
            risk_assessment=risks,
        )

    async def _answer_sla(self, message: str) -> PipelineResult:
        filters = await extract_sla_criteria(self._completion, message)
        frames, remaining = split_time_phrases(filters, self._clock())
        literal_times = sorted(k for k in remaining if k in TIME_PHRASE_FIELDS)
        if literal_times:
            logger.warning("Ignoring literal timestamp criteria for SLA analysis: %s", literal_times)

        shipments = filter_shipments(await self._fetch_all(), remaining, frames)
        predicted = await self._predictor.predict(shipments)
        summary = await summarize_sla_risk(self._completion, message, predicted)
        return PipelineResult(
            intent=QueryIntent.SLA,
            message=f"Analyzed {len(predicted)} shipment(s) for SLA risk",
            summary=summary,
        )

    async def find_shipments(self, filters: FilterSet) -> list[dict[str, Any]]:
        """Fetch the shipments a filter set selects.

        Without relative time phrases the whole set becomes one store
        query. With them, the filters the matcher cannot evaluate form
        the store query (or every shipment is fetched when none remain),
        and the matcher applies the rest in-process. Literal timestamps
        under a time field are always store conditions.
        """
        frames, remaining = split_time_phrases(filters, self._clock())
        if not frames.any_bounded:
            if not remaining:
                return await self._fetch_all()
            return await self._query_store(remaining)

        query_filters = {
            k: v for k, v in remaining.items() if k not in MATCHER_FIELDS or k in TIME_PHRASE_FIELDS
        }
        matcher_filters = {k: v for k, v in remaining.items() if k not in query_filters}
        if query_filters:
            candidates = await self._query_store(query_filters)
        else:
            candidates = await self._fetch_all()
        return filter_shipments(candidates, matcher_filters, frames)

    async def _query_store(self, filters: FilterSet) -> list[dict[str, Any]]:
        conditions = to_record_fields(filters)
        use_and = select_combinator(len(conditions))
        query = build_query(conditions, use_and=use_and, mode=self._query_mode)
        return self._shipments_from(await self._store.query(query))

    async def _fetch_all(self) -> list[dict[str, Any]]:
        return self._shipments_from(await self._store.fetch_all())

    @staticmethod
    def _shipments_from(result: ShipmentFetchResult) -> list[dict[str, Any]]:
        if not result.success:
            logger.warning(
                "Shipment store reported success=false with %d record(s)", len(result.shipments)
            )
        return result.shipments


__all__ = ["PipelineOrchestrator"]
