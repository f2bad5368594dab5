"""Tests for the completion-backed steps: classification, extraction, narrative."""

import json

import pytest

from src.errors import ExternalServiceError, ExternalServiceTimeout
from src.orchestrator.models.intent import QueryIntent
from src.orchestrator.nl_engine.filter_extractor import (
    criteria_to_filters,
    extract_shipment_filters,
    extract_sla_criteria,
)
from src.orchestrator.nl_engine.intent_classifier import classify_intent
from src.orchestrator.nl_engine.narrative import assess_shipment_risks, summarize_sla_risk
from src.orchestrator.nl_engine.prompts import (
    CLASSIFY_INTENT_PROMPT,
    EXTRACT_FILTERS_PROMPT,
    EXTRACT_SLA_CRITERIA_PROMPT,
    RISK_ASSESSMENT_PROMPT,
    SLA_SUMMARY_PROMPT,
)
from src.services.text_completion import render_prompt


class TestPrompts:
    """Tests that every prompt renders with its variables."""

    @pytest.mark.parametrize(
        "prompt",
        [CLASSIFY_INTENT_PROMPT, EXTRACT_FILTERS_PROMPT, EXTRACT_SLA_CRITERIA_PROMPT],
    )
    def test_user_message_prompts(self, prompt):
        rendered = render_prompt(prompt, {"user_message": "shipments to Chicago"})
        assert "shipments to Chicago" in rendered
        assert "{{" not in rendered

    def test_risk_prompt(self):
        rendered = render_prompt(RISK_ASSESSMENT_PROMPT, {"shipments": "[]"})
        assert "RiskLevel" in rendered

    def test_summary_prompt(self):
        rendered = render_prompt(SLA_SUMMARY_PROMPT, {"user_message": "late?", "shipments": "[]"})
        assert "late?" in rendered


class TestClassifyIntent:
    """Tests for classify_intent."""

    @pytest.mark.asyncio
    async def test_shipment(self, completion):
        completion.configure_response(CLASSIFY_INTENT_PROMPT, "shipment")
        assert await classify_intent(completion, "find shipments") == QueryIntent.SHIPMENT
        assert completion.calls[0].variables == {"user_message": "find shipments"}

    @pytest.mark.asyncio
    async def test_sla_with_noise(self, completion):
        completion.configure_response(CLASSIFY_INTENT_PROMPT, " SLA\n")
        assert await classify_intent(completion, "what will be late?") == QueryIntent.SLA

    @pytest.mark.asyncio
    async def test_unexpected_label_is_general(self, completion):
        completion.configure_response(CLASSIFY_INTENT_PROMPT, "I am not sure")
        assert await classify_intent(completion, "hello") == QueryIntent.GENERAL

    @pytest.mark.asyncio
    async def test_service_failure_is_general(self, completion):
        """A classification outage degrades to the help response."""
        completion.configure_failure(CLASSIFY_INTENT_PROMPT, ExternalServiceError("completion", "boom"))
        assert await classify_intent(completion, "find shipments") == QueryIntent.GENERAL

    @pytest.mark.asyncio
    async def test_timeout_is_general(self, completion):
        completion.configure_failure(CLASSIFY_INTENT_PROMPT, ExternalServiceTimeout("completion", 5))
        assert await classify_intent(completion, "find shipments") == QueryIntent.GENERAL


class TestExtractShipmentFilters:
    """Tests for extract_shipment_filters."""

    @pytest.mark.asyncio
    async def test_fenced_json(self, completion):
        completion.configure_response(
            EXTRACT_FILTERS_PROMPT,
            '```json\n{"destinationCity": "Chicago", "deliveryETADateTime": "this week"}\n```',
        )
        filters = await extract_shipment_filters(completion, "shipments to Chicago this week")
        assert filters == {"destinationCity": "Chicago", "deliveryETADateTime": "this week"}

    @pytest.mark.asyncio
    async def test_unknown_fields_dropped(self, completion):
        completion.configure_response(EXTRACT_FILTERS_PROMPT, '{"originCity": "Tokyo", "vibe": "good"}')
        assert await extract_shipment_filters(completion, "x") == {"originCity": "Tokyo"}

    @pytest.mark.asyncio
    async def test_unparseable_output_is_empty(self, completion):
        """A parse failure is recovered as an empty filter set."""
        completion.configure_response(EXTRACT_FILTERS_PROMPT, "Sorry, I can't help with that.")
        assert await extract_shipment_filters(completion, "x") == {}

    @pytest.mark.asyncio
    async def test_service_failure_propagates(self, completion):
        completion.configure_failure(EXTRACT_FILTERS_PROMPT, ExternalServiceError("completion", "boom"))
        with pytest.raises(ExternalServiceError):
            await extract_shipment_filters(completion, "x")


class TestExtractSlaCriteria:
    """Tests for SLA criteria extraction."""

    def test_at_risk_only_when_true(self):
        assert criteria_to_filters({"atRisk": True}) == {"atRisk": "true"}
        assert criteria_to_filters({"atRisk": False}) == {}
        assert criteria_to_filters({"atRisk": "true"}) == {"atRisk": "true"}

    def test_only_criteria_fields_kept(self):
        filters = criteria_to_filters({"shipmentMode": "Air", "containerNumber": "C1", "originCity": None})
        assert filters == {"shipmentMode": "Air"}

    @pytest.mark.asyncio
    async def test_extract(self, completion):
        completion.configure_response(
            EXTRACT_SLA_CRITERIA_PROMPT,
            json.dumps({"shipmentMode": "Ocean", "atRisk": True, "deliveryETADateTime": "next week"}),
        )
        filters = await extract_sla_criteria(completion, "ocean shipments at risk next week")
        assert filters == {"shipmentMode": "Ocean", "deliveryETADateTime": "next week", "atRisk": "true"}

    @pytest.mark.asyncio
    async def test_unparseable_output_is_empty(self, completion):
        completion.configure_response(EXTRACT_SLA_CRITERIA_PROMPT, "nope")
        assert await extract_sla_criteria(completion, "x") == {}


class TestAssessShipmentRisks:
    """Tests for assess_shipment_risks."""

    @pytest.mark.asyncio
    async def test_parses_verdicts(self, completion, sample_shipments):
        completion.configure_response(
            RISK_ASSESSMENT_PROMPT,
            '```json\n[{"upsShipmentNumber": "1Z0001", "RiskLevel": "High", "RiskReason": "weather"}]\n```',
        )
        risks = await assess_shipment_risks(completion, sample_shipments)
        assert len(risks) == 1
        assert risks[0].ups_shipment_number == "1Z0001"
        assert risks[0].risk_level == "High"
        sent = json.loads(completion.calls[0].variables["shipments"])
        assert [s["id"] for s in sent] == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_empty_shipments_skip_call(self, completion):
        assert await assess_shipment_risks(completion, []) == []
        assert completion.calls == []

    @pytest.mark.asyncio
    async def test_unparseable_output_is_empty(self, completion, sample_shipments):
        completion.configure_response(RISK_ASSESSMENT_PROMPT, "All good!")
        assert await assess_shipment_risks(completion, sample_shipments) == []

    @pytest.mark.asyncio
    async def test_malformed_entries_skipped(self, completion, sample_shipments):
        completion.configure_response(
            RISK_ASSESSMENT_PROMPT,
            '["oops", {"upsShipmentNumber": "1Z0002", "RiskLevel": "Low", "RiskReason": "none"}]',
        )
        risks = await assess_shipment_risks(completion, sample_shipments)
        assert [r.ups_shipment_number for r in risks] == ["1Z0002"]


class TestSummarizeSlaRisk:
    """Tests for summarize_sla_risk."""

    @pytest.mark.asyncio
    async def test_summary_text(self, completion):
        completion.configure_response(SLA_SUMMARY_PROMPT, "  Shipment 1Z0001 is likely late.  ")
        summary = await summarize_sla_risk(completion, "what is late?", [{"slaBreach": True}])
        assert summary == "Shipment 1Z0001 is likely late."
        assert completion.calls[0].variables["user_message"] == "what is late?"
