"""Prompt templates for the completion-driven pipeline steps.

Templates are Jinja2 strings rendered by the TextCompletionService.
"""

from src.orchestrator.models.filter_set import RECORD_FIELDS

_FIELD_LIST = ", ".join(RECORD_FIELDS[1:])

CLASSIFY_INTENT_PROMPT = """You route questions for a shipment tracking assistant.

Classify the user message into exactly one category:
- sla: the user asks which shipments may miss their SLA, be late, or are at risk of breaching a delivery commitment
- shipment: the user asks to find, list or look up shipments by attributes (cities, mode, numbers, dates, risk scores)
- general: greetings, help requests, or anything unrelated to shipment data

User message: {{ user_message }}

Respond with only one word: sla, shipment, or general."""

EXTRACT_FILTERS_PROMPT = (
    """You are an AI assistant that extracts structured filter criteria from user queries related to shipment data.

### Objective:
Extract all relevant filters present in the user message and return them as a JSON dictionary. Use only the valid field names listed below as keys.

### Valid Field Names:
"""
    + _FIELD_LIST
    + """

### Interpretation Rules:
- If the message says "to [city]" or "delivered in [city]", use `destinationCity`.
- If the message says "from [city]", use `originCity`.
- If a relative time such as "today" or "this week" refers to delivery, use `deliveryETADateTime`; if it refers to creation, use `shipmentCreationDateTime`. Keep the phrase as the value.
- If a number is mentioned and it matches known formats, infer the most likely field:
    - If explicitly called "shipment number" -> `upsShipmentNumber`
    - If called "container number" -> `containerNumber`
    - If called "flight number" or starts with two letters and digits (e.g., "AA123") -> `flightIATA`
- Risk levels may be given as low, medium or high for the risk score fields.
- Do not guess unknown fields; include only those you are confident about.

### Input Message:
"{{ user_message }}"

Return only a JSON dictionary. Example:
{"destinationCity": "xyz", "originCity": "abc", "containerNumber": "123"}"""
)

EXTRACT_SLA_CRITERIA_PROMPT = """You are a supply chain data assistant. Extract filter criteria from the following user message.
Return a JSON object with the following potential fields, only including fields that are mentioned:
- shipmentMode (string): e.g., 'Air', 'Ocean', 'Surface'
- originCity (string): city name
- destinationCity (string): city name
- atRisk (boolean): true if 'at risk' or 'SLA breach' is mentioned
- shipmentCreationDateTime (string): 'today', 'this week', 'this month', etc.
- deliveryETADateTime (string): 'today', 'this week', 'this month', etc.

User message: {{ user_message }}

Return ONLY a valid JSON object WITHOUT markdown formatting or code block syntax."""

RISK_ASSESSMENT_PROMPT = """You are an AI assistant evaluating shipment risks.

Analyze the shipment records and return a JSON array with each shipment's:
- upsShipmentNumber
- RiskLevel (High, Medium, Low)
- RiskReason (e.g., delay, weather, congestion)

Respond only with JSON array.

### Shipment Records:
{{ shipments }}

Respond with only valid JSON."""

SLA_SUMMARY_PROMPT = """You are a supply chain analyst. Based on this shipment data with SLA breach predictions, summarize which shipments are most likely to miss SLA and why.
Look at the 'slaBreach' property which indicates our prediction of whether a shipment will miss its SLA, and 'slaBreachProbability' for how confident that prediction is.
User asked about: {{ user_message }}
Shipments:
{{ shipments }}
Respond in a conversational, helpful tone addressing the user's query directly. Mention key shipments at risk and their risk factors.
If there are no shipments found, politely inform the user and suggest they try a broader search."""

GENERAL_HELP_MESSAGE = (
    "I can help with shipment questions. Try asking things like "
    "\"Which shipments might miss SLA this week?\", "
    "\"Show air shipments from Shanghai\" or "
    "\"Find container number MSCU1234567\"."
)
