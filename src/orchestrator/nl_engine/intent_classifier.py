"""Intent classification for shipment questions."""

import logging

from src.errors import ExternalServiceError
from src.orchestrator.models.intent import QueryIntent
from src.orchestrator.nl_engine.prompts import CLASSIFY_INTENT_PROMPT
from src.services.text_completion import TextCompletionService

logger = logging.getLogger(__name__)


async def classify_intent(completion: TextCompletionService, user_message: str) -> QueryIntent:
    """Classify a user message as SLA, SHIPMENT or GENERAL.

    A completion failure is logged and classified as GENERAL rather than
    aborting the request. Note this makes an upstream outage look like
    small talk to the caller.

    Args:
        completion: Text-completion service.
        user_message: The user's question.

    Returns:
        The classified intent.
    """
    try:
        label = await completion.complete(CLASSIFY_INTENT_PROMPT, {"user_message": user_message})
    except ExternalServiceError as e:
        logger.warning("Intent classification failed, defaulting to general: %s", e)
        return QueryIntent.GENERAL

    intent = QueryIntent.from_label(label)
    logger.info("Classified message as %s", intent.value)
    return intent
