"""FastAPI route for natural-language shipment questions.

The request body is parsed by hand so a malformed body or a missing
``message`` maps to the stable 400 messages instead of FastAPI's 422
validation payload.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from src.api.schemas import ErrorResponse, QueryRequest
from src.errors import InputError
from src.orchestrator.pipeline import PipelineOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/query", tags=["query"])


def get_orchestrator(request: Request) -> PipelineOrchestrator:
    """Return the orchestrator wired at startup."""
    return request.app.state.orchestrator


@router.post(
    "",
    responses={
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
async def submit_query(request: Request) -> JSONResponse:
    """Answer a natural-language shipment question.

    Args:
        request: Incoming request with a JSON body ``{"message": "..."}``.

    Returns:
        One of: help text, ``{message, shipments, riskAssessment}`` or
        ``{message, summary}``.
    """
    try:
        body = await request.json()
    except ValueError as e:
        raise InputError("Request body is not valid JSON", code="E-1002") from e

    try:
        payload = QueryRequest.model_validate(body)
    except ValidationError as e:
        raise InputError("Request body failed validation") from e

    if payload.message is None:
        raise InputError("Request has no 'message'")

    result = await get_orchestrator(request).run(payload.message)
    logger.info("Answered %s question", result.intent.value)
    return JSONResponse(result.to_response())
