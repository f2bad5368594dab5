"""Pydantic schemas for API request/response validation.

This module defines the data contracts for the ShipRisk REST API. The
success bodies vary by intent and are shaped by
``PipelineResult.to_response``.
"""

from pydantic import BaseModel, Field


class QueryRequest(BaseModel):
    """Request body for a natural-language shipment question."""

    message: str | None = Field(default=None, description="The user's question")


class ErrorResponse(BaseModel):
    """Stable error body. Never carries exception text."""

    error_code: str = Field(..., description="Registry code in E-XXXX format")
    message: str = Field(..., description="Message safe to show to callers")
