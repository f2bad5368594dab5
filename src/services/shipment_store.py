"""Shipment store client.

The pipeline reads shipments through the ``ShipmentStore`` protocol. The
concrete ``HttpShipmentStore`` talks to the shipment HTTP API, which
takes a JSON body and answers with ``{"shipmentList": [...], "success": bool}``:

- ``{"status": "all"}`` returns every shipment.
- ``{"status": "dynamic", "query": "<text>"}`` runs a filter query. For
  parameterized queries the bindings travel alongside as
  ``"parameters": [{"name": "@field", "value": "..."}]``.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from src.errors import ExternalServiceError, ExternalServiceTimeout
from src.orchestrator.models.filter_set import ParameterizedQuery
from src.orchestrator.models.shipment import ShipmentFetchResult
from src.services.external_call import bounded_call

logger = logging.getLogger(__name__)

SERVICE_NAME = "shipment_api"

ShipmentQuery = ParameterizedQuery | str


class ShipmentStore(Protocol):
    """Read access to shipment records."""

    async def query(self, query: ShipmentQuery) -> ShipmentFetchResult:
        """Return the shipments matching ``query``."""
        ...

    async def fetch_all(self) -> ShipmentFetchResult:
        """Return every shipment."""
        ...


def build_query_payload(query: ShipmentQuery) -> dict[str, Any]:
    """Build the request body for a dynamic query."""
    if isinstance(query, ParameterizedQuery):
        return {
            "status": "dynamic",
            "query": query.text,
            "parameters": [
                {"name": name, "value": value} for name, value in query.parameters.items()
            ],
        }
    return {"status": "dynamic", "query": query}


def parse_shipment_response(body: Any) -> ShipmentFetchResult:
    """Read ``shipmentList`` / ``success`` from a response body.

    An absent or empty list is a valid empty result. Non-object entries in
    the list are skipped.

    Raises:
        ExternalServiceError: If the body is not a JSON object.
    """
    if not isinstance(body, dict):
        raise ExternalServiceError(SERVICE_NAME, "Shipment API returned a non-object body")

    raw_list = body.get("shipmentList")
    if not isinstance(raw_list, list) or not raw_list:
        logger.warning("No shipments found in response.")
        return ShipmentFetchResult(shipments=[], success=bool(body.get("success", True)))

    shipments = [item for item in raw_list if isinstance(item, dict)]
    return ShipmentFetchResult(shipments=shipments, success=bool(body.get("success", True)))


class HttpShipmentStore:
    """ShipmentStore over the shipment HTTP API.

    Args:
        url: Shipment API endpoint.
        timeout_seconds: Budget for each request.
        client: Optional shared httpx client (tests pass one with a
            MockTransport). When omitted a client is opened per request.
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._timeout_seconds = timeout_seconds
        self._client = client

    async def query(self, query: ShipmentQuery) -> ShipmentFetchResult:
        return await self._post(build_query_payload(query))

    async def fetch_all(self) -> ShipmentFetchResult:
        return await self._post({"status": "all"})

    async def _post(self, payload: dict[str, Any]) -> ShipmentFetchResult:
        result = await bounded_call(SERVICE_NAME, self._send(payload), self._timeout_seconds)
        logger.info(
            "Shipment API (%s) returned %d record(s)",
            payload["status"],
            len(result.shipments),
        )
        return result

    async def _send(self, payload: dict[str, Any]) -> ShipmentFetchResult:
        try:
            if self._client is not None:
                response = await self._client.post(self._url, json=payload)
            else:
                async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                    response = await client.post(self._url, json=payload)
        except httpx.TimeoutException as e:
            raise ExternalServiceTimeout(SERVICE_NAME, self._timeout_seconds) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(
                SERVICE_NAME, f"Shipment API request failed: {type(e).__name__}"
            ) from e

        if response.is_error:
            raise ExternalServiceError(
                SERVICE_NAME, f"Shipment API returned HTTP {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ExternalServiceError(SERVICE_NAME, "Shipment API returned invalid JSON") from e

        return parse_shipment_response(body)


__all__ = [
    "HttpShipmentStore",
    "ShipmentQuery",
    "ShipmentStore",
    "build_query_payload",
    "parse_shipment_response",
]
