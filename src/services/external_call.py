"""Time-bounded execution of calls to external collaborators."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from src.errors import ExternalServiceTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def bounded_call(service: str, call: Awaitable[T], timeout_seconds: float) -> T:
    """Await ``call`` but give up after ``timeout_seconds``.

    Args:
        service: Service name used in the error and the log line.
        call: Awaitable performing the external request.
        timeout_seconds: Time budget for the whole call.

    Returns:
        Whatever the call returns.

    Raises:
        ExternalServiceTimeout: If the budget is exhausted.
    """
    try:
        return await asyncio.wait_for(call, timeout=timeout_seconds)
    except asyncio.TimeoutError as e:
        logger.error("%s call exceeded %.1fs budget", service, timeout_seconds)
        raise ExternalServiceTimeout(service, timeout_seconds) from e
