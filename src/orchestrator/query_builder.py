"""Dynamic query construction from a filter set.

Two output modes share one combination algorithm:

- Parameterized: ``c.field = @field`` with the value bound separately.
  Safe against any engine that supports named parameters.
- Inline: ``c.field = 'value'`` with single quotes doubled. This is text
  substitution, not a prepared statement. Use it only against services
  that accept raw filter text (the shipment HTTP API), never against an
  engine that executes the string as SQL.

Field names are interpolated in both modes, so they must be plain
identifiers.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Literal

from src.errors import InputError
from src.orchestrator.models.filter_set import ParameterizedQuery

logger = logging.getLogger(__name__)

BASE_QUERY = "SELECT * FROM c"

QueryMode = Literal["parameterized", "inline"]

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def select_combinator(filter_count: int) -> bool:
    """Return ``use_and`` for a filter set of the given size.

    AND for exactly one filter, OR for several. With one filter the
    combinator has no effect; with several, OR widens recall. Zero
    filters produce no WHERE clause at all, so the value is irrelevant.
    """
    return filter_count == 1


def _check_field(field: str) -> None:
    if not _IDENTIFIER.match(field):
        raise InputError(f"Filter field {field!r} is not a valid identifier", code="E-1004")


def _joiner(use_and: bool) -> str:
    return " AND " if use_and else " OR "


def build_parameterized_query(filters: Mapping[str, str] | None, use_and: bool = True) -> ParameterizedQuery:
    """Build a parameterized query from a filter set.

    Args:
        filters: Field to value mapping. Iteration order sets clause order.
        use_and: Join conditions with AND (True) or OR (False).

    Returns:
        ParameterizedQuery whose parameters bind every placeholder once.

    Raises:
        InputError: If a field name is not a plain identifier.
    """
    if not filters:
        return ParameterizedQuery(text=BASE_QUERY)

    conditions = []
    parameters: dict[str, str] = {}
    for field, value in filters.items():
        _check_field(field)
        placeholder = f"@{field}"
        conditions.append(f"c.{field} = {placeholder}")
        parameters[placeholder] = value

    text = f"{BASE_QUERY} WHERE {_joiner(use_and).join(conditions)}"
    return ParameterizedQuery(text=text, parameters=parameters)


def escape_value(value: str) -> str:
    """Double every single quote so the value can sit inside '...'."""
    return value.replace("'", "''")


def build_inline_query(filters: Mapping[str, str] | None, use_and: bool = True) -> str:
    """Build a query string with values inlined.

    Args:
        filters: Field to value mapping. Iteration order sets clause order.
        use_and: Join conditions with AND (True) or OR (False).

    Returns:
        Query text such as ``SELECT * FROM c WHERE c.originCity = 'NYC'``.

    Raises:
        InputError: If a field name is not a plain identifier.
    """
    if not filters:
        return BASE_QUERY

    conditions = []
    for field, value in filters.items():
        _check_field(field)
        conditions.append(f"c.{field} = '{escape_value(value)}'")

    return f"{BASE_QUERY} WHERE {_joiner(use_and).join(conditions)}"


def build_query(
    filters: Mapping[str, str] | None,
    use_and: bool = True,
    mode: QueryMode = "parameterized",
) -> ParameterizedQuery | str:
    """Build a query in the requested mode."""
    if mode == "inline":
        query: ParameterizedQuery | str = build_inline_query(filters, use_and)
        logger.info("Built inline shipment query: %s", query)
    else:
        query = build_parameterized_query(filters, use_and)
        logger.info("Built parameterized shipment query: %s", query.text)
    return query


__all__ = [
    "BASE_QUERY",
    "QueryMode",
    "build_inline_query",
    "build_parameterized_query",
    "build_query",
    "escape_value",
    "select_combinator",
]
