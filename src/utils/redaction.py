"""Secret redaction for log lines and configuration dumps.

Bearer tokens and API keys travel with prediction and completion calls.
These helpers keep them out of logs, CLI output and error text.
"""

import re
from collections.abc import Mapping
from typing import Any

_REDACTED = "***REDACTED***"

# Substrings matched case-insensitively against mapping keys.
_SENSITIVE_KEY_PARTS = frozenset({"api_key", "apikey", "secret", "token", "password", "authorization"})

_SENSITIVE_TEXT = re.compile(
    r"(?i)"
    r"(?:"
    r"Bearer\s+[A-Za-z0-9._~+/=-]+"
    r"|"
    r'"(?:api_key|apikey|token|secret|password|authorization)"\s*:\s*"[^"]*"'
    r"|"
    r"(?:api_key|apikey|token|secret|password)\s*[=:]\s*\S+"
    r"|"
    r"sk-[A-Za-z0-9_-]{8,}"
    r")"
)


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(part in lowered for part in _SENSITIVE_KEY_PARTS)


def redact_mapping(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with sensitive values replaced.

    Nested mappings are redacted recursively. Empty values are left as
    they are so a dump still shows which secrets are unset.
    """
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, Mapping):
            result[key] = redact_mapping(value)
        elif _is_sensitive(str(key)) and value:
            result[key] = _REDACTED
        else:
            result[key] = value
    return result


def sanitize_error_message(message: str | None, max_length: int = 500) -> str | None:
    """Redact credentials from free text and cap its length.

    Args:
        message: Text that may contain credentials (None passes through).
        max_length: Longest string returned.

    Returns:
        Sanitized text, or None.
    """
    if message is None:
        return None
    sanitized = _SENSITIVE_TEXT.sub(_REDACTED, message)
    if len(sanitized) > max_length:
        sanitized = sanitized[: max_length - 3] + "..."
    return sanitized
