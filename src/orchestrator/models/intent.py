"""Intent model for natural language shipment questions."""

import re
from enum import Enum


class QueryIntent(str, Enum):
    """What kind of question the user asked.

    SLA questions go through prediction and summarization, SHIPMENT
    questions return matching records with a risk assessment, and
    GENERAL questions get static help text.
    """

    SLA = "sla"
    SHIPMENT = "shipment"
    GENERAL = "general"

    @classmethod
    def from_label(cls, label: str | None) -> "QueryIntent":
        """Map a classifier label to an intent.

        Case and surrounding punctuation are ignored. Anything that is
        not exactly one of the known labels maps to GENERAL.

        Args:
            label: Raw classifier output.

        Returns:
            The matching intent, GENERAL when unrecognized.
        """
        if not label:
            return cls.GENERAL
        token = re.sub(r"[^a-z]", "", label.strip().lower())
        try:
            return cls(token)
        except ValueError:
            return cls.GENERAL
