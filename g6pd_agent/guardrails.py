# g6pd_agent/guardrails.py
"""Request-boundary checks applied before any model call."""
from typing import Optional

from .errors import InvalidInputError


def validate_input(text: Optional[str]) -> str:
    """Trims the substance name and rejects it when nothing is left."""
    text = (text or "").strip()
    if not text:
        raise InvalidInputError("Input is required")
    return text
