# g6pd_agent/parsing.py
"""Turns the model's raw completion text into a validated verdict."""
import json
import re

from pydantic import ValidationError

from .errors import ParseError
from .schemas import ClassificationVerdict

_FENCE_OPEN = re.compile(r"^```[\w+-]*[ \t]*(?:\r?\n)?")
_FENCE_CLOSE = re.compile(r"(?:\r?\n)?[ \t]*```$")


def strip_code_fences(text: str) -> str:
    """Removes a surrounding ```lang ... ``` block, if any."""
    text = text.strip()
    text = _FENCE_OPEN.sub("", text, count=1)
    text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def parse_verdict(raw: str) -> ClassificationVerdict:
    """Parses and validates a completion. Raises ParseError on any defect."""
    body = strip_code_fences(raw)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ParseError(f"completion is not JSON: {e}", raw) from e

    if not isinstance(data, dict):
        raise ParseError(f"expected a JSON object, got {type(data).__name__}", raw)

    try:
        return ClassificationVerdict.model_validate(data)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise ParseError(f"invalid verdict fields: {', '.join(fields)}", raw) from e
