# g6pd_agent/service.py
"""
Classification service: prompt, one remote call, one parse, and the fallback
verdict when either step fails.
"""
import logging
from typing import NamedTuple, Optional

from .errors import ParseError, TransportError
from .models import BaseInvoker
from .parsing import parse_verdict
from .prompts import build_prompt
from .schemas import ClassificationVerdict

log = logging.getLogger(__name__)

FALLBACK_REASON = "Unable to verify safety at this time. Please consult with a healthcare provider."


def fallback_verdict(text: str) -> ClassificationVerdict:
    """The verdict returned whenever the model path fails. Never claims "safe"."""
    return ClassificationVerdict(
        item=text,
        safety="caution",
        reason=FALLBACK_REASON,
        alternatives=[],
        severity="medium",
    )


class Outcome(NamedTuple):
    """A verdict plus the failure that forced the fallback ("transport", "parse" or None)."""
    verdict: ClassificationVerdict
    fallback: Optional[str] = None


class ClassificationService:
    """Classifies substance names for G6PD safety. ``classify`` never raises."""

    def __init__(self, invoker: BaseInvoker):
        self.invoker = invoker

    def classify(self, text: str) -> ClassificationVerdict:
        return self.classify_with_outcome(text).verdict

    def classify_with_outcome(self, text: str) -> Outcome:
        prompt = build_prompt(text)
        try:
            raw = self.invoker.complete(prompt)
        except TransportError as e:
            log.warning("model call failed (%s), returning fallback: %s", self.invoker.provider, e)
            return Outcome(fallback_verdict(text), "transport")

        try:
            return Outcome(parse_verdict(raw))
        except ParseError as e:
            log.warning("unusable model answer, returning fallback: %s (%d chars)", e, len(e.raw))
            return Outcome(fallback_verdict(text), "parse")
