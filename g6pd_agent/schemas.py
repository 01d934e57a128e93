# g6pd_agent/schemas.py
"""Data schemas (Pydantic models) for the API."""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional

Safety = Literal["safe", "unsafe", "caution"]
Severity = Literal["low", "medium", "high"]


class CheckRequest(BaseModel):
    """Request model for a single safety check."""
    input: Optional[str] = None


class ClassificationVerdict(BaseModel):
    """Structured G6PD safety verdict for one substance."""
    model_config = ConfigDict(frozen=True, strict=True, extra="ignore")

    item: str
    safety: Safety
    reason: str = Field(min_length=1)
    alternatives: List[str]
    severity: Severity


class ErrorResponse(BaseModel):
    """Body returned when a request is rejected."""
    error: str
