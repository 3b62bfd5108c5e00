"""Domain models for a survey submission."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ShapedSubmission(BaseModel):
    """
    Read-only view derived from a validated ResponseRecord.

    Created once per submission attempt and handed to the two outbound
    collaborators: the summarizer gets the demographics string and the Likert
    lines, the store gets the export record.
    """

    model_config = ConfigDict(frozen=True)

    demographics_summary: str = ""
    likert_response_lines: List[str] = Field(default_factory=list)
    # prompt text -> answer value, "Timestamp" first
    export_record: Dict[str, Any] = Field(default_factory=dict)


class SurveySummary(BaseModel):
    summary: str


class SubmissionResult(BaseModel):
    success: bool
    summary: Optional[str] = None
    error: Optional[str] = None
    field_errors: Dict[str, str] = Field(default_factory=dict)
    persisted: bool = False

    @classmethod
    def ok(cls, summary: str, *, persisted: bool = False) -> "SubmissionResult":
        return cls(success=True, summary=summary, persisted=persisted)

    @classmethod
    def failed(
        cls,
        error: str,
        field_errors: Optional[Dict[str, str]] = None,
    ) -> "SubmissionResult":
        return cls(success=False, error=error, field_errors=field_errors or {})
