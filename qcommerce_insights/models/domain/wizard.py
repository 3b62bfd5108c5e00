"""Domain models for the survey wizard."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from qcommerce_insights.models.domain.questions import QuestionDefinition


class WizardPhase(str, Enum):
    INTRO = "intro"
    QUESTION = "question"
    SUBMITTING = "submitting"
    RESULT = "result"


class WizardState(BaseModel):
    """Read-only snapshot of one respondent's wizard."""

    phase: WizardPhase
    step: Optional[int] = None
    question: Optional[QuestionDefinition] = None
    display_number: Optional[int] = None
    is_last_question: bool = False
    progress: float = 0.0
    errors: Dict[str, str] = Field(default_factory=dict)
    summary: Optional[str] = None
    submission_error: Optional[str] = None
    answers: Dict[str, Any] = Field(default_factory=dict)
