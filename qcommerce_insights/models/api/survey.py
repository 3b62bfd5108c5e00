"""Pydantic models for the /survey router."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from qcommerce_insights.models.domain.questions import QuestionKind
from qcommerce_insights.models.domain.wizard import WizardState


# ── Catalog ───────────────────────────────────────────────────────────────────


class ChoiceItem(BaseModel):
    label: str
    value: str


class QuestionItem(BaseModel):
    """One catalog entry as the client renders it."""

    id: str
    step: int
    kind: QuestionKind
    prompt: str
    main_text: str
    example: Optional[str] = None
    choices: List[ChoiceItem] = Field(default_factory=list)
    allows_other: bool = False
    required: bool = False
    display_number: Optional[int] = Field(
        default=None,
        description="1-based 'QUESTION n' number; None for section headers.",
    )


class CatalogResponse(BaseModel):
    questions: List[QuestionItem]
    likert_options: List[ChoiceItem]
    question_count: int = Field(description="Number of answerable questions.")
    estimated_minutes: int


# ── Sessions ──────────────────────────────────────────────────────────────────


class AnswerRequest(BaseModel):
    value: Any = Field(..., description="Answer value: text, number, or choice value.")


class SessionStateResponse(BaseModel):
    session_id: str
    state: WizardState
    title: Optional[str] = Field(
        default=None,
        description="Current prompt without its example, personalised with the respondent's name.",
    )
    example: Optional[str] = None
    auto_advanced: bool = False


# ── One-shot submission ───────────────────────────────────────────────────────


class SubmitRequest(BaseModel):
    """Request body for POST /survey/submit.

    A complete ResponseRecord keyed by question id, including any
    companion free-text field (e.g. ``genderOther``).
    """

    answers: Dict[str, Any] = Field(default_factory=dict)
