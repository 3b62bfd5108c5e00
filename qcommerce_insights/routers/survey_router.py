"""
/survey router
--------------
Survey catalog, wizard sessions, and one-shot submission.

GET    /survey/questions                                  — Catalog + intro stats
POST   /survey/sessions                                   — Start a wizard session
GET    /survey/sessions/{session_id}                      — Current wizard state
PUT    /survey/sessions/{session_id}/answers/{question_id} — Record an answer
POST   /survey/sessions/{session_id}/advance              — Next step (submits on the last question)
POST   /survey/sessions/{session_id}/retreat              — Previous step
POST   /survey/sessions/{session_id}/restart              — Reset to intro
DELETE /survey/sessions/{session_id}                      — Drop the session
POST   /survey/submit                                     — Submit a complete record directly
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from qcommerce_insights.config import Settings, get_settings
from qcommerce_insights.dependencies import (
    get_catalog,
    get_session_registry,
    get_submission_service,
)
from qcommerce_insights.errors import (
    InvalidTransitionError,
    SessionNotFoundError,
    UnknownQuestionError,
)
from qcommerce_insights.models.api.survey import (
    AnswerRequest,
    CatalogResponse,
    ChoiceItem,
    QuestionItem,
    SessionStateResponse,
    SubmitRequest,
)
from qcommerce_insights.models.domain.questions import LIKERT_CHOICES
from qcommerce_insights.models.domain.submission import SubmissionResult
from qcommerce_insights.questions.catalog import Catalog, personalize, split_example
from qcommerce_insights.services.session_registry import SessionRegistry
from qcommerce_insights.services.submission_service import SubmissionService
from qcommerce_insights.services.wizard import SurveyWizard

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/survey", tags=["survey"])


def _wizard(registry: SessionRegistry, session_id: str) -> SurveyWizard:
    try:
        return registry.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown survey session {session_id}")


def _state(session_id: str, wizard: SurveyWizard, auto_advanced: bool = False) -> SessionStateResponse:
    state = wizard.snapshot()
    title = example = None
    if state.question is not None:
        title, example = split_example(state.question.prompt)
        title = personalize(title, wizard.record.get("name"))
    return SessionStateResponse(
        session_id=session_id,
        state=state,
        title=title,
        example=example,
        auto_advanced=auto_advanced,
    )


# ── GET /survey/questions ─────────────────────────────────────────────────────

@router.get("/questions", response_model=CatalogResponse)
def list_questions(catalog: Catalog = Depends(get_catalog)) -> CatalogResponse:
    """The full question catalog in wizard order, plus intro screen stats."""
    items = []
    for step, q in enumerate(catalog):
        main_text, example = split_example(q.prompt)
        items.append(QuestionItem(
            id=q.id,
            step=step,
            kind=q.kind,
            prompt=q.prompt,
            main_text=main_text,
            example=example,
            choices=[ChoiceItem(label=c.label, value=c.value) for c in q.choices],
            allows_other=q.has_other,
            required=q.required,
            display_number=catalog.display_number(step),
        ))
    return CatalogResponse(
        questions=items,
        likert_options=[ChoiceItem(label=c.label, value=c.value) for c in LIKERT_CHOICES],
        question_count=len(catalog.answerable()),
        estimated_minutes=catalog.estimated_minutes,
    )


# ── Sessions ──────────────────────────────────────────────────────────────────

@router.post("/sessions", response_model=SessionStateResponse, status_code=201)
def create_session(
    registry: SessionRegistry = Depends(get_session_registry),
) -> SessionStateResponse:
    session_id, wizard = registry.create()
    logger.info("Survey session %s started", session_id)
    return _state(session_id, wizard)


@router.get("/sessions/{session_id}", response_model=SessionStateResponse)
def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> SessionStateResponse:
    return _state(session_id, _wizard(registry, session_id))


@router.put("/sessions/{session_id}/answers/{question_id}", response_model=SessionStateResponse)
async def answer_question(
    session_id: str,
    question_id: str,
    req: AnswerRequest,
    auto_advance: Optional[bool] = Query(
        default=None,
        description="Advance after choice/Likert answers. Defaults to the AUTO_ADVANCE setting.",
    ),
    registry: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_settings),
) -> SessionStateResponse:
    """
    Record an answer for one question (or a companion field such as
    ``genderOther``). Choice and Likert answers on the current step
    auto-advance unless disabled.
    """
    wizard = _wizard(registry, session_id)
    async with wizard.lock:
        try:
            hint = wizard.answer(question_id, req.value)
        except UnknownQuestionError:
            raise HTTPException(status_code=404, detail=f"Unknown question {question_id!r}")
        except InvalidTransitionError as e:
            raise HTTPException(status_code=409, detail=str(e))

        wanted = settings.auto_advance if auto_advance is None else auto_advance
        current = wizard.current_question
        advanced = False
        if hint and wanted and current is not None and current.id == question_id:
            await wizard.advance()
            advanced = True
    return _state(session_id, wizard, auto_advanced=advanced)


@router.post("/sessions/{session_id}/advance", response_model=SessionStateResponse)
async def advance_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> SessionStateResponse:
    """
    Move forward one step. Invalid answers leave the step unchanged and are
    reported in ``state.errors``. On the last question this submits the survey.
    """
    wizard = _wizard(registry, session_id)
    async with wizard.lock:
        await wizard.advance()
    return _state(session_id, wizard)


@router.post("/sessions/{session_id}/retreat", response_model=SessionStateResponse)
async def retreat_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> SessionStateResponse:
    wizard = _wizard(registry, session_id)
    async with wizard.lock:
        wizard.retreat()
    return _state(session_id, wizard)


@router.post("/sessions/{session_id}/restart", response_model=SessionStateResponse)
async def restart_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> SessionStateResponse:
    wizard = _wizard(registry, session_id)
    async with wizard.lock:
        wizard.restart()
    return _state(session_id, wizard)


@router.delete("/sessions/{session_id}", status_code=204)
def delete_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> None:
    if not registry.delete(session_id):
        raise HTTPException(status_code=404, detail=f"Unknown survey session {session_id}")


# ── POST /survey/submit ───────────────────────────────────────────────────────

@router.post("/submit", response_model=SubmissionResult)
async def submit_survey(
    req: SubmitRequest,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResult:
    """
    Validate and submit a complete response record in one call.

    Always returns 200 with ``success`` set; validation and summarizer
    failures come back as ``success=false`` with an ``error`` message.
    """
    return await service.submit(req.answers)
