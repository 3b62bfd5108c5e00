"""
qcommerce_insights/services/wizard.py
---------------------------------------
Survey wizard controller: one instance per respondent session.

State machine
-------------
    intro → question[0] → … → question[n-1] → submitting → result
                                   ↑______________|  (submission failed)

``result`` is terminal; only ``restart()`` leaves it.

Usage
-----
    wizard = SurveyWizard(DEFAULT_CATALOG, submitter=submission_service)
    await wizard.advance()              # intro → first step
    wizard.answer("name", "Asha")
    await wizard.advance()
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

from qcommerce_insights.errors import InvalidTransitionError, UnknownQuestionError
from qcommerce_insights.models.domain.questions import (
    OTHER_VALUE,
    QuestionDefinition,
    ResponseRecord,
    companion_id,
)
from qcommerce_insights.models.domain.submission import SubmissionResult
from qcommerce_insights.models.domain.wizard import WizardPhase, WizardState
from qcommerce_insights.questions.catalog import Catalog
from qcommerce_insights.services.response_schema import ResponseSchema

logger = logging.getLogger(__name__)

EDITABLE_PHASES = (WizardPhase.INTRO, WizardPhase.QUESTION)


class Submitter(Protocol):
    async def submit(self, record: ResponseRecord) -> SubmissionResult:
        ...


def _answered(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


class SurveyWizard:
    """Owns the step position and the ResponseRecord for one respondent."""

    def __init__(
        self,
        catalog: Catalog,
        submitter: Submitter,
        schema: Optional[ResponseSchema] = None,
    ):
        self.catalog = catalog
        self.schema = schema or ResponseSchema(catalog)
        self.submitter = submitter
        # serialises advance/answer calls for this session
        self.lock = asyncio.Lock()
        self.restart()

    # ── State ─────────────────────────────────────────────────────────────────

    def restart(self) -> None:
        self.phase = WizardPhase.INTRO
        self.current_step: Optional[int] = None
        self.record: ResponseRecord = {}
        self.errors: Dict[str, str] = {}
        self.summary: Optional[str] = None
        self.submission_error: Optional[str] = None
        self.last_result: Optional[SubmissionResult] = None

    @property
    def current_question(self) -> Optional[QuestionDefinition]:
        if self.current_step is None:
            return None
        return self.catalog[self.current_step]

    @property
    def is_last_question(self) -> bool:
        return (
            self.current_step is not None
            and self.current_step == self.catalog.last_answerable_step
        )

    @property
    def progress_percent(self) -> float:
        """
        Share of answerable questions already behind the respondent, 0..100.

        Headers report the value of the nearest answerable question before
        them. The last question reports 100 once it holds a valid answer.
        """
        if self.phase in (WizardPhase.SUBMITTING, WizardPhase.RESULT):
            return 100.0
        if self.phase == WizardPhase.INTRO or self.current_step is None:
            return 0.0

        total = len(self.catalog.answerable())
        pos = self.catalog.answerable_index(self.current_step)
        if pos is None:
            pos = self.catalog.preceding_answerable_index(self.current_step)
            if pos is None:
                return 0.0
        elif self.is_last_question and self._last_answer_valid():
            return 100.0
        return min(100.0, pos / total * 100.0)

    # ── Actions ───────────────────────────────────────────────────────────────

    def answer(self, question_id: str, value: Any) -> bool:
        """
        Record an answer. Returns True when the question kind auto-advances
        (single choice, Likert, or "other"-capable choice with a listed value).
        """
        if self.phase not in EDITABLE_PHASES:
            raise InvalidTransitionError(f"cannot answer while {self.phase.value}")

        q = self.catalog.get(question_id)
        if q is None:
            if self._companion_owner(question_id) is None:
                raise UnknownQuestionError(question_id)
            self.record[question_id] = value
            self.errors.pop(question_id, None)
            return False
        if not q.is_answerable:
            raise UnknownQuestionError(question_id)

        self.record[question_id] = value
        self.errors.pop(question_id, None)
        return q.auto_advances and value != OTHER_VALUE

    async def advance(self) -> WizardPhase:
        if self.phase == WizardPhase.INTRO:
            self.phase = WizardPhase.QUESTION
            self.current_step = 0
            return self.phase
        if self.phase != WizardPhase.QUESTION:
            return self.phase

        q = self.current_question
        if q is not None and q.is_answerable:
            errors = self.schema.validate_step(q.id, self.record)
            if errors:
                self.errors = errors
                return self.phase
            self.errors = {}
            if self.is_last_question:
                await self._submit()
                return self.phase

        if self.current_step is not None and self.current_step < len(self.catalog) - 1:
            self.current_step += 1
        return self.phase

    def retreat(self) -> WizardPhase:
        if self.phase != WizardPhase.QUESTION or self.current_step is None:
            return self.phase
        self.errors = {}
        if self.current_step == 0:
            self.phase = WizardPhase.INTRO
            self.current_step = None
        else:
            self.current_step -= 1
        return self.phase

    async def _submit(self) -> None:
        self.phase = WizardPhase.SUBMITTING
        self.submission_error = None
        try:
            result = await self.submitter.submit(dict(self.record))
        except Exception:
            logger.exception("Submitter raised instead of returning a result")
            result = SubmissionResult.failed("An unexpected error occurred while submitting.")

        self.last_result = result
        if result.success:
            self.phase = WizardPhase.RESULT
            self.summary = result.summary
        else:
            # stay on the last question so the respondent can resubmit
            self.phase = WizardPhase.QUESTION
            self.submission_error = result.error
            self.errors = dict(result.field_errors)

    # ── Views ─────────────────────────────────────────────────────────────────

    def _last_answer_valid(self) -> bool:
        q = self.catalog[self.catalog.last_answerable_step]
        if not _answered(self.record.get(q.id)):
            return False
        return not self.schema.validate_step(q.id, self.record)

    def snapshot(self) -> WizardState:
        step = self.current_step
        return WizardState(
            phase=self.phase,
            step=step,
            question=self.current_question if self.phase == WizardPhase.QUESTION else None,
            display_number=self.catalog.display_number(step) if step is not None else None,
            is_last_question=self.phase == WizardPhase.QUESTION and self.is_last_question,
            progress=round(self.progress_percent, 2),
            errors=dict(self.errors),
            summary=self.summary,
            submission_error=self.submission_error,
            answers=dict(self.record),
        )

    def _companion_owner(self, field_id: str) -> Optional[QuestionDefinition]:
        for q in self.catalog.answerable():
            if q.has_other and companion_id(q.id) == field_id:
                return q
        return None
