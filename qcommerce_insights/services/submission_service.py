"""
qcommerce_insights/services/submission_service.py
---------------------------------------------------
Submission orchestrator: validate → shape → summarize ∥ persist.

Both outbound calls start together and are both awaited before returning
(persistence is not fire-and-forget). Each one is bounded by its own timeout.

Failure policy
  - invalid record       → failed result with field messages, no outbound calls
  - summarizer failure   → failed result with a generic retry message
  - persistence failure  → logged, submission still succeeds
  - anything else        → logged, generic failed result

Nothing raised inside ``submit`` escapes it.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol

from qcommerce_insights.config import Settings
from qcommerce_insights.errors import ResponseValidationError, SummarizationError
from qcommerce_insights.models.domain.questions import ResponseRecord
from qcommerce_insights.models.domain.submission import (
    ShapedSubmission,
    SubmissionResult,
    SurveySummary,
)
from qcommerce_insights.questions.catalog import Catalog
from qcommerce_insights.services.response_schema import ResponseSchema
from qcommerce_insights.services.response_shaper import shape
from qcommerce_insights.stores.base import ResponseStore

logger = logging.getLogger(__name__)

SUMMARY_FAILED_MSG = "Submission failed. Please try again."
UNEXPECTED_MSG = "An unexpected error occurred. Please try again."


class Summarizer(Protocol):
    async def summarize(self, demographics: str, responses: List[str]) -> SurveySummary:
        ...


class SubmissionService:
    """Validates a finished ResponseRecord and fans it out to the summarizer and the store."""

    def __init__(
        self,
        settings: Settings,
        summarizer: Summarizer,
        store: ResponseStore,
        catalog: Catalog,
        schema: Optional[ResponseSchema] = None,
        likert_prefixes: Optional[Iterable[str]] = None,
    ):
        self.settings = settings
        self.summarizer = summarizer
        self.store = store
        self.catalog = catalog
        self.schema = schema or ResponseSchema(catalog)
        self.likert_prefixes = tuple(likert_prefixes) if likert_prefixes else None

    async def submit(self, record: ResponseRecord) -> SubmissionResult:
        record = dict(record)
        try:
            clean = self.schema.validate(record)
        except ResponseValidationError as e:
            logger.info("Submission rejected: %d invalid field(s)", len(e.field_errors))
            return SubmissionResult.failed(e.summary(), field_errors=e.field_errors)

        try:
            shaped = shape(clean, self.catalog, likert_prefixes=self.likert_prefixes)
            outcome, persisted = await asyncio.gather(
                self._summarize(shaped),
                self._persist(shaped.export_record),
                return_exceptions=True,
            )
        except Exception:
            logger.exception("Error submitting survey")
            return SubmissionResult.failed(UNEXPECTED_MSG)

        if isinstance(persisted, BaseException):
            logger.error("Error writing survey response: %s", persisted)
            persisted = False
        if isinstance(outcome, SummarizationError):
            logger.error("Survey summarization failed: %s", outcome, exc_info=outcome)
            return SubmissionResult.failed(SUMMARY_FAILED_MSG)
        if isinstance(outcome, BaseException):
            logger.error("Error submitting survey: %s", outcome, exc_info=outcome)
            return SubmissionResult.failed(UNEXPECTED_MSG)

        logger.info("Survey submitted (persisted=%s, backend=%s)", persisted, self.store.name)
        return SubmissionResult.ok(outcome.summary, persisted=persisted)

    async def _summarize(self, shaped: ShapedSubmission) -> SurveySummary:
        try:
            result = await asyncio.wait_for(
                self.summarizer.summarize(
                    shaped.demographics_summary,
                    list(shaped.likert_response_lines),
                ),
                timeout=self.settings.summary_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise SummarizationError(
                f"Summarizer timed out after {self.settings.summary_timeout_seconds:g}s"
            ) from e
        except SummarizationError:
            raise
        except Exception as e:
            raise SummarizationError(f"Summarizer call failed: {e}") from e

        if not result or not result.summary:
            raise SummarizationError("Summarizer returned an empty summary")
        return result

    async def _persist(self, export_record: Dict[str, Any]) -> bool:
        """Returns True when the record was stored. Never raises."""
        if not self.store.is_configured:
            logger.warning(
                "Skipping response persistence: %s",
                getattr(self.store, "reason", f"{self.store.name} backend not configured"),
            )
            return False
        try:
            await asyncio.wait_for(
                asyncio.to_thread(self.store.append, export_record),
                timeout=self.settings.persistence_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(
                "Error writing survey response: %s append timed out after %gs",
                self.store.name,
                self.settings.persistence_timeout_seconds,
            )
            return False
        except Exception:
            logger.exception("Error writing survey response to %s", self.store.name)
            return False
        return True
