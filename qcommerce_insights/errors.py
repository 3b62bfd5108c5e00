from __future__ import annotations

from typing import Dict, Optional


class SurveyError(Exception):
    """Base class for domain errors."""


class ResponseValidationError(SurveyError):
    """Record fails the response schema. Carries field -> message."""

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        super().__init__(self.summary())

    def summary(self) -> str:
        return "; ".join(f"{field}: {msg}" for field, msg in self.field_errors.items())


class SummarizationError(SurveyError):
    """The summarizer call failed, timed out, or returned nothing usable."""


class PersistenceError(SurveyError):
    """The export call failed. Logged only, never surfaced to the respondent."""

    def __init__(self, message: str, backend: Optional[str] = None):
        self.backend = backend
        super().__init__(message)


class UnknownQuestionError(SurveyError):
    """No answerable question or companion field with this id."""


class SessionNotFoundError(SurveyError):
    """No wizard session with this id."""


class InvalidTransitionError(SurveyError):
    """Wizard action not allowed in the current phase."""
