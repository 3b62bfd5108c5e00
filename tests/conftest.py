"""
Pytest configuration and fixtures
"""
import asyncio
import time
from typing import Any, Dict, List

import pytest

from qcommerce_insights.config import Settings
from qcommerce_insights.errors import SummarizationError
from qcommerce_insights.models.domain.questions import QuestionDefinition, QuestionKind
from qcommerce_insights.models.domain.submission import SurveySummary
from qcommerce_insights.questions.catalog import DEFAULT_CATALOG, Catalog
from qcommerce_insights.stores.base import ResponseStore


class FakeSummarizer:
    """Records every call; returns a fixed summary, raises, or sleeps."""

    def __init__(self, summary: str = "You notice dark patterns often.", error: Exception = None, delay: float = 0.0):
        self.summary = summary
        self.error = error
        self.delay = delay
        self.calls: List[Dict[str, Any]] = []

    async def summarize(self, demographics: str, responses: List[str]) -> SurveySummary:
        self.calls.append({"demographics": demographics, "responses": list(responses)})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SurveySummary(summary=self.summary)


class RecordingStore(ResponseStore):
    name = "memory"

    def __init__(self, error: Exception = None, delay: float = 0.0):
        self.records: List[Dict[str, Any]] = []
        self.error = error
        self.delay = delay

    def append(self, record: Dict[str, Any]) -> None:
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.records.append(dict(record))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real deployment variables out of Settings built during tests"""
    for field in Settings.model_fields.values():
        if isinstance(field.validation_alias, str):
            monkeypatch.delenv(field.validation_alias, raising=False)
    return monkeypatch


@pytest.fixture
def settings() -> Settings:
    return Settings(summary_timeout_seconds=1.0, persistence_timeout_seconds=1.0)


@pytest.fixture
def small_catalog() -> Catalog:
    """Two-question catalog: optional name, one required Likert item."""
    return Catalog([
        QuestionDefinition(id="name", kind=QuestionKind.TEXT, prompt="name", required=False),
        QuestionDefinition(id="dp_1", kind=QuestionKind.LIKERT, prompt="Adds items without consent", required=True),
    ])


@pytest.fixture
def catalog() -> Catalog:
    return DEFAULT_CATALOG


@pytest.fixture
def valid_record() -> Dict[str, Any]:
    """A complete, valid record for the default catalog."""
    record: Dict[str, Any] = {
        "name": "Asha",
        "age": "29",
        "gender": "female",
        "education": "pg",
        "maritalStatus": "single",
        "employmentStatus": "employed",
    }
    for i in range(1, 16):
        record[f"dp_{i}"] = "4"
        record[f"ocb_{i}"] = "3"
    return record


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def failing_summarizer() -> FakeSummarizer:
    return FakeSummarizer(error=SummarizationError("model unavailable"))


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()
