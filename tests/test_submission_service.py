"""
Tests for SubmissionService
"""
import pytest

from conftest import FakeSummarizer, RecordingStore
from qcommerce_insights.config import Settings
from qcommerce_insights.errors import PersistenceError
from qcommerce_insights.services.response_shaper import TIMESTAMP_KEY
from qcommerce_insights.services.submission_service import (
    SUMMARY_FAILED_MSG,
    UNEXPECTED_MSG,
    SubmissionService,
)
from qcommerce_insights.stores.base import NullStore


@pytest.mark.asyncio
async def test_minimal_submission_end_to_end(settings, small_catalog, summarizer, store):
    service = SubmissionService(settings, summarizer, store, small_catalog)

    result = await service.submit({"name": "", "dp_1": "4"})

    assert result.success is True
    assert result.summary == summarizer.summary
    assert result.persisted is True
    assert summarizer.calls == [{
        "demographics": "",
        "responses": ["Adds items without consent - Response: 4"],
    }]
    assert len(store.records) == 1
    row = store.records[0]
    assert list(row) == [TIMESTAMP_KEY, "name", "Adds items without consent"]
    assert row["name"] == ""
    assert row["Adds items without consent"] == "4"


@pytest.mark.asyncio
async def test_invalid_record_makes_no_outbound_calls(settings, catalog, valid_record, summarizer, store):
    service = SubmissionService(settings, summarizer, store, catalog)
    del valid_record["age"]

    result = await service.submit(valid_record)

    assert result.success is False
    assert result.field_errors == {"age": "This field is required"}
    assert result.error == "age: This field is required"
    assert summarizer.calls == []
    assert store.records == []


@pytest.mark.asyncio
async def test_store_failure_still_succeeds(settings, catalog, valid_record, summarizer):
    store = RecordingStore(error=PersistenceError("quota exceeded", backend="memory"))
    service = SubmissionService(settings, summarizer, store, catalog)

    result = await service.submit(valid_record)

    assert result.success is True
    assert result.summary == summarizer.summary
    assert result.persisted is False


@pytest.mark.asyncio
async def test_summarizer_failure_fails_but_still_persists(settings, catalog, valid_record, failing_summarizer, store):
    service = SubmissionService(settings, failing_summarizer, store, catalog)

    result = await service.submit(valid_record)

    assert result.success is False
    assert result.error == SUMMARY_FAILED_MSG
    assert len(store.records) == 1


@pytest.mark.asyncio
async def test_unexpected_summarizer_exception_is_treated_as_summary_failure(settings, catalog, valid_record, store):
    summarizer = FakeSummarizer(error=ValueError("bad payload"))
    service = SubmissionService(settings, summarizer, store, catalog)

    result = await service.submit(valid_record)

    assert result.success is False
    assert result.error == SUMMARY_FAILED_MSG


@pytest.mark.asyncio
async def test_empty_summary_is_a_failure(settings, catalog, valid_record, store):
    service = SubmissionService(settings, FakeSummarizer(summary=""), store, catalog)
    result = await service.submit(valid_record)
    assert result.success is False
    assert result.error == SUMMARY_FAILED_MSG


@pytest.mark.asyncio
async def test_summarizer_timeout(catalog, valid_record, store):
    settings = Settings(summary_timeout_seconds=0.05, persistence_timeout_seconds=1.0)
    service = SubmissionService(settings, FakeSummarizer(delay=0.5), store, catalog)

    result = await service.submit(valid_record)

    assert result.success is False
    assert result.error == SUMMARY_FAILED_MSG


@pytest.mark.asyncio
async def test_store_timeout_does_not_fail_submission(catalog, valid_record, summarizer):
    settings = Settings(summary_timeout_seconds=1.0, persistence_timeout_seconds=0.05)
    service = SubmissionService(settings, summarizer, RecordingStore(delay=0.3), catalog)

    result = await service.submit(valid_record)

    assert result.success is True
    assert result.persisted is False


@pytest.mark.asyncio
async def test_unconfigured_store_is_skipped(settings, catalog, valid_record, summarizer):
    service = SubmissionService(settings, summarizer, NullStore("persistence disabled"), catalog)

    result = await service.submit(valid_record)

    assert result.success is True
    assert result.persisted is False


@pytest.mark.asyncio
async def test_likert_prefixes_limit_summary_input(settings, catalog, valid_record, summarizer, store):
    service = SubmissionService(settings, summarizer, store, catalog, likert_prefixes=["dp"])

    await service.submit(valid_record)

    responses = summarizer.calls[0]["responses"]
    assert len(responses) == 15
    assert all(line.endswith("- Response: 4") for line in responses)


@pytest.mark.asyncio
async def test_other_gender_is_resolved_before_export(settings, catalog, valid_record, summarizer, store):
    valid_record["gender"] = "other"
    valid_record["genderOther"] = "Non-binary"
    service = SubmissionService(settings, summarizer, store, catalog)

    result = await service.submit(valid_record)

    assert result.success is True
    assert "Gender: Non-binary" in summarizer.calls[0]["demographics"]
    assert store.records[0]["Gender"] == "Non-binary"


@pytest.mark.asyncio
async def test_shaping_error_returns_generic_failure(settings, small_catalog, summarizer, store, monkeypatch):
    def _boom(*args, **kwargs):
        raise RuntimeError("shaper exploded")

    monkeypatch.setattr("qcommerce_insights.services.submission_service.shape", _boom)
    service = SubmissionService(settings, summarizer, store, small_catalog)

    result = await service.submit({"dp_1": "1"})

    assert result.success is False
    assert result.error == UNEXPECTED_MSG
