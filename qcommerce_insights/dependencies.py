"""
Process-wide service singletons, exposed as FastAPI dependencies.

Everything is built from one Settings instance the first time it is needed.
Tests swap any of these through ``app.dependency_overrides``.
"""
from __future__ import annotations

from functools import lru_cache

from qcommerce_insights.config import Settings, get_settings
from qcommerce_insights.questions.catalog import DEFAULT_CATALOG, Catalog
from qcommerce_insights.services.response_schema import ResponseSchema
from qcommerce_insights.services.session_registry import SessionRegistry
from qcommerce_insights.services.submission_service import SubmissionService
from qcommerce_insights.services.summary_service import SummaryService
from qcommerce_insights.services.wizard import SurveyWizard
from qcommerce_insights.stores.base import ResponseStore
from qcommerce_insights.stores.factory import build_store


def get_catalog() -> Catalog:
    return DEFAULT_CATALOG


@lru_cache(maxsize=1)
def get_schema() -> ResponseSchema:
    return ResponseSchema(get_catalog())


@lru_cache(maxsize=1)
def get_store() -> ResponseStore:
    return build_store(get_settings())


@lru_cache(maxsize=1)
def get_submission_service() -> SubmissionService:
    settings: Settings = get_settings()
    return SubmissionService(
        settings,
        summarizer=SummaryService(settings),
        store=get_store(),
        catalog=get_catalog(),
        schema=get_schema(),
    )


@lru_cache(maxsize=1)
def get_session_registry() -> SessionRegistry:
    return SessionRegistry(
        lambda: SurveyWizard(get_catalog(), get_submission_service(), schema=get_schema())
    )
