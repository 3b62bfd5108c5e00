"""
/admin router
-------------
Operational endpoints.

GET  /admin/health    — Liveness + configuration check (no outbound calls)
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from qcommerce_insights.config import Settings, get_settings
from qcommerce_insights.dependencies import get_session_registry, get_store
from qcommerce_insights.models.api.admin import HealthResponse
from qcommerce_insights.services.session_registry import SessionRegistry
from qcommerce_insights.stores.base import ResponseStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health", response_model=HealthResponse)
def health(
    settings: Settings = Depends(get_settings),
    store: ResponseStore = Depends(get_store),
    registry: SessionRegistry = Depends(get_session_registry),
) -> HealthResponse:
    """
    Liveness + dependency check.

    Reports:
      - which persistence backend was selected and whether it is configured
      - whether OPENAI_API_KEY is present (no API call made)
    """
    detail = None
    persistence_ok = store.is_configured
    if not persistence_ok:
        detail = f"Persistence disabled: {getattr(store, 'reason', 'not configured')}."

    openai_ok = settings.openai_configured
    if not openai_ok:
        detail = ((detail or "") + " OPENAI_API_KEY missing.").strip()

    overall = "ok" if (persistence_ok and openai_ok) else "degraded"
    if overall != "ok":
        logger.warning("Health degraded: %s", detail)

    return HealthResponse(
        status=overall,
        persistence_backend=store.name,
        persistence=persistence_ok,
        openai=openai_ok,
        active_sessions=len(registry),
        detail=detail,
    )
