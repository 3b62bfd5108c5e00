"""Pick the persistence backend from settings."""
from __future__ import annotations

import logging

from qcommerce_insights.config import Settings
from qcommerce_insights.stores.base import NullStore, ResponseStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> ResponseStore:
    """
    Return the configured ResponseStore.

    ``auto`` prefers Google Sheets, then Supabase. A backend that is requested
    but not configured degrades to NullStore with a warning.
    """
    backend = settings.persistence_backend

    if backend == "none":
        return NullStore("persistence disabled")

    if backend in ("auto", "sheets") and settings.sheets_configured:
        from qcommerce_insights.stores.sheets_store import SheetsStore
        return SheetsStore(settings)

    if backend in ("auto", "supabase") and settings.supabase_configured:
        from qcommerce_insights.stores.supabase_store import SupabaseStore
        return SupabaseStore(settings)

    if backend == "auto":
        reason = "no persistence backend configured"
    else:
        reason = f"{backend} backend selected but not configured"
    logger.warning("Survey responses will not be persisted: %s", reason)
    return NullStore(reason)
