"""Pydantic models for the /admin router."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str             # "ok" | "degraded"
    persistence_backend: str
    persistence: bool
    openai: bool
    active_sessions: int = 0
    detail: Optional[str] = None
