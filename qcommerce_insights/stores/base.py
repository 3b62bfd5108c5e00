"""Persistence interface for exported survey responses."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

logger = logging.getLogger(__name__)


class ResponseStore(ABC):
    """
    Write-only sink for flat export records.

    ``append`` is blocking; the submission service runs it in a worker thread.
    Implementations raise PersistenceError on failure.
    """

    name: str = "store"

    @property
    def is_configured(self) -> bool:
        return True

    @abstractmethod
    def append(self, record: Dict[str, Any]) -> None:
        ...


class NullStore(ResponseStore):
    """Used when no backend is configured: log and skip."""

    name = "none"

    def __init__(self, reason: str = "no persistence backend configured"):
        self.reason = reason

    @property
    def is_configured(self) -> bool:
        return False

    def append(self, record: Dict[str, Any]) -> None:
        logger.debug("NullStore dropped a record with %d fields (%s)", len(record), self.reason)
