"""Insert survey responses as documents into a Supabase table."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from supabase import Client, create_client

from qcommerce_insights.config import Settings
from qcommerce_insights.errors import PersistenceError
from qcommerce_insights.stores.base import ResponseStore

logger = logging.getLogger(__name__)


class SupabaseStore(ResponseStore):
    name = "supabase"

    def __init__(self, settings: Settings, client: Optional[Client] = None):
        self.settings = settings
        self.table = settings.supabase_table
        self.sb = client

    @property
    def is_configured(self) -> bool:
        return self.sb is not None or self.settings.supabase_configured

    def _connect(self) -> Client:
        if self.sb is None:
            if not self.settings.supabase_configured:
                raise PersistenceError(
                    "SUPABASE_URL and SUPABASE_SERVICE_KEY must be set in .env",
                    backend=self.name,
                )
            self.sb = create_client(self.settings.supabase_url, self.settings.supabase_service_key)
        return self.sb

    def append(self, record: Dict[str, Any]) -> None:
        try:
            self._connect().table(self.table).insert({"response": record}).execute()
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Supabase insert into {self.table!r} failed: {e}", backend=self.name) from e
        logger.info("Inserted survey response into %s", self.table)
