"""In-process registry of active wizard sessions."""
from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from typing import Callable, Tuple

from qcommerce_insights.errors import SessionNotFoundError
from qcommerce_insights.services.wizard import SurveyWizard

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 1000


class SessionRegistry:
    """
    Maps session ids to SurveyWizard instances.

    Sessions share nothing but this map. When full, the least recently used
    session is dropped.
    """

    def __init__(
        self,
        factory: Callable[[], SurveyWizard],
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ):
        self._factory = factory
        self._max = max_sessions
        self._sessions: "OrderedDict[str, SurveyWizard]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> Tuple[str, SurveyWizard]:
        session_id = uuid.uuid4().hex
        wizard = self._factory()
        with self._lock:
            self._sessions[session_id] = wizard
            while len(self._sessions) > self._max:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("Evicted survey session %s", evicted)
        return session_id, wizard

    def get(self, session_id: str) -> SurveyWizard:
        with self._lock:
            wizard = self._sessions.get(session_id)
            if wizard is None:
                raise SessionNotFoundError(session_id)
            self._sessions.move_to_end(session_id)
            return wizard

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None
