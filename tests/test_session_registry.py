"""
Tests for SessionRegistry
"""
from unittest.mock import AsyncMock

import pytest

from qcommerce_insights.errors import SessionNotFoundError
from qcommerce_insights.services.session_registry import SessionRegistry
from qcommerce_insights.services.wizard import SurveyWizard


@pytest.fixture
def registry(small_catalog):
    return SessionRegistry(lambda: SurveyWizard(small_catalog, AsyncMock()), max_sessions=2)


def test_sessions_are_independent(registry):
    first_id, first = registry.create()
    second_id, second = registry.create()

    assert first_id != second_id
    assert first is not second
    assert registry.get(first_id) is first
    assert len(registry) == 2


def test_least_recently_used_session_is_evicted(registry):
    a, _ = registry.create()
    b, _ = registry.create()
    registry.get(a)             # b is now the oldest
    c, _ = registry.create()

    assert len(registry) == 2
    registry.get(a)
    registry.get(c)
    with pytest.raises(SessionNotFoundError):
        registry.get(b)


def test_delete(registry):
    session_id, _ = registry.create()
    assert registry.delete(session_id) is True
    assert registry.delete(session_id) is False
    with pytest.raises(SessionNotFoundError):
        registry.get(session_id)
