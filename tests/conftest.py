"""Shared fixtures."""
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from event_tracker.config import Settings
from event_tracker.main import create_app
from event_tracker.models import EventDraft
from event_tracker.storage.memory import InMemoryEventStore


def make_draft(event_type: str = "login", timestamp: str = "2025-01-01T12:00:00Z", payload=None) -> EventDraft:
    """Build a validated draft the way a request body would."""
    return EventDraft.parse({
        "event_type": event_type,
        "timestamp": timestamp,
        "payload": {"user_id": 1} if payload is None else payload,
    })


def ts(value: str) -> datetime:
    return datetime.fromisoformat(value)


@pytest.fixture
def settings():
    """Settings with rate limiting off so tests can issue many requests."""
    return Settings(RATE_LIMIT_ENABLED=False, LOG_JSON=False, LOG_LEVEL="WARNING")


@pytest.fixture
def store():
    return InMemoryEventStore()


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    """Create test client"""
    return TestClient(app)
