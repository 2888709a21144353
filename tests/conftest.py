"""
Shared pytest fixtures for the event aggregator test suite.

Provides factories for provider events and raw validation payloads, an
isolated settings object and an opened event store on a temporary database.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from api.database import EventStore
from fetchers.config import Settings
from fetchers.models import EventSource, NormalizedEvent


def iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the developer's environment and ``.env`` file."""
    return Settings(
        _env_file=None,
        TICKETMASTER_API_KEY="tm-test-key",
        EVENTBRITE_API_KEY="eb-test-key",
        DATABASE_PATH=tmp_path / "events.db",
        FETCH_MAX_RETRIES=2,
        TICKETMASTER_MAX_PAGES=3,
    )


@pytest.fixture
def make_event(now):
    """
    Return a function that creates NormalizedEvent objects with sensible defaults.

    Example:
        event = make_event(uid="tm-1", title="Jazz Night")
    """

    def _make_event(**kwargs) -> NormalizedEvent:
        defaults = {
            "uid": "evt-1",
            "source": EventSource.TICKETMASTER,
            "title": "Jazz Night",
            "description": "An evening of jazz",
            "start_utc": iso(now + timedelta(days=7)),
            "end_utc": iso(now + timedelta(days=7, hours=3)),
            "venue_name": "Blue Note",
            "address": "131 W 3rd St, New York, NY 10012",
            "url": "https://www.ticketmaster.com/event/evt-1",
            "last_seen_at_utc": iso(now),
        }
        defaults.update(kwargs)
        return NormalizedEvent(**defaults)

    return _make_event


@pytest.fixture
def raw_event(now):
    """Return a function building a valid camelCase validation payload."""

    def _raw_event(**overrides) -> dict:
        payload = {
            "uid": "evt-1",
            "source": "ticketmaster",
            "title": "Jazz Night at the Blue Note",
            "startUtc": iso(now + timedelta(days=7)),
            "endUtc": iso(now + timedelta(days=7, hours=3)),
            "timezone": "America/New_York",
            "venueName": "blue note jazz club",
            "address": "131 W 3rd St, New York, NY 10012",
            "url": "https://www.ticketmaster.com/event/evt-1",
            "lastSeenAtUtc": iso(now),
        }
        payload.update(overrides)
        return {k: v for k, v in payload.items() if v is not None}

    return _raw_event


@pytest_asyncio.fixture
async def store(tmp_path):
    """An opened EventStore on a throwaway database file."""
    async with EventStore(tmp_path / "events.db") as opened:
        yield opened
