"""Tests for the SQLite event store."""

import pytest

from api.database import DuplicateEventError, EventStore


def record(uid="evt-1", **overrides):
    data = {
        "uid": uid,
        "source": "ticketmaster",
        "title": "Jazz Night",
        "description": None,
        "start_utc": "2030-01-01T20:00:00Z",
        "end_utc": None,
        "venue_name": "Blue Note",
        "address": None,
        "url": None,
        "last_seen_at_utc": "2029-12-01T00:00:00Z",
    }
    data.update(overrides)
    return data


class TestEventStore:
    @pytest.mark.asyncio
    async def test_insert_and_get(self, store):
        event_id = await store.insert_event("user-1", record())
        row = await store.get_event("user-1", "evt-1")
        assert row["id"] == event_id
        assert row["title"] == "Jazz Night"
        assert row["tag"] == "Other"
        assert row["created_by_user"] == 0

    @pytest.mark.asyncio
    async def test_get_missing(self, store):
        assert await store.get_event("user-1", "nope") is None

    @pytest.mark.asyncio
    async def test_duplicate_insert_raises(self, store):
        await store.insert_event("user-1", record())
        with pytest.raises(DuplicateEventError):
            await store.insert_event("user-1", record(title="Again"))
        assert await store.count_events("user-1") == 1

    @pytest.mark.asyncio
    async def test_same_uid_for_different_users(self, store):
        await store.insert_event("user-1", record())
        await store.insert_event("user-2", record())
        assert await store.count_events("user-1") == 1
        assert await store.count_events("user-2") == 1

    @pytest.mark.asyncio
    async def test_update(self, store):
        event_id = await store.insert_event("user-1", record())
        await store.update_event(event_id, record(title="Late Show", venue_name=None))
        row = await store.get_event("user-1", "evt-1")
        assert row["title"] == "Late Show"
        assert row["venue_name"] is None
        assert row["source"] == "ticketmaster"

    @pytest.mark.asyncio
    async def test_list_filters_and_pages(self, store):
        await store.insert_event("user-1", record("a", start_utc="2030-01-03T00:00:00Z"))
        await store.insert_event("user-1", record("b", start_utc="2030-01-01T00:00:00Z"))
        await store.insert_event("user-1", record("c", source="eventbrite"))
        await store.insert_event("user-2", record("d"))

        rows = await store.list_events("user-1", per_page=2)
        assert [row["uid"] for row in rows] == ["b", "c"]
        assert [row["uid"] for row in await store.list_events("user-1", page=2, per_page=2)] == ["a"]
        assert [row["uid"] for row in await store.list_events("user-1", source="eventbrite")] == ["c"]
        assert await store.count_events("user-1", source="ticketmaster") == 2

    @pytest.mark.asyncio
    async def test_closed_store_raises(self, tmp_path):
        store = EventStore(tmp_path / "closed.db")
        assert not store.is_open
        with pytest.raises(RuntimeError, match="not open"):
            await store.get_event("user-1", "evt-1")

    @pytest.mark.asyncio
    async def test_reopen_keeps_rows(self, tmp_path):
        path = tmp_path / "nested" / "events.db"
        async with EventStore(path) as store:
            await store.insert_event("user-1", record())
        async with EventStore(path) as store:
            assert await store.count_events("user-1") == 1
