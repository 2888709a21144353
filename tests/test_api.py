"""Tests for the FastAPI application."""

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from fetchers.base import BaseFetcher
from fetchers.models import EventSource


class FakeTicketmaster(BaseFetcher):
    name = EventSource.TICKETMASTER
    rate_limit = 0

    def __init__(self, events, **kwargs):
        super().__init__(**kwargs)
        self.events = events

    async def fetch_events(self, params):
        return [e for e in self.events if not params.keyword or params.keyword in e.title]


@pytest.fixture
def events(make_event):
    return [
        make_event(uid="tm-1", title="Jazz Night"),
        make_event(uid="tm-2", title="Rock Night"),
    ]


@pytest.fixture
def client(settings, events):
    app = create_app(
        settings,
        fetchers={EventSource.TICKETMASTER: lambda s: FakeTicketmaster(events, settings=s)},
    )
    with TestClient(app) as test_client:
        yield test_client


class TestSync:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_missing_user(self, client):
        response = client.post("/api/sync/ticketmaster")
        assert response.status_code == 400
        assert response.json() == {"error": "Missing userId"}

    @pytest.mark.parametrize("provider", ["myspace", "eventbrite"])
    def test_unknown_provider(self, client, provider):
        response = client.post(f"/api/sync/{provider}", params={"userId": "user-1"})
        assert response.status_code == 404
        assert response.json() == {"error": f"Unknown provider: {provider}"}

    def test_sync_is_idempotent(self, client):
        first = client.post("/api/sync/ticketmaster", params={"userId": "user-1"})
        second = client.get("/api/sync/ticketmaster", params={"userId": "user-1"})
        assert first.status_code == 200
        assert first.json() == {"inserted": 2, "updated": 0}
        assert second.json() == {"inserted": 0, "updated": 2}

    def test_sync_passes_filters(self, client):
        response = client.post(
            "/api/sync/ticketmaster", params={"userId": "user-1", "keyword": "Jazz"}
        )
        assert response.json() == {"inserted": 1, "updated": 0}

    def test_sync_failure(self, settings):
        def broken(_settings):
            raise RuntimeError("adapter exploded")

        app = create_app(settings, fetchers={EventSource.TICKETMASTER: broken})
        with TestClient(app) as client:
            response = client.post("/api/sync/ticketmaster", params={"userId": "user-1"})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to sync events"}


class TestListEvents:
    def test_requires_user(self, client):
        assert client.get("/api/events").status_code == 400

    def test_lists_synced_events(self, client):
        client.post("/api/sync/ticketmaster", params={"userId": "user-1"})

        body = client.get("/api/events", params={"userId": "user-1", "per_page": 1}).json()
        assert body["total"] == 2
        assert body["pages"] == 2
        assert len(body["events"]) == 1
        assert body["events"][0]["source"] == "ticketmaster"

        other = client.get("/api/events", params={"userId": "user-2"}).json()
        assert other["total"] == 0
        assert other["pages"] == 1


class TestValidateEndpoint:
    def test_valid_event(self, client, raw_event):
        response = client.post("/api/events/validate", json=raw_event())
        assert response.status_code == 200
        body = response.json()
        assert body["isValid"] is True
        assert body["warnings"] == []
        assert body["data"]["venueName"] == "Blue Note Jazz Club"
        assert body["data"]["city"] == "New York"

    def test_invalid_event(self, client, raw_event):
        response = client.post("/api/events/validate", json=raw_event(title=None))
        assert response.status_code == 422
        assert response.json() == {
            "isValid": False,
            "errors": [{"field": "title", "code": "missing", "message": "Event title is required"}],
            "warnings": [],
        }

    def test_warnings_include_suggestions(self, client, raw_event):
        response = client.post("/api/events/validate", json=raw_event(title="Test Jazz Night"))
        [warning] = response.json()["warnings"]
        assert warning["code"] == "suspicious_title"
        assert warning["suggestion"] == "Please verify this is a real event"

    def test_malformed_json(self, client):
        response = client.post(
            "/api/events/validate",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}

    def test_region_name_timezone(self, client, raw_event):
        response = client.post("/api/events/validate", json=raw_event(timezone="America"))
        assert response.status_code == 422
        assert response.json()["isValid"] is False
