"""Eventbrite events via the v3 REST API."""

from __future__ import annotations

import logging

from fetchers.base import BaseFetcher, register, utc_now_iso
from fetchers.models import EventSource, FetchParams, NormalizedEvent
from normalization.text import strip_html

logger = logging.getLogger(__name__)

_API_BASE = "https://www.eventbriteapi.com/v3"


@register
class EventbriteFetcher(BaseFetcher):
    name = EventSource.EVENTBRITE
    rate_limit = 2.0

    SEARCH_URL = f"{_API_BASE}/events/search/"

    async def fetch_events(self, params: FetchParams) -> list[NormalizedEvent]:
        api_key = self.settings.EVENTBRITE_API_KEY
        if not api_key:
            logger.error("Missing Eventbrite API key")
            return []

        query = {"expand": "venue"}
        if params.keyword:
            query["q"] = params.keyword
        if params.city:
            query["location.address"] = params.city

        resp = await self.get(
            self.SEARCH_URL,
            params=query,
            headers={
                "Authorization": f"Bearer {api_key.get_secret_value()}",
                "Content-Type": "application/json",
            },
        )
        data = resp.json()
        seen_at = utc_now_iso()
        return [self._to_event(item, seen_at) for item in data.get("events") or []]

    def _to_event(self, item: dict, seen_at: str) -> NormalizedEvent:
        venue = item.get("venue") or {}
        return NormalizedEvent(
            uid=item.get("id") or "",
            source=self.name,
            title=(item.get("name") or {}).get("text") or "",
            description=self._description(item),
            start_utc=(item.get("start") or {}).get("utc") or "",
            end_utc=(item.get("end") or {}).get("utc") or "",
            venue_name=venue.get("name") or "",
            address=self._address(venue),
            url=item.get("url") or "",
            last_seen_at_utc=seen_at,
        )

    @staticmethod
    def _description(item: dict) -> str:
        description = item.get("description") or {}
        if description.get("text"):
            return description["text"]
        if description.get("html"):
            return strip_html(description["html"])
        return item.get("summary") or ""

    @staticmethod
    def _address(venue: dict) -> str:
        addr = venue.get("address") or {}
        display = addr.get("localized_address_display")
        if display:
            return display
        parts = [
            addr.get("address_1"),
            addr.get("address_2"),
            addr.get("city"),
            addr.get("region"),
            addr.get("postal_code"),
            addr.get("country"),
        ]
        return ", ".join(p.strip() for p in parts if p and p.strip())
