"""Ticketmaster events via the Discovery API v2."""

from __future__ import annotations

import logging

from fetchers.base import BaseFetcher, register, utc_now_iso
from fetchers.models import EventSource, FetchParams, NormalizedEvent

logger = logging.getLogger(__name__)

_ENDPOINT = "https://app.ticketmaster.com/discovery/v2/events.json"
_PAGE_SIZE = 200  # API max


def _join_address(venue: dict) -> str:
    parts = [
        (venue.get("address") or {}).get("line1"),
        (venue.get("address") or {}).get("line2"),
        (venue.get("city") or {}).get("name"),
        (venue.get("state") or {}).get("name"),
        venue.get("postalCode"),
        (venue.get("country") or {}).get("name"),
    ]
    return ", ".join(p.strip() for p in parts if p and p.strip())


@register
class TicketmasterFetcher(BaseFetcher):
    name = EventSource.TICKETMASTER
    rate_limit = 0.25  # 5 req/s quota

    async def fetch_events(self, params: FetchParams) -> list[NormalizedEvent]:
        api_key = self.settings.TICKETMASTER_API_KEY
        if not api_key:
            logger.error("Missing Ticketmaster API key")
            return []

        seen_at = utc_now_iso()
        events: list[NormalizedEvent] = []
        page = 0

        while True:
            query: dict[str, str | int] = {
                "apikey": api_key.get_secret_value(),
                "size": _PAGE_SIZE,
                "page": page,
                "sort": "date,asc",
            }
            if params.city:
                query["city"] = params.city
            if params.keyword:
                query["keyword"] = params.keyword

            resp = await self.get(_ENDPOINT, params=query)
            data = resp.json()

            embedded = data.get("_embedded") or {}
            for item in embedded.get("events", []):
                events.append(self._to_event(item, seen_at))

            # Pagination
            total_pages = (data.get("page") or {}).get("totalPages", 0)
            page += 1
            if page >= total_pages or page >= self.settings.TICKETMASTER_MAX_PAGES:
                break

        return events

    def _to_event(self, item: dict, seen_at: str) -> NormalizedEvent:
        dates = item.get("dates") or {}
        start_obj = dates.get("start") or {}
        end_obj = dates.get("end") or {}

        # Venue info
        venue_name = ""
        address = ""
        venues = (item.get("_embedded") or {}).get("venues") or []
        if venues:
            venue_name = venues[0].get("name") or ""
            address = _join_address(venues[0])

        return NormalizedEvent(
            uid=item.get("id") or "",
            source=self.name,
            title=item.get("name") or "",
            description=(
                item.get("description") or item.get("info") or item.get("pleaseNote") or ""
            ),
            start_utc=start_obj.get("dateTime") or "",
            end_utc=end_obj.get("dateTime"),
            venue_name=venue_name,
            address=address,
            url=item.get("url") or "",
            last_seen_at_utc=seen_at,
        )
