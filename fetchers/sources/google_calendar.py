"""Google Calendar events from the signed-in user's primary calendar."""

from __future__ import annotations

import logging

from fetchers.base import BaseFetcher, FetchError, register, utc_now_iso
from fetchers.models import EventSource, FetchParams, NormalizedEvent

logger = logging.getLogger(__name__)

_EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/primary/events"


@register
class GoogleCalendarFetcher(BaseFetcher):
    name = EventSource.GOOGLECAL
    rate_limit = 0.1

    async def fetch_events(self, params: FetchParams) -> list[NormalizedEvent]:
        if not params.access_token:
            logger.error("Missing Google access token. Please reconnect your account.")
            return []

        query = {
            "maxResults": str(self.settings.GOOGLE_CALENDAR_MAX_RESULTS),
            "singleEvents": "true",
            "orderBy": "startTime",
            "timeMin": utc_now_iso(),
        }
        if params.keyword:
            query["q"] = params.keyword

        try:
            resp = await self.get(
                _EVENTS_URL,
                params=query,
                headers={"Authorization": f"Bearer {params.access_token}"},
            )
        except FetchError as exc:
            cause = exc.__cause__
            status = getattr(getattr(cause, "response", None), "status_code", None)
            if status in (401, 403):
                logger.error("Google access token is invalid or expired")
                return []
            raise

        seen_at = utc_now_iso()
        return [self._to_event(item, seen_at) for item in resp.json().get("items") or []]

    def _to_event(self, item: dict, seen_at: str) -> NormalizedEvent:
        start = item.get("start") or {}
        end = item.get("end") or {}
        return NormalizedEvent(
            uid=item.get("id") or "",
            source=self.name,
            title=item.get("summary") or "",
            description=item.get("description") or "",
            start_utc=start.get("dateTime") or start.get("date") or "",
            end_utc=end.get("dateTime") or end.get("date"),
            address=item.get("location") or "",
            url=item.get("htmlLink") or "",
            last_seen_at_utc=seen_at,
        )
