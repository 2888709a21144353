"""Idempotent ingestion of normalized provider events into the event store."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Iterable

from api.database import DuplicateEventError, EventStore
from fetchers.base import BaseFetcher
from fetchers.models import FetchParams, NormalizedEvent
from normalization.text import sanitize_text
from validation.dates import parse_datetime

logger = logging.getLogger(__name__)

UNTITLED = "Untitled Event"


@dataclass
class UpsertSummary:
    inserted: int = 0
    updated: int = 0
    skipped: int = 0

    def as_response(self) -> dict[str, int]:
        return {"inserted": self.inserted, "updated": self.updated}

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def _iso_z(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class IngestionService:
    """Upserts provider batches for one user, one event at a time."""

    def __init__(self, store: EventStore) -> None:
        self.store = store

    def _to_record(self, event: NormalizedEvent) -> dict | None:
        if not event.uid or not event.uid.strip():
            logger.warning("Skipping %s event without uid", event.source.value)
            return None
        start = parse_datetime(event.start_utc)
        if start is None:
            logger.warning("Skipping event %s: invalid startUtc %r", event.uid, event.start_utc)
            return None
        seen = parse_datetime(event.last_seen_at_utc)
        if seen is None:
            logger.warning(
                "Skipping event %s: invalid lastSeenAtUtc %r", event.uid, event.last_seen_at_utc
            )
            return None
        end = parse_datetime(event.end_utc) if event.end_utc else None

        return {
            "uid": event.uid,
            "source": event.source.value,
            "title": sanitize_text(event.title) or UNTITLED,
            "description": _clean(event.description),
            "start_utc": _iso_z(start),
            "end_utc": _iso_z(end) if end else None,
            "venue_name": _clean(event.venue_name),
            "address": _clean(event.address),
            "url": _clean(event.url),
            "last_seen_at_utc": _iso_z(seen),
        }

    async def _upsert_one(self, user_id: str, event: NormalizedEvent, summary: UpsertSummary) -> None:
        record = self._to_record(event)
        if record is None:
            summary.skipped += 1
            return

        existing = await self.store.get_event(user_id, record["uid"])
        if existing is None:
            try:
                await self.store.insert_event(user_id, record)
            except DuplicateEventError:
                # Another batch inserted it between lookup and insert.
                logger.info("Event %s already ingested for user %s", record["uid"], user_id)
                summary.skipped += 1
                return
            summary.inserted += 1
            return

        stored_seen = parse_datetime(existing["last_seen_at_utc"])
        incoming_seen = parse_datetime(record["last_seen_at_utc"])
        if stored_seen and stored_seen > incoming_seen:
            logger.info("Skipping stale update for event %s", record["uid"])
            summary.skipped += 1
            return

        await self.store.update_event(existing["id"], record)
        summary.updated += 1

    async def upsert(self, user_id: str, events: Iterable[NormalizedEvent]) -> UpsertSummary:
        """Insert unseen events and refresh known ones.

        Per-event failures are logged and counted as skipped; the rest of the
        batch still goes through.
        """
        if not self.store.is_open:
            raise RuntimeError("EventStore is not open")

        summary = UpsertSummary()
        for event in events:
            try:
                await self._upsert_one(user_id, event, summary)
            except Exception:
                logger.exception("Failed to ingest event %s for user %s", event.uid, user_id)
                summary.skipped += 1

        logger.info(
            "Upserted events for user %s: %d inserted, %d updated, %d skipped",
            user_id,
            summary.inserted,
            summary.updated,
            summary.skipped,
        )
        return summary


async def sync_provider(
    fetcher: BaseFetcher,
    service: IngestionService,
    user_id: str,
    params: FetchParams | None = None,
) -> UpsertSummary:
    """Fetch one provider's events and upsert them for *user_id*."""
    events = await fetcher.fetch(params)
    return await service.upsert(user_id, events)
