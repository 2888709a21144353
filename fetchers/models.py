"""Shared Pydantic models for the event aggregation pipeline."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class EventSource(str, Enum):
    GOOGLECAL = "googlecal"
    EVENTBRITE = "eventbrite"
    TICKETMASTER = "ticketmaster"
    SEATGEEK = "seatgeek"
    MANUAL = "manual"


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NormalizedEvent(CamelModel):
    """Provider-agnostic event record produced by every fetcher."""

    uid: str = ""
    source: EventSource
    title: str = ""
    description: str | None = None
    start_utc: str = ""
    end_utc: str | None = None
    venue_name: str | None = None
    address: str | None = None
    url: str | None = None
    last_seen_at_utc: str


class FetchParams(BaseModel):
    """Provider filters accepted by :meth:`BaseFetcher.fetch`."""

    city: str | None = None
    keyword: str | None = None
    # Bearer token for user-scoped providers (Google Calendar).
    access_token: str | None = None
