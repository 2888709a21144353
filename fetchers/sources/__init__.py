"""Auto-import all provider fetchers to trigger @register decorators."""

from fetchers.sources import (  # noqa: F401
    eventbrite,
    google_calendar,
    ticketmaster,
)
