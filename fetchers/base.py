"""Abstract base fetcher with httpx, rate limiting, retries, and UA rotation."""

from __future__ import annotations

import abc
import asyncio
import importlib
import json
import logging
import random
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

import httpx

from fetchers.config import Settings, get_settings
from fetchers.models import EventSource, FetchParams, NormalizedEvent

logger = logging.getLogger(__name__)

_USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_5) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/18.0 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64; rv:132.0) Gecko/20100101 Firefox/132.0",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:132.0) Gecko/20100101 Firefox/132.0",
]

#: Status codes worth retrying; anything else non-2xx fails immediately.
_RETRYABLE_STATUS = {429, 500, 502, 503, 504}

#: Sources that are accepted by validation but have no adapter yet.
VALIDATION_ONLY_SOURCES = frozenset({EventSource.SEATGEEK, EventSource.MANUAL})


class FetchError(RuntimeError):
    """Raised inside a fetcher when a provider request cannot be completed."""


def utc_now_iso() -> str:
    """Wall-clock timestamp used as ``lastSeenAtUtc`` for a fetch batch."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class BaseFetcher(abc.ABC):
    """Abstract base fetcher that all provider adapters must subclass."""

    #: Source identifier this adapter produces.
    name: EventSource | None = None

    #: Minimum seconds between requests.
    rate_limit: float = 1.0

    #: Backoff factor for retries (seconds multiplied by attempt number).
    retry_backoff: float = 1.0

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not self.name:
            raise ValueError("Fetcher subclass must set 'name'")
        self.settings = settings or get_settings()
        self.max_retries = max(1, self.settings.FETCH_MAX_RETRIES)
        self._client = client
        self._owns_client = client is None
        self._last_request: float = 0.0

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": random.choice(_USER_AGENTS)},
                follow_redirects=True,
                timeout=self.settings.HTTP_TIMEOUT,
            )
            self._owns_client = True
        return self._client

    async def _rate_limit_wait(self) -> None:
        now = asyncio.get_running_loop().time()
        elapsed = now - self._last_request
        if elapsed < self.rate_limit:
            await asyncio.sleep(self.rate_limit - elapsed)
        self._last_request = asyncio.get_running_loop().time()

    async def get(self, url: str, **kwargs: object) -> httpx.Response:
        """GET *url* with rate limiting, retries, and UA rotation."""
        client = await self._ensure_client()
        last_exc: Exception | None = None
        for attempt in range(1, self.max_retries + 1):
            await self._rate_limit_wait()
            try:
                resp = await client.get(url, **kwargs)  # type: ignore[arg-type]
                resp.raise_for_status()
                return resp
            except httpx.HTTPStatusError as exc:
                last_exc = exc
                if exc.response.status_code not in _RETRYABLE_STATUS:
                    raise FetchError(
                        f"[{self.name.value}] request failed with status "
                        f"{exc.response.status_code}"
                    ) from exc
            except httpx.TransportError as exc:
                last_exc = exc
            if attempt < self.max_retries:
                logger.debug(
                    "[%s] attempt %d/%d failed, retrying",
                    self.name.value,
                    attempt,
                    self.max_retries,
                )
                await asyncio.sleep(self.retry_backoff * attempt)
                # Rotate UA on retry
                client.headers["User-Agent"] = random.choice(_USER_AGENTS)
        raise FetchError(
            f"[{self.name.value}] request failed after {self.max_retries} attempts"
        ) from last_exc

    async def aclose(self) -> None:
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Fetch contract
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def fetch_events(self, params: FetchParams) -> list[NormalizedEvent]:
        """Fetch provider data and map it to normalized events."""

    async def fetch(self, params: FetchParams | None = None) -> list[NormalizedEvent]:
        """Return normalized events, or an empty list on any failure.

        An empty result means "no results or fetch failure"; callers must not
        read it as proof that the provider has no events.
        """
        params = params or FetchParams()
        try:
            events = await self.fetch_events(params)
        except FetchError as exc:
            logger.error("%s", exc)
            return []
        except Exception:
            logger.exception("[%s] unexpected error while fetching events", self.name.value)
            return []
        finally:
            await self.aclose()
        logger.info("[%s] fetched %d event(s)", self.name.value, len(events))
        return events


def write_events(events: Sequence[NormalizedEvent], path: Path) -> Path:
    """Persist *events* as a JSON array using the wire (camelCase) field names."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(
            [e.model_dump(mode="json", by_alias=True) for e in events],
            indent=2,
        ),
        encoding="utf-8",
    )
    return path


# ------------------------------------------------------------------
# Registry
# ------------------------------------------------------------------

_registry: dict[EventSource, type[BaseFetcher]] = {}


def register(cls: type[BaseFetcher]) -> type[BaseFetcher]:
    """Class decorator that registers a fetcher by its *name*."""
    _registry[cls.name] = cls
    return cls


def _load_sources() -> None:
    # Importing the package triggers the @register decorators.
    importlib.import_module("fetchers.sources")


def get_fetchers() -> dict[EventSource, type[BaseFetcher]]:
    """Return a copy of the fetcher registry."""
    _load_sources()
    return dict(_registry)


def get_fetcher(name: str | EventSource) -> type[BaseFetcher]:
    """Look up a registered fetcher by source name."""
    _load_sources()
    try:
        return _registry[EventSource(name)]
    except (KeyError, ValueError):
        available = sorted(s.value for s in _registry)
        raise KeyError(f"Unknown fetcher: {name!r}. Available: {available}")


def check_registry() -> None:
    """Ensure every source has an adapter or is marked validation-only."""
    registry = get_fetchers()
    missing = [
        source.value
        for source in EventSource
        if source not in registry and source not in VALIDATION_ONLY_SOURCES
    ]
    if missing:
        raise RuntimeError(f"Event sources without a registered fetcher: {missing}")


async def fetch_all(
    sources: Sequence[str] | None = None,
    params: FetchParams | None = None,
    settings: Settings | None = None,
) -> list[NormalizedEvent]:
    """Run fetchers (all or a subset) one after another and combine events."""
    registry = get_fetchers()
    names = list(sources) if sources else [s.value for s in registry]
    all_events: list[NormalizedEvent] = []
    for name in names:
        fetcher = get_fetcher(name)(settings)
        all_events.extend(await fetcher.fetch(params))
    return all_events
