"""JSON fetching with cache-for hints on top of :class:`ResourceCache`."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Protocol
from urllib.parse import urljoin

import requests

from hovercard.cache.resource_cache import MISS, ResourceCache
from hovercard.constants import DEFAULT_BASE_URL
from hovercard.errors import FetchError
from hovercard.events.bus import EVENT_CACHE_INVALIDATED, EventBus

LOGGER = logging.getLogger("hovercard.net")


class Transport(Protocol):
    """Fetches and decodes a JSON document; raises FetchError on failure."""

    def __call__(self, url: str) -> Awaitable[Any]:
        ...


class RequestsTransport:
    """Blocking ``requests`` client run in a worker thread."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: requests.Session | None = None,
        timeout: float = 10.0,
        user_agent: str = "hovercard/0.1",
    ) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", user_agent)
        self._timeout = timeout

    def resolve(self, url: str) -> str:
        return urljoin(self.base_url, url.lstrip("/"))

    def get_json(self, url: str) -> Any:
        full_url = self.resolve(url)
        try:
            response = self._session.get(full_url, timeout=self._timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise FetchError(full_url, str(exc)) from exc
        except ValueError as exc:
            raise FetchError(full_url, f"invalid JSON: {exc}") from exc

    async def __call__(self, url: str) -> Any:
        return await asyncio.to_thread(self.get_json, url)

    def close(self) -> None:
        self._session.close()


class Ajax:
    """Fetches JSON documents, caching them per URL when asked to.

    ``fetch(url, cache_for=seconds)`` answers from the cache while the entry
    is fresh; otherwise it awaits the transport and stores the payload.
    ``invalidate(url)`` drops the cached response after a state-changing
    action.
    """

    def __init__(
        self,
        transport: Transport | Callable[[str], Awaitable[Any]],
        cache: ResourceCache | None = None,
        *,
        event_bus: EventBus | None = None,
    ) -> None:
        self._transport = transport
        self.cache = cache if cache is not None else ResourceCache()
        self._event_bus = event_bus

    async def fetch(self, url: str, *, cache_for: float | None = None) -> Any:
        if cache_for:
            cached = self.cache.get(url)
            if cached is not MISS:
                return cached
        try:
            payload = await self._transport(url)
        except FetchError:
            LOGGER.warning("Fetch failed for %s", url)
            raise
        except Exception as exc:
            LOGGER.warning("Fetch failed for %s: %s", url, exc)
            raise FetchError(url, str(exc)) from exc
        if cache_for:
            self.cache.put(url, payload, cache_for)
        return payload

    def invalidate(self, url: str) -> None:
        self.cache.invalidate(url)
        if self._event_bus is not None:
            self._event_bus.emit(EVENT_CACHE_INVALIDATED, key=url)


def about_url(subreddit: str) -> str:
    return f"/r/{subreddit.lower()}/about.json"


def payload_data(payload: Any) -> Mapping[str, Any]:
    if isinstance(payload, Mapping):
        data = payload.get("data")
        if isinstance(data, Mapping):
            return data
    return {}
