from __future__ import annotations

import asyncio
from typing import Any, Callable, Sequence

from esper import World

from hovercard.components.anchor import Anchor
from hovercard.components.bounds import Bounds
from hovercard.errors import FetchError


class FakeClock:
    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def advance(self, amount: float) -> None:
        self.value += amount

    def __call__(self) -> float:
        return self.value


class FakeTransport:
    """Answers JSON fetches from a table of per-URL responses.

    A list value is consumed one response per call, repeating the last one;
    an exception instance is raised instead of returned.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[str] = []

    async def __call__(self, url: str) -> Any:
        self.calls.append(url)
        if url not in self.responses:
            raise FetchError(url, "404 Not Found")
        response = self.responses[url]
        if isinstance(response, list):
            response = response.pop(0) if len(response) > 1 else response[0]
        if isinstance(response, BaseException):
            raise response
        return response


def subreddit_payload(
    *,
    display_name: str = "test",
    created_utc: float = 1_000_000_000,
    subscribers: int = 42,
    title: str = "Test",
    over18: bool = False,
    user_is_subscriber: bool = False,
    name: str = "t5_2qh23",
) -> dict[str, Any]:
    return {
        "kind": "t5",
        "data": {
            "display_name": display_name,
            "created_utc": created_utc,
            "subscribers": subscribers,
            "title": title,
            "over18": over18,
            "user_is_subscriber": user_is_subscriber,
            "name": name,
        },
    }


def create_link(
    world: World,
    href: str = "/r/test",
    *,
    text: str = "/r/test",
    classes: Sequence[str] = ("subreddit",),
    bounds: Bounds | None = None,
) -> int:
    components: list[object] = [Anchor(href=href, text=text, classes=tuple(classes))]
    if bounds is not None:
        components.append(bounds)
    return world.create_entity(*components)


def record(bus, name: str) -> list[dict[str, Any]]:
    received: list[dict[str, Any]] = []

    def handler(sender, **payload):
        received.append(payload)

    bus.subscribe(name, handler)
    return received


async def drain(steps: int = 10) -> None:
    """Let pending tasks on the running loop advance."""
    for _ in range(steps):
        await asyncio.sleep(0)


def run(coro_fn: Callable[[], Any]) -> Any:
    return asyncio.run(coro_fn())
