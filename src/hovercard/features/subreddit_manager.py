from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Mapping, Sequence

from hovercard.errors import ToggleActionError

LOGGER = logging.getLogger("hovercard.features.subreddit_manager")

SubscribeAction = Callable[[str, bool], Awaitable[None]]


@dataclass(slots=True)
class Shortcut:
    subreddit: str
    display_name: str = ""


class SubredditManager:
    """Shortcut bar, subscriptions and multireddit membership.

    ``subscribe_action`` performs the remote subscribe/unsubscribe call; the
    local subscription set is updated only after it succeeds.
    """

    def __init__(
        self,
        shortcuts: Sequence[str] = (),
        *,
        subscriptions: Sequence[str] = (),
        multireddits: Mapping[str, Sequence[str]] | None = None,
        subscribe_action: SubscribeAction | None = None,
    ) -> None:
        self.shortcuts: list[Shortcut] = [Shortcut(name, name) for name in shortcuts]
        self.subscriptions: set[str] = {name.lower() for name in subscriptions}
        self.multireddits: dict[str, list[str]] = {
            multi: [name.lower() for name in members] for multi, members in (multireddits or {}).items()
        }
        self._subscribe_action = subscribe_action

    def list_shortcuts(self) -> Sequence[str]:
        return tuple(shortcut.subreddit for shortcut in self.shortcuts)

    def has_shortcut(self, subreddit: str) -> bool:
        lowered = subreddit.lower()
        return any(shortcut.subreddit.lower() == lowered for shortcut in self.shortcuts)

    def toggle_shortcut(self, subreddit: str) -> bool:
        lowered = subreddit.lower()
        for index, shortcut in enumerate(self.shortcuts):
            if shortcut.subreddit.lower() == lowered:
                del self.shortcuts[index]
                LOGGER.info("Removed shortcut for /r/%s", subreddit)
                return False
        self.shortcuts.append(Shortcut(lowered, subreddit))
        LOGGER.info("Added shortcut for /r/%s", subreddit)
        return True

    async def subscribe(self, fullname: str, subscribing: bool) -> None:
        if self._subscribe_action is not None:
            try:
                await self._subscribe_action(fullname, subscribing)
            except ToggleActionError:
                raise
            except Exception as exc:
                verb = "Subscribing to" if subscribing else "Unsubscribing from"
                raise ToggleActionError(f"{verb} {fullname} failed: {exc}") from exc
        key = fullname.lower()
        if subscribing:
            self.subscriptions.add(key)
        else:
            self.subscriptions.discard(key)

    async def multi_membership_counts(self, subreddit: str) -> str:
        lowered = subreddit.lower()
        count = sum(1 for members in self.multireddits.values() if lowered in members)
        if count == 0:
            return ""
        suffix = "multireddit" if count == 1 else "multireddits"
        return f"in {count} {suffix}"
