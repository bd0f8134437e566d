from __future__ import annotations

import logging
from typing import Sequence

LOGGER = logging.getLogger("hovercard.features.filters")


class SubredditFilters:
    """Subreddits hidden from /r/all and /domain/* listings."""

    def __init__(self, subreddits: Sequence[str] = ()) -> None:
        self._filters: list[str] = [name for name in subreddits if name]

    def current_filters(self) -> Sequence[str]:
        return tuple(self._filters)

    def is_filtered(self, subreddit: str) -> bool:
        lowered = subreddit.lower()
        return any(name.lower() == lowered for name in self._filters)

    def toggle_filter(self, subreddit: str) -> bool:
        lowered = subreddit.lower()
        for name in list(self._filters):
            if name.lower() == lowered:
                self._filters.remove(name)
                LOGGER.info("Stopped filtering /r/%s", lowered)
                return False
        self._filters.append(lowered)
        LOGGER.info("Filtering /r/%s", lowered)
        return True
