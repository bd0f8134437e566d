from __future__ import annotations

import logging

LOGGER = logging.getLogger("hovercard.features.dashboard")


class Dashboard:
    """Subreddit widgets pinned to the dashboard."""

    def __init__(self, widgets: tuple[str, ...] | list[str] = ()) -> None:
        self._widgets: list[str] = [name.lower() for name in widgets]

    @property
    def widgets(self) -> tuple[str, ...]:
        return tuple(self._widgets)

    def widget_exists(self, subreddit: str) -> bool:
        return subreddit.lower() in self._widgets

    def toggle_dashboard(self, subreddit: str) -> bool:
        lowered = subreddit.lower()
        if lowered in self._widgets:
            self._widgets.remove(lowered)
            LOGGER.info("Removed /r/%s from the dashboard", lowered)
            return False
        self._widgets.append(lowered)
        LOGGER.info("Added /r/%s to the dashboard", lowered)
        return True
