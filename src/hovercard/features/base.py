from __future__ import annotations

from typing import Awaitable, Protocol, Sequence

from hovercard.components.capability import CapabilityStatus


class CapabilityQuery(Protocol):
    """Answers whether an optional feature is enabled and running."""

    def status(self, feature: str) -> CapabilityStatus:
        ...


class SubredditManagerFacade(Protocol):
    def list_shortcuts(self) -> Sequence[str]:
        ...

    def toggle_shortcut(self, subreddit: str) -> bool:
        ...

    def subscribe(self, fullname: str, subscribing: bool) -> Awaitable[None]:
        """Raises ToggleActionError when the remote call is rejected."""

    def multi_membership_counts(self, subreddit: str) -> Awaitable[str]:
        ...


class DashboardFacade(Protocol):
    def widget_exists(self, subreddit: str) -> bool:
        ...

    def toggle_dashboard(self, subreddit: str) -> bool:
        ...


class FilterFacade(Protocol):
    def current_filters(self) -> Sequence[str]:
        ...

    def toggle_filter(self, subreddit: str) -> bool:
        ...


class CurrentUser(Protocol):
    def __call__(self) -> str | None:
        ...
