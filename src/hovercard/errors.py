"""Exception types raised across the hover popup pipeline."""
from __future__ import annotations


class HovercardError(Exception):
    """Base class for errors raised by hovercard components."""


class InvalidTarget(HovercardError):
    """The hovered anchor does not yield a usable resource identifier."""

    def __init__(self, href: str) -> None:
        super().__init__(f"Cannot resolve a subreddit from '{href}'")
        self.href = href


class FetchError(HovercardError):
    """Transport, HTTP or decoding failure while fetching a resource."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Fetching {url} failed: {reason}")
        self.url = url
        self.reason = reason


class NotFound(HovercardError):
    """The identifier is valid but the resource is absent or of the wrong kind."""

    def __init__(self, resource: str, kind: str | None = None) -> None:
        super().__init__(f"{resource} not found (kind={kind!r})")
        self.resource = resource
        self.kind = kind


class ToggleActionError(HovercardError):
    """A collaborator rejected a toggle action."""
