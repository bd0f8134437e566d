"""Selector set and local filter for subreddit links."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Sequence

from hovercard.components.anchor import Anchor

SUBREDDIT_PATH = re.compile(r"^/r/([\w.+-]+)/?", re.IGNORECASE)

_PLACEHOLDER_HREFS = {"", "#", "javascript:void(0)", "javascript:void(0);", "javascript:;"}


@dataclass(frozen=True, slots=True)
class LinkSelector:
    """Named predicate standing in for one CSS selector."""

    css: str
    matches: Callable[[Anchor], bool]


SUBREDDIT_CLASS = LinkSelector("a.subreddit", lambda a: a.has_class("subreddit"))
SEARCH_SUBREDDIT_LINK = LinkSelector("a.search-subreddit-link", lambda a: a.has_class("search-subreddit-link"))
MARKDOWN_DIRECT_LINK = LinkSelector('.md a[href^="/r/"]', lambda a: a.inside("md") and a.href.startswith("/r/"))
MARKDOWN_ANY_LINK = LinkSelector('.md a[href*="reddit.com/r/"]', lambda a: a.inside("md") and "reddit.com/r/" in a.href)


def build_link_selectors(*, require_direct_link: bool) -> tuple[LinkSelector, ...]:
    selectors = [SUBREDDIT_CLASS, SEARCH_SUBREDDIT_LINK, MARKDOWN_DIRECT_LINK]
    if not require_direct_link:
        selectors.append(MARKDOWN_ANY_LINK)
    return tuple(selectors)


def selector_text(selectors: Sequence[LinkSelector]) -> str:
    return ", ".join(selector.css for selector in selectors)


def matches_any(anchor: Anchor, selectors: Sequence[LinkSelector]) -> bool:
    return any(selector.matches(anchor) for selector in selectors)


def is_empty_link(anchor: Anchor) -> bool:
    href = anchor.href.strip().lower()
    return href in _PLACEHOLDER_HREFS or href.startswith("javascript:")


def is_local_subreddit_link(anchor: Anchor) -> bool:
    """Rejects placeholders, other hosts and ``self.`` post domains."""
    if is_empty_link(anchor):
        return False
    if not anchor.hostname.endswith(".reddit.com"):
        return False
    if anchor.text.startswith("self."):
        return False
    return True


def subreddit_from_path(pathname: str) -> str | None:
    match = SUBREDDIT_PATH.match(pathname)
    if not match:
        return None
    return match.group(1)
