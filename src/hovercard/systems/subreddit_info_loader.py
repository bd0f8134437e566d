"""Populates subreddit hover popups from ``/r/<name>/about.json``."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Mapping

from esper import World

from hovercard.components.anchor import Anchor
from hovercard.components.populate_result import PopulateContent, PopulateError, PopulateResult
from hovercard.components.popup_body import DetailRow, PopupBody, PopupHeader
from hovercard.config import HoverOptions
from hovercard.constants import (
    FEATURE_DASHBOARD,
    FEATURE_FILTER,
    FEATURE_SUBREDDIT_MANAGER,
    SUBREDDIT_KIND,
)
from hovercard.errors import FetchError, InvalidTarget, NotFound
from hovercard.factories.toggles import (
    TOGGLE_DASHBOARD,
    TOGGLE_FILTER,
    TOGGLE_SHORTCUT,
    TOGGLE_SUBSCRIBE,
    render_toggle,
    toggle_state,
)
from hovercard.features.base import (
    CapabilityQuery,
    DashboardFacade,
    FilterFacade,
    SubredditManagerFacade,
)
from hovercard.net.ajax import Ajax, about_url, payload_data
from hovercard.systems.hover_popup_system import UpdateFn
from hovercard.utils.formatting import format_date, format_date_diff, format_number, from_timestamp
from hovercard.utils.link_selectors import subreddit_from_path

LOGGER = logging.getLogger("hovercard.loader")

LOAD_ERROR_MESSAGE = "Error loading subreddit info"
NOT_FOUND_MESSAGE = "Subreddit not found"
INVALID_TARGET_MESSAGE = "Invalid subreddit link"

BODY_CLASS = "subredditInfoToolTip"


class SubredditInfoLoader:
    """Content loader for subreddit links.

    The header is handed to ``update`` before the fetch starts. The final
    body lists the subreddit details and, in fixed order, the shortcut,
    dashboard and filter toggles of whichever features are active when the
    body is composed. For signed-in viewers the subscribe toggle is revealed
    by a background task once membership counts are known.
    """

    def __init__(
        self,
        world: World,
        ajax: Ajax,
        capabilities: CapabilityQuery,
        *,
        subreddit_manager: SubredditManagerFacade | None = None,
        dashboard: DashboardFacade | None = None,
        filters: FilterFacade | None = None,
        current_user: Callable[[], str | None] | None = None,
        options: HoverOptions | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.world = world
        self.ajax = ajax
        self.capabilities = capabilities
        self.subreddit_manager = subreddit_manager
        self.dashboard = dashboard
        self.filters = filters
        self._current_user = current_user or (lambda: None)
        self.options = options or HoverOptions()
        self._now = now
        self._background: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------
    def resolve_subreddit(self, anchor_entity: int) -> str:
        try:
            anchor = self.world.component_for_entity(anchor_entity, Anchor)
        except KeyError as exc:
            raise InvalidTarget(f"<entity {anchor_entity}>") from exc
        subreddit = subreddit_from_path(anchor.pathname)
        if not subreddit:
            raise InvalidTarget(anchor.href)
        return subreddit

    async def populate(self, anchor_entity: int, update: UpdateFn) -> PopulateResult:
        try:
            subreddit = self.resolve_subreddit(anchor_entity)
        except InvalidTarget as exc:
            LOGGER.info("%s", exc)
            return PopulateError(INVALID_TARGET_MESSAGE)

        logged_in = bool(self._current_user())
        header = PopupHeader(link_text=f"/r/{subreddit}", link_href=f"/r/{subreddit}")
        if logged_in:
            header.subscribe_toggle = render_toggle(self.world, TOGGLE_SUBSCRIBE, subreddit, False, visible=False)
        update(PopupBody(header=header))

        try:
            data = await self.fetch_about(subreddit)
        except FetchError as exc:
            LOGGER.warning("Loading /r/%s failed: %s", subreddit, exc.reason)
            return PopulateError(LOAD_ERROR_MESSAGE)
        except NotFound:
            return PopulateError(NOT_FOUND_MESSAGE)

        body = self.compose_body(header, data)
        if logged_in and header.subscribe_toggle is not None:
            self._spawn(self._reveal_subscription(body, data, update))
        return PopulateContent(body)

    async def fetch_about(self, subreddit: str) -> Mapping[str, Any]:
        payload = await self.ajax.fetch(about_url(subreddit), cache_for=self.options.cache_ttl)
        kind = payload.get("kind") if isinstance(payload, Mapping) else None
        if kind != SUBREDDIT_KIND:
            raise NotFound(f"/r/{subreddit}", kind)
        return payload_data(payload)

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------
    def compose_body(self, header: PopupHeader, data: Mapping[str, Any]) -> PopupBody:
        created = from_timestamp(data.get("created_utc") or 0)
        now = self._now() if self._now is not None else None
        body = PopupBody(
            header=header,
            rows=[
                DetailRow("Subreddit created", f"{format_date(created)} ({format_date_diff(created, now)})"),
                DetailRow("Subscribers", format_number(data.get("subscribers"))),
                DetailRow("Title", str(data.get("title") or "")),
                DetailRow("Over 18", "Yes" if data.get("over18") else "No"),
            ],
            css_class=BODY_CLASS,
        )
        display_name = str(data.get("display_name") or header.link_text[3:])
        name = display_name.lower()

        if self.subreddit_manager is not None and self.capabilities.status(FEATURE_SUBREDDIT_MANAGER).is_running:
            shortcuts = {shortcut.lower() for shortcut in self.subreddit_manager.list_shortcuts()}
            body.toggle_entities.append(render_toggle(self.world, TOGGLE_SHORTCUT, name, name in shortcuts))

        if self.dashboard is not None and self.capabilities.status(FEATURE_DASHBOARD).is_enabled:
            exists = self.dashboard.widget_exists(display_name)
            body.toggle_entities.append(render_toggle(self.world, TOGGLE_DASHBOARD, name, exists))

        if self.filters is not None and self.capabilities.status(FEATURE_FILTER).is_enabled:
            filtered = any(entry and entry.lower() == name for entry in self.filters.current_filters())
            body.toggle_entities.append(render_toggle(self.world, TOGGLE_FILTER, name, filtered))

        subscribe = toggle_state(self.world, header.subscribe_toggle) if header.subscribe_toggle is not None else None
        if subscribe is not None:
            subscribe.resource = name
            subscribe.set_state(bool(data.get("user_is_subscriber")))
        return body

    async def _reveal_subscription(self, body: PopupBody, data: Mapping[str, Any], update: UpdateFn) -> None:
        header = body.header
        if self.subreddit_manager is not None and self.capabilities.status(FEATURE_SUBREDDIT_MANAGER).is_enabled:
            display_name = str(data.get("display_name") or header.link_text[3:])
            try:
                header.multi_counts = await self.subreddit_manager.multi_membership_counts(display_name)
            except Exception as exc:
                LOGGER.warning("Multireddit counts for /r/%s unavailable: %s", display_name, exc)
        if header.subscribe_toggle is None:
            return
        subscribe = toggle_state(self.world, header.subscribe_toggle)
        if subscribe is None:
            return
        subscribe.visible = True
        update(body)

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
