from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict

from esper import World

from hovercard.components.toggle_state import ToggleState
from hovercard.constants import DEFAULT_CACHE_TTL
from hovercard.errors import FetchError, ToggleActionError
from hovercard.events.bus import EVENT_TOGGLE_CHANGED, EVENT_TOGGLE_CLICK, EventBus
from hovercard.factories.toggles import (
    TOGGLE_DASHBOARD,
    TOGGLE_FILTER,
    TOGGLE_SHORTCUT,
    TOGGLE_SUBSCRIBE,
    toggle_state,
)
from hovercard.features.base import DashboardFacade, FilterFacade, SubredditManagerFacade
from hovercard.net.ajax import Ajax, about_url, payload_data

LOGGER = logging.getLogger("hovercard.toggles")

ToggleHandler = Callable[[int, ToggleState], None]


class ToggleSystem:
    """Dispatches toggle clicks to the collaborator owning each resource.

    Shortcut, dashboard and filter toggles take their new state from the
    collaborator's return value. The subscribe toggle flips optimistically,
    performs the action, drops the cached subreddit info and then adopts
    whatever the refreshed info reports.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        ajax: Ajax | None = None,
        subreddit_manager: SubredditManagerFacade | None = None,
        dashboard: DashboardFacade | None = None,
        filters: FilterFacade | None = None,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.ajax = ajax
        self.subreddit_manager = subreddit_manager
        self.dashboard = dashboard
        self.filters = filters
        self.cache_ttl = cache_ttl
        self._loop = loop
        self._handlers: Dict[str, ToggleHandler] = {}
        self._pending: set[asyncio.Task] = set()
        self.on_click(TOGGLE_SHORTCUT, self._toggle_shortcut)
        self.on_click(TOGGLE_DASHBOARD, self._toggle_dashboard)
        self.on_click(TOGGLE_FILTER, self._toggle_filter)
        self.on_click(TOGGLE_SUBSCRIBE, self._start_subscription_toggle)
        self.event_bus.subscribe(EVENT_TOGGLE_CLICK, self.on_toggle_click)

    def on_click(self, kind: str, handler: ToggleHandler) -> None:
        self._handlers[kind] = handler

    def set_state(self, toggle_entity: int, active: bool) -> ToggleState | None:
        state = toggle_state(self.world, toggle_entity)
        if state is None:
            return None
        state.set_state(active)
        self.event_bus.emit(
            EVENT_TOGGLE_CHANGED,
            toggle_entity=toggle_entity,
            kind=state.kind,
            resource=state.resource,
            active=state.active,
        )
        return state

    def on_toggle_click(self, sender, **payload: Any) -> None:
        entity = payload.get("toggle_entity")
        if entity is None:
            return
        state = toggle_state(self.world, int(entity))
        if state is None or not state.visible or state.pending:
            return
        handler = self._handlers.get(state.kind)
        if handler is None:
            LOGGER.debug("No handler for toggle kind %s", state.kind)
            return
        handler(int(entity), state)

    # ------------------------------------------------------------------
    # Synchronous toggles
    # ------------------------------------------------------------------
    def _toggle_shortcut(self, entity: int, state: ToggleState) -> None:
        if self.subreddit_manager is None:
            return
        self.set_state(entity, self.subreddit_manager.toggle_shortcut(state.resource))

    def _toggle_dashboard(self, entity: int, state: ToggleState) -> None:
        if self.dashboard is None:
            return
        self.set_state(entity, self.dashboard.toggle_dashboard(state.resource))

    def _toggle_filter(self, entity: int, state: ToggleState) -> None:
        if self.filters is None:
            return
        self.set_state(entity, self.filters.toggle_filter(state.resource))

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------
    def _start_subscription_toggle(self, entity: int, state: ToggleState) -> None:
        if self.subreddit_manager is None or self.ajax is None:
            return
        loop = self._loop or asyncio.get_running_loop()
        task = loop.create_task(self.toggle_subscription(entity))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def toggle_subscription(self, entity: int) -> bool | None:
        """Flip the subscription for ``entity`` and return the reconciled state."""
        state = toggle_state(self.world, entity)
        if state is None or self.subreddit_manager is None or self.ajax is None:
            return None
        url = about_url(state.resource)
        state.pending = True
        try:
            try:
                current = payload_data(await self.ajax.fetch(url, cache_for=self.cache_ttl))
            except FetchError as exc:
                LOGGER.warning("Cannot read subscription for /r/%s: %s", state.resource, exc.reason)
                return None
            previous = bool(current.get("user_is_subscriber"))
            subscribing = not previous
            self.set_state(entity, subscribing)
            fullname = str(current.get("name") or state.resource)
            try:
                await self.subreddit_manager.subscribe(fullname, subscribing)
            except ToggleActionError as exc:
                LOGGER.warning(
                    "%s /r/%s failed, reverting: %s",
                    "Subscribing to" if subscribing else "Unsubscribing from",
                    state.resource,
                    exc,
                )
                self.set_state(entity, previous)
                return previous
            finally:
                self.ajax.invalidate(url)

            try:
                fresh = payload_data(await self.ajax.fetch(url, cache_for=self.cache_ttl))
            except FetchError as exc:
                LOGGER.warning("Could not confirm subscription for /r/%s: %s", state.resource, exc.reason)
                return subscribing
            truth = bool(fresh.get("user_is_subscriber"))
            if truth != subscribing:
                LOGGER.info("Subscription for /r/%s reconciled to %s", state.resource, truth)
                self.set_state(entity, truth)
            return truth
        finally:
            state.pending = False
