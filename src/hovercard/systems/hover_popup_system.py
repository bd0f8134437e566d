"""Hover popup lifecycle: open delay, asynchronous population, fade-out."""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from esper import World

from hovercard.components.bounds import Bounds
from hovercard.components.populate_result import PopulateContent, PopulateError, PopulateResult
from hovercard.components.popup_body import PopupBody
from hovercard.components.popup_card import PopupCard
from hovercard.components.popup_phase import PopupPhase
from hovercard.components.popup_session import PopupSession
from hovercard.components.popup_state import PopupState
from hovercard.constants import DEFAULT_FADE_SPEED, DEFAULT_POPUP_WIDTH, LAYER_POPUP
from hovercard.errors import HovercardError
from hovercard.events.bus import (
    EVENT_POINTER_OUT,
    EVENT_POINTER_OVER,
    EVENT_POPUP_CLOSED,
    EVENT_POPUP_FADING,
    EVENT_POPUP_OPENING,
    EVENT_POPUP_POPULATING,
    EVENT_POPUP_SHOWN,
    EVENT_POPUP_STALE_DISCARDED,
    EVENT_POPUP_UPDATED,
    EVENT_TICK,
    EventBus,
)
from hovercard.ui.popup_layout import PopupLayoutEngine

LOGGER = logging.getLogger("hovercard.popup")

UpdateFn = Callable[[PopupBody], bool]
PopulateFn = Callable[[int, UpdateFn], Awaitable[PopulateResult]]

GENERIC_ERROR_MESSAGE = "Error loading popup content"

_LIVE_PHASES = (PopupPhase.POPULATING, PopupPhase.SHOWN, PopupPhase.FADING_OUT)


class HoverPopupSystem:
    """Owns the single popup session and drives it through its phases.

    Timers advance on ``tick`` events. Population runs as an asyncio task;
    its results, partial or final, are committed only while the session
    token that started it is still current. Tearing a session down
    invalidates the token, so late results are dropped without touching the
    popup.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        layout: PopupLayoutEngine | None = None,
        error_message: str = GENERIC_ERROR_MESSAGE,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self._loop = loop
        self.layout = layout or PopupLayoutEngine()
        self.error_message = error_message
        self._session: Optional[PopupSession] = None
        self._populate: Optional[PopulateFn] = None
        self._token_counter = 0
        self._current_token: Optional[int] = None
        self._task: Optional[asyncio.Task] = None
        self._hovering_anchor = False
        self._hovering_card = False
        self._resume_phase = PopupPhase.SHOWN
        self._state_entity: Optional[int] = None
        self._state = self._ensure_state()
        self._card_entity = self.world.create_entity(PopupCard(), Bounds(0.0, 0.0, 0.0, 0.0, LAYER_POPUP))
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_POINTER_OVER, self.on_pointer_over)
        self.event_bus.subscribe(EVENT_POINTER_OUT, self.on_pointer_out)

    def _ensure_state(self) -> PopupState:
        entries = list(self.world.get_component(PopupState))
        if entries:
            self._state_entity, state = entries[0]
            return state
        self._state_entity = self.world.create_entity(PopupState())
        return self.world.component_for_entity(self._state_entity, PopupState)

    @property
    def state(self) -> PopupState:
        return self._state

    @property
    def session(self) -> PopupSession | None:
        return self._session

    @property
    def phase(self) -> PopupPhase:
        return self._session.phase if self._session is not None else PopupPhase.IDLE

    @property
    def current_token(self) -> int | None:
        return self._current_token

    @property
    def card_entity(self) -> int:
        return self._card_entity

    # ------------------------------------------------------------------
    # Session control
    # ------------------------------------------------------------------
    def begin(
        self,
        anchor_entity: int,
        populate: PopulateFn,
        *,
        open_delay: float,
        fade_delay: float,
        fade_speed: float = DEFAULT_FADE_SPEED,
        width: float = DEFAULT_POPUP_WIDTH,
    ) -> int:
        """Start (or keep) a session for ``anchor_entity`` and return its token."""
        session = self._session
        if session is not None and session.anchor_entity == anchor_entity:
            self._hovering_anchor = True
            if session.phase == PopupPhase.FADING_OUT:
                self._cancel_fade()
            return session.token
        if session is not None:
            self._teardown("superseded")

        self._token_counter += 1
        token = self._token_counter
        self._current_token = token
        self._session = PopupSession(
            anchor_entity=anchor_entity,
            token=token,
            open_delay=max(0.0, float(open_delay)),
            fade_delay=max(0.0, float(fade_delay)),
            fade_speed=max(0.0, float(fade_speed)),
            width=float(width),
        )
        self._populate = populate
        self._hovering_anchor = True
        self._hovering_card = False
        self._sync_state()
        LOGGER.debug("Popup session %d opening for anchor %d", token, anchor_entity)
        self.event_bus.emit(EVENT_POPUP_OPENING, anchor_entity=anchor_entity, token=token)
        if self._session.open_delay <= 0.0:
            self._start_population()
        return token

    def close(self, reason: str = "closed") -> None:
        self._teardown(reason)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def on_tick(self, sender, **payload):
        session = self._session
        if session is None:
            return
        dt = payload.get("dt", 1 / 60)
        try:
            dt_val = float(dt)
        except (TypeError, ValueError):
            dt_val = 1 / 60
        if session.phase == PopupPhase.OPENING:
            session.elapsed += dt_val
            if session.elapsed >= session.open_delay:
                self._start_population()
        elif session.phase == PopupPhase.FADING_OUT:
            session.elapsed += dt_val
            if session.elapsed >= session.fade_delay:
                self._teardown("faded")
                return
            if session.fade_speed > 0.0:
                self._state.alpha = max(0.0, 1.0 - session.elapsed / session.fade_speed)
            else:
                self._state.alpha = 0.0

    def on_pointer_over(self, sender, **payload):
        session = self._session
        entity = payload.get("entity")
        if session is None or entity is None:
            return
        if entity == session.anchor_entity:
            self._hovering_anchor = True
        elif entity == self._card_entity and self._state.visible:
            self._hovering_card = True
        else:
            return
        if session.phase == PopupPhase.FADING_OUT:
            self._cancel_fade()

    def on_pointer_out(self, sender, **payload):
        session = self._session
        entity = payload.get("entity")
        if session is None or entity is None:
            return
        if entity == session.anchor_entity:
            self._hovering_anchor = False
        elif entity == self._card_entity:
            self._hovering_card = False
        else:
            return
        if self._hovering_anchor or self._hovering_card:
            return
        if session.phase == PopupPhase.OPENING:
            # Left before the open delay elapsed; nothing was loaded.
            self._teardown("left_early")
        elif session.phase in (PopupPhase.POPULATING, PopupPhase.SHOWN):
            self._start_fade()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def _start_population(self) -> None:
        session = self._session
        populate = self._populate
        if session is None or populate is None or session.populate_invoked:
            return
        session.phase = PopupPhase.POPULATING
        session.elapsed = 0.0
        session.populate_invoked = True
        self._sync_state()
        token = session.token
        LOGGER.debug("Popup session %d populating", token)
        self.event_bus.emit(EVENT_POPUP_POPULATING, anchor_entity=session.anchor_entity, token=token)
        loop = self._loop or asyncio.get_running_loop()
        self._task = loop.create_task(self._run_population(token, session.anchor_entity, populate))

    async def _run_population(self, token: int, anchor_entity: int, populate: PopulateFn) -> None:
        try:
            result = await populate(anchor_entity, partial(self._apply_update, token))
        except asyncio.CancelledError:
            raise
        except HovercardError as exc:
            LOGGER.warning("Popup session %d population failed: %s", token, exc)
            result = PopulateError(self.error_message)
        except Exception:
            LOGGER.exception("Popup session %d population raised", token)
            result = PopulateError(self.error_message)
        self._commit(token, result)

    def _apply_update(self, token: int, body: PopupBody) -> bool:
        """Partial body replacement; refused once the token is stale."""
        session = self._session
        if session is None or token != self._current_token or session.phase not in _LIVE_PHASES:
            LOGGER.debug("Dropping update for stale popup session %d", token)
            self._delete_toggles(body.owned_toggles(), keep=())
            return False
        self._replace_body(session, body)
        self._sync_state()
        self.event_bus.emit(
            EVENT_POPUP_UPDATED,
            anchor_entity=session.anchor_entity,
            token=token,
            partial=session.phase == PopupPhase.POPULATING,
        )
        return True

    def _commit(self, token: int, result: PopulateResult) -> None:
        session = self._session
        if session is None or token != self._current_token:
            LOGGER.debug("Discarding stale population result for session %d", token)
            if isinstance(result, PopulateContent):
                self._delete_toggles(result.body.owned_toggles(), keep=())
            self.event_bus.emit(EVENT_POPUP_STALE_DISCARDED, token=token, current_token=self._current_token)
            return
        if isinstance(result, PopulateError):
            session.error = result.message
            if session.body is not None:
                # Keep the header; the error replaces the detail content.
                self._delete_toggles(session.body.toggle_entities, keep=())
                session.body.toggle_entities = []
                session.body.rows = []
        else:
            session.error = None
            self._replace_body(session, result.body)
        if session.phase == PopupPhase.POPULATING:
            session.phase = PopupPhase.SHOWN
        elif session.phase == PopupPhase.FADING_OUT:
            self._resume_phase = PopupPhase.SHOWN
        self._sync_state()
        LOGGER.debug("Popup session %d shown (error=%s)", token, session.error)
        self.event_bus.emit(EVENT_POPUP_SHOWN, anchor_entity=session.anchor_entity, token=token, error=session.error)

    def _start_fade(self) -> None:
        session = self._session
        if session is None:
            return
        self._resume_phase = PopupPhase.SHOWN if session.phase == PopupPhase.SHOWN else PopupPhase.POPULATING
        session.phase = PopupPhase.FADING_OUT
        session.elapsed = 0.0
        self._sync_state()
        LOGGER.debug("Popup session %d fading", session.token)
        self.event_bus.emit(EVENT_POPUP_FADING, anchor_entity=session.anchor_entity, token=session.token)
        if session.fade_delay <= 0.0:
            self._teardown("faded")

    def _cancel_fade(self) -> None:
        session = self._session
        if session is None:
            return
        session.phase = self._resume_phase
        session.elapsed = 0.0
        self._state.alpha = 1.0
        self._sync_state()
        LOGGER.debug("Popup session %d re-engaged", session.token)

    def _teardown(self, reason: str) -> None:
        session = self._session
        if session is None:
            return
        self._current_token = None
        self._session = None
        self._populate = None
        self._task = None
        self._hovering_anchor = False
        self._hovering_card = False
        if session.body is not None:
            self._delete_toggles(session.body.owned_toggles(), keep=())
        self._sync_state()
        LOGGER.debug("Popup session %d closed (%s)", session.token, reason)
        self.event_bus.emit(EVENT_POPUP_CLOSED, anchor_entity=session.anchor_entity, token=session.token, reason=reason)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _replace_body(self, session: PopupSession, body: PopupBody) -> None:
        previous = session.body
        if previous is not None and previous is not body:
            self._delete_toggles(previous.owned_toggles(), keep=body.owned_toggles())
        session.body = body

    def _delete_toggles(self, entities: Any, *, keep: Any) -> None:
        keep_set = set(keep)
        for entity in entities:
            if entity in keep_set:
                continue
            if self.world.entity_exists(entity):
                self.world.delete_entity(entity, immediate=True)

    def _sync_state(self) -> None:
        state = self._state
        session = self._session
        if session is None:
            state.visible = False
            state.phase = PopupPhase.IDLE
            state.anchor_entity = None
            state.token = None
            state.body = None
            state.error = None
            state.alpha = 1.0
            state.x = state.y = state.width = state.height = 0.0
            self.layout.clear(self.world, self._card_entity)
            return
        state.phase = session.phase
        state.anchor_entity = session.anchor_entity
        state.token = session.token
        state.body = session.body
        state.error = session.error
        state.visible = session.phase in _LIVE_PHASES
        if session.phase != PopupPhase.FADING_OUT:
            state.alpha = 1.0
        if state.visible:
            self.layout.apply(self.world, state, self._card_entity, width=session.width)
        else:
            self.layout.clear(self.world, self._card_entity)
