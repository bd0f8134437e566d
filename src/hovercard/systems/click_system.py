from __future__ import annotations

from typing import Any

from esper import World

from hovercard.components.bounds import Bounds
from hovercard.components.toggle_state import ToggleState
from hovercard.constants import MOUSE_BUTTON_LEFT
from hovercard.events.bus import (
    EVENT_MOUSE_PRESS_RAW,
    EVENT_TOGGLE_CLICK,
    EventBus,
)
from hovercard.utils.click_throttle import ClickThrottle


class ClickSystem:
    """Bridges raw mouse presses to toggle clicks, dropping rapid repeats."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        throttle: ClickThrottle | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self._throttle = throttle or ClickThrottle()
        self.event_bus.subscribe(EVENT_MOUSE_PRESS_RAW, self._on_mouse_press_raw)

    @property
    def throttle(self) -> ClickThrottle:
        return self._throttle

    def toggle_at_point(self, x: float, y: float) -> int | None:
        for entity, (toggle, bounds) in self.world.get_components(ToggleState, Bounds):
            if not toggle.visible or bounds.width <= 0.0:
                continue
            if bounds.contains(x, y):
                return entity
        return None

    def _on_mouse_press_raw(self, sender: Any, **payload: Any) -> None:
        x = payload.get("x")
        y = payload.get("y")
        button = payload.get("button")
        if x is None or y is None or button is None:
            return
        try:
            xf = float(x)
            yf = float(y)
            button_int = int(button)
        except (TypeError, ValueError):
            return
        if button_int != MOUSE_BUTTON_LEFT:
            return
        toggle_entity = self.toggle_at_point(xf, yf)
        if toggle_entity is None or not self._throttle.allow(toggle_entity):
            return
        self.event_bus.emit(EVENT_TOGGLE_CLICK, toggle_entity=toggle_entity)
