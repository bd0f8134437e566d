from __future__ import annotations

from typing import Any

from esper import World

from hovercard.components.bounds import Bounds
from hovercard.events.bus import EVENT_MOUSE_MOVE, EVENT_POINTER_OUT, EVENT_POINTER_OVER, EventBus


class PointerSystem:
    """Turns pointer coordinates into enter/leave events for on-screen entities."""

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus
        self._hovered: set[int] = set()
        self._mouse_x: float = 0.0
        self._mouse_y: float = 0.0
        self.event_bus.subscribe(EVENT_MOUSE_MOVE, self.on_mouse_move)

    @property
    def hovered(self) -> frozenset[int]:
        return frozenset(self._hovered)

    def on_mouse_move(self, sender, **payload: Any) -> None:
        x = payload.get("x")
        y = payload.get("y")
        if x is None or y is None:
            return
        try:
            self._mouse_x = float(x)
            self._mouse_y = float(y)
        except (TypeError, ValueError):
            return
        hits: dict[int, int] = {}
        for entity, bounds in self.world.get_component(Bounds):
            if bounds.width <= 0.0 or bounds.height <= 0.0:
                continue
            if bounds.contains(self._mouse_x, self._mouse_y):
                hits[entity] = bounds.layer
        # Anything under a higher layer is covered and not hovered.
        top = max(hits.values(), default=0)
        current = {entity for entity, layer in hits.items() if layer == top}
        left = sorted(self._hovered - current)
        entered = sorted(current - self._hovered)
        self._hovered = current
        # Leave events first so a hand-over between anchors reads as out-then-over.
        for entity in left:
            self.event_bus.emit(EVENT_POINTER_OUT, entity=entity)
        for entity in entered:
            self.event_bus.emit(EVENT_POINTER_OVER, entity=entity)
