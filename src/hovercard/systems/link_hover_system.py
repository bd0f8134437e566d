from __future__ import annotations

import logging
from typing import Any

from esper import World

from hovercard.components.anchor import Anchor
from hovercard.config import HoverOptions
from hovercard.events.bus import EVENT_POINTER_OVER, EventBus
from hovercard.systems.hover_popup_system import HoverPopupSystem, PopulateFn
from hovercard.utils.link_selectors import (
    build_link_selectors,
    is_local_subreddit_link,
    matches_any,
    selector_text,
)

LOGGER = logging.getLogger("hovercard.links")


class LinkHoverSystem:
    """Starts popup sessions for qualifying subreddit links under the pointer."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        popup_system: HoverPopupSystem,
        populate: PopulateFn,
        *,
        options: HoverOptions | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.popup_system = popup_system
        self.populate = populate
        self.options = options or HoverOptions()
        self.selectors = build_link_selectors(require_direct_link=self.options.require_direct_link)
        LOGGER.debug("Watching links matching %s", selector_text(self.selectors))
        self.event_bus.subscribe(EVENT_POINTER_OVER, self.on_pointer_over)

    def qualifies(self, anchor: Anchor) -> bool:
        return matches_any(anchor, self.selectors) and is_local_subreddit_link(anchor)

    def on_pointer_over(self, sender, **payload: Any) -> None:
        entity = payload.get("entity")
        if entity is None or not self.world.entity_exists(entity):
            return
        try:
            anchor = self.world.component_for_entity(entity, Anchor)
        except KeyError:
            return
        if not self.qualifies(anchor):
            return
        options = self.options
        self.popup_system.begin(
            entity,
            self.populate,
            open_delay=options.open_delay,
            fade_delay=options.fade_delay,
            fade_speed=options.fade_speed,
            width=options.width,
        )
