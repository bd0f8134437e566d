"""Assembly of the entity store, collaborators and systems."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable

from esper import World

from hovercard.cache.resource_cache import ResourceCache
from hovercard.config import HoverOptions
from hovercard.constants import FEATURE_DASHBOARD, FEATURE_FILTER, FEATURE_SUBREDDIT_MANAGER
from hovercard.events.bus import EventBus
from hovercard.features.base import DashboardFacade, FilterFacade, SubredditManagerFacade
from hovercard.features.registry import CapabilityRegistry, FeatureDefinition
from hovercard.net.ajax import Ajax, Transport
from hovercard.systems.click_system import ClickSystem
from hovercard.systems.hover_popup_system import HoverPopupSystem
from hovercard.systems.link_hover_system import LinkHoverSystem
from hovercard.systems.pointer_system import PointerSystem
from hovercard.systems.subreddit_info_loader import SubredditInfoLoader
from hovercard.systems.toggle_system import ToggleSystem
from hovercard.ui.popup_layout import PopupLayoutEngine


@dataclass(slots=True)
class HovercardSystems:
    world: World
    event_bus: EventBus
    ajax: Ajax
    capabilities: CapabilityRegistry
    pointer_system: PointerSystem
    click_system: ClickSystem
    popup_system: HoverPopupSystem
    loader: SubredditInfoLoader
    link_hover_system: LinkHoverSystem
    toggle_system: ToggleSystem


def default_capabilities() -> CapabilityRegistry:
    return CapabilityRegistry(
        [
            FeatureDefinition(FEATURE_SUBREDDIT_MANAGER),
            FeatureDefinition(FEATURE_DASHBOARD),
            FeatureDefinition(FEATURE_FILTER),
        ]
    )


def create_hovercard(
    event_bus: EventBus,
    transport: Transport,
    *,
    options: HoverOptions | None = None,
    world: World | None = None,
    capabilities: CapabilityRegistry | None = None,
    subreddit_manager: SubredditManagerFacade | None = None,
    dashboard: DashboardFacade | None = None,
    filters: FilterFacade | None = None,
    current_user: Callable[[], str | None] | None = None,
    loop: asyncio.AbstractEventLoop | None = None,
    window_size: Callable[[], tuple[float, float]] | None = None,
) -> HovercardSystems:
    options = options or HoverOptions()
    world = world or World()
    capabilities = capabilities or default_capabilities()
    cache = ResourceCache(max_entries=options.cache_max_entries)
    ajax = Ajax(transport, cache, event_bus=event_bus)

    pointer_system = PointerSystem(world, event_bus)
    click_system = ClickSystem(world, event_bus)
    popup_system = HoverPopupSystem(world, event_bus, loop=loop, layout=PopupLayoutEngine(window_size))
    loader = SubredditInfoLoader(
        world,
        ajax,
        capabilities,
        subreddit_manager=subreddit_manager,
        dashboard=dashboard,
        filters=filters,
        current_user=current_user,
        options=options,
    )
    link_hover_system = LinkHoverSystem(world, event_bus, popup_system, loader.populate, options=options)
    toggle_system = ToggleSystem(
        world,
        event_bus,
        ajax=ajax,
        subreddit_manager=subreddit_manager,
        dashboard=dashboard,
        filters=filters,
        cache_ttl=options.cache_ttl,
        loop=loop,
    )
    return HovercardSystems(
        world=world,
        event_bus=event_bus,
        ajax=ajax,
        capabilities=capabilities,
        pointer_system=pointer_system,
        click_system=click_system,
        popup_system=popup_system,
        loader=loader,
        link_hover_system=link_hover_system,
        toggle_system=toggle_system,
    )
