from __future__ import annotations

from dataclasses import dataclass

from esper import World

from hovercard.components.toggle_state import ToggleState

TOGGLE_SUBSCRIBE = "subscribe"
TOGGLE_SHORTCUT = "shortcut"
TOGGLE_DASHBOARD = "dashboard"
TOGGLE_FILTER = "filter"

_BUTTON_CLASS = "res-fancy-toggle-button"


@dataclass(frozen=True, slots=True)
class ToggleSpec:
    on_text: str
    off_text: str
    on_title: str = ""
    off_title: str = ""
    css_classes: tuple[str, ...] = (_BUTTON_CLASS,)


TOGGLE_SPECS: dict[str, ToggleSpec] = {
    TOGGLE_SUBSCRIBE: ToggleSpec("+subscribe", "-unsubscribe"),
    TOGGLE_SHORTCUT: ToggleSpec(
        "+shortcut",
        "-shortcut",
        "Add this subreddit to your shortcut bar",
        "Remove this subreddit from your shortcut bar",
        (_BUTTON_CLASS, "REStoggle", "RESshortcut"),
    ),
    TOGGLE_DASHBOARD: ToggleSpec(
        "+dashboard",
        "-dashboard",
        "Add this subreddit to your dashboard",
        "Remove this subreddit from your dashboard",
        (_BUTTON_CLASS, "RESDashboardToggle"),
    ),
    TOGGLE_FILTER: ToggleSpec(
        "+filter",
        "-filter",
        "Filter this subreddit from /r/all and /domain/*",
        "Stop filtering this subreddit from /r/all and /domain/*",
        (_BUTTON_CLASS, "RESFilterToggle"),
    ),
}


def render_toggle(
    world: World,
    kind: str,
    resource: str,
    initial_active: bool,
    *,
    visible: bool = True,
) -> int:
    """Create a toggle widget entity for ``resource``."""
    try:
        spec = TOGGLE_SPECS[kind]
    except KeyError as exc:
        raise ValueError(f"Unknown toggle kind '{kind}'") from exc
    state = ToggleState(
        kind=kind,
        resource=resource.lower(),
        on_text=spec.on_text,
        off_text=spec.off_text,
        on_title=spec.on_title,
        off_title=spec.off_title,
        active=bool(initial_active),
        visible=visible,
        css_classes=spec.css_classes,
    )
    return world.create_entity(state)


def toggle_state(world: World, toggle_entity: int) -> ToggleState | None:
    if not world.entity_exists(toggle_entity):
        return None
    try:
        return world.component_for_entity(toggle_entity, ToggleState)
    except KeyError:
        return None
