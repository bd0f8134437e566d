from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from esper import World

from hovercard.components.bounds import Bounds
from hovercard.components.popup_body import PopupBody
from hovercard.components.popup_state import PopupState
from hovercard.components.toggle_state import ToggleState
from hovercard.constants import (
    LAYER_POPUP,
    POPUP_ANCHOR_OFFSET,
    POPUP_BUTTON_GAP,
    POPUP_BUTTON_HEIGHT,
    POPUP_HEADER_HEIGHT,
    POPUP_LINE_HEIGHT,
    POPUP_PADDING,
)

CHAR_WIDTH = 7.0


@dataclass(slots=True)
class ButtonRect:
    entity: int
    x: float
    y: float
    width: float
    height: float


@dataclass(slots=True)
class PopupLayout:
    """Card rectangle plus the positions of its rows and buttons.

    Coordinates use a bottom-left origin; ``row_baselines`` run top to bottom.
    """

    x: float
    y: float
    width: float
    height: float
    header_baseline: float
    row_baselines: list[float] = field(default_factory=list)
    buttons: list[ButtonRect] = field(default_factory=list)
    error_baseline: float | None = None


def text_width(text: str) -> float:
    return len(text) * CHAR_WIDTH


def _visible_toggle(world: World, entity: int | None) -> ToggleState | None:
    if entity is None or not world.entity_exists(entity):
        return None
    try:
        toggle = world.component_for_entity(entity, ToggleState)
    except KeyError:
        return None
    return toggle if toggle.visible else None


def compute_popup_layout(
    world: World,
    body: PopupBody | None,
    error: str | None,
    *,
    width: float,
    anchor: Bounds | None,
    window_size: tuple[float, float],
) -> PopupLayout:
    """Size the card for its content and place it beside the anchor."""
    rows = body.rows if body is not None and not error else []
    button_entities = body.toggle_entities if body is not None and not error else []
    height = POPUP_PADDING * 2 + POPUP_HEADER_HEIGHT + POPUP_LINE_HEIGHT * len(rows)
    if error:
        height += POPUP_LINE_HEIGHT
    if body is None and not error:
        # Loading placeholder line.
        height += POPUP_LINE_HEIGHT
    if button_entities:
        height += POPUP_BUTTON_GAP + POPUP_BUTTON_HEIGHT

    window_w, window_h = window_size
    if anchor is not None:
        x = anchor.x
        y = anchor.y - POPUP_ANCHOR_OFFSET - height
        if y < 4.0:
            y = anchor.y + anchor.height + POPUP_ANCHOR_OFFSET
    else:
        x = 4.0
        y = window_h - height - 4.0
    if x + width + 4.0 > window_w:
        x = max(4.0, window_w - width - 4.0)
    if y + height + 4.0 > window_h:
        y = max(4.0, window_h - height - 4.0)

    top = y + height
    header_baseline = top - POPUP_PADDING - POPUP_HEADER_HEIGHT + 6.0
    layout = PopupLayout(x=x, y=y, width=width, height=height, header_baseline=header_baseline)

    if body is not None:
        subscribe = _visible_toggle(world, body.header.subscribe_toggle)
        if subscribe is not None and body.header.subscribe_toggle is not None:
            bx = x + POPUP_PADDING + text_width(body.header.link_text) + 12.0
            layout.buttons.append(
                ButtonRect(
                    body.header.subscribe_toggle,
                    bx,
                    header_baseline - 4.0,
                    text_width(subscribe.text) + 12.0,
                    POPUP_BUTTON_HEIGHT,
                )
            )

    cursor = top - POPUP_PADDING - POPUP_HEADER_HEIGHT
    for _ in rows:
        cursor -= POPUP_LINE_HEIGHT
        layout.row_baselines.append(cursor + 4.0)
    if error or body is None:
        cursor -= POPUP_LINE_HEIGHT
        layout.error_baseline = cursor + 4.0

    bx = x + POPUP_PADDING
    for entity in button_entities:
        toggle = _visible_toggle(world, entity)
        if toggle is None:
            continue
        bw = text_width(toggle.text) + 12.0
        layout.buttons.append(ButtonRect(entity, bx, y + POPUP_PADDING, bw, POPUP_BUTTON_HEIGHT))
        bx += bw + POPUP_BUTTON_GAP
    return layout


class PopupLayoutEngine:
    """Applies popup layouts to the popup state and hit-test bounds."""

    def __init__(self, window_size: Callable[[], tuple[float, float]] | None = None) -> None:
        self._window_size = window_size or (lambda: (800.0, 600.0))
        self.last_layout: PopupLayout | None = None

    def apply(self, world: World, state: PopupState, card_entity: int, *, width: float) -> PopupLayout:
        anchor = None
        if state.anchor_entity is not None and world.entity_exists(state.anchor_entity):
            try:
                anchor = world.component_for_entity(state.anchor_entity, Bounds)
            except KeyError:
                anchor = None
        layout = compute_popup_layout(
            world,
            state.body,
            state.error,
            width=width,
            anchor=anchor,
            window_size=self._window_size(),
        )
        state.x = layout.x
        state.y = layout.y
        state.width = layout.width
        state.height = layout.height
        self._set_bounds(world, card_entity, layout.x, layout.y, layout.width, layout.height)
        for button in layout.buttons:
            self._set_bounds(world, button.entity, button.x, button.y, button.width, button.height)
        self.last_layout = layout
        return layout

    def clear(self, world: World, card_entity: int) -> None:
        self._set_bounds(world, card_entity, 0.0, 0.0, 0.0, 0.0)
        self.last_layout = None

    @staticmethod
    def _set_bounds(world: World, entity: int, x: float, y: float, width: float, height: float) -> None:
        if not world.entity_exists(entity):
            return
        try:
            bounds = world.component_for_entity(entity, Bounds)
        except KeyError:
            world.add_component(entity, Bounds(x, y, width, height, LAYER_POPUP))
            return
        bounds.x = x
        bounds.y = y
        bounds.width = width
        bounds.height = height
        bounds.layer = LAYER_POPUP
