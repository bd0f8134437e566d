from __future__ import annotations

from esper import World

from hovercard.components.popup_state import PopupState
from hovercard.components.toggle_state import ToggleState
from hovercard.constants import POPUP_LABEL_WIDTH, POPUP_PADDING
from hovercard.factories.toggles import toggle_state
from hovercard.ui.popup_layout import PopupLayoutEngine

BG_COLOR = (20, 20, 30)
BORDER_COLOR = (150, 150, 180)
LINK_COLOR = (120, 170, 255)
LABEL_COLOR = (170, 170, 190)
TEXT_COLOR = (235, 235, 235)
ERROR_COLOR = (240, 110, 110)
BUTTON_ADD_COLOR = (60, 120, 60)
BUTTON_REMOVE_COLOR = (130, 50, 50)


def _with_alpha(rgb: tuple[int, int, int], alpha: float) -> tuple[int, int, int, int]:
    return (rgb[0], rgb[1], rgb[2], max(0, min(255, int(255 * alpha))))


class PopupRenderer:
    """Draws the popup card described by PopupState with arcade."""

    def __init__(self, world: World, layout: PopupLayoutEngine) -> None:
        self.world = world
        self.layout = layout

    def _current_popup(self) -> PopupState | None:
        entries = list(self.world.get_component(PopupState))
        if not entries:
            return None
        return entries[0][1]

    def process(self) -> None:
        import arcade

        self.render(arcade)

    def render(self, arcade) -> None:
        popup = self._current_popup()
        if not popup or not popup.visible:
            return
        layout = self.layout.last_layout
        if layout is None:
            return
        alpha = popup.alpha
        left = popup.x
        bottom = popup.y
        right = left + popup.width
        top = bottom + popup.height
        arcade.draw_lrbt_rectangle_filled(left, right, bottom, top, _with_alpha(BG_COLOR, alpha))
        arcade.draw_lrbt_rectangle_outline(left, right, bottom, top, _with_alpha(BORDER_COLOR, alpha), 2)

        body = popup.body
        text_x = left + POPUP_PADDING
        if body is not None:
            arcade.draw_text(body.header.link_text, text_x, layout.header_baseline, _with_alpha(LINK_COLOR, alpha), 13, bold=True)
            if body.header.multi_counts:
                arcade.draw_text(
                    body.header.multi_counts,
                    right - POPUP_PADDING,
                    layout.header_baseline,
                    _with_alpha(LABEL_COLOR, alpha),
                    10,
                    anchor_x="right",
                )
        if popup.error:
            arcade.draw_text(popup.error, text_x, layout.error_baseline or bottom + POPUP_PADDING, _with_alpha(ERROR_COLOR, alpha), 12)
        elif body is None:
            arcade.draw_text("Loading...", text_x, layout.error_baseline or bottom + POPUP_PADDING, _with_alpha(LABEL_COLOR, alpha), 12)
        else:
            for row, baseline in zip(body.rows, layout.row_baselines):
                arcade.draw_text(f"{row.label}:", text_x, baseline, _with_alpha(LABEL_COLOR, alpha), 11)
                arcade.draw_text(row.value, text_x + POPUP_LABEL_WIDTH, baseline, _with_alpha(TEXT_COLOR, alpha), 11)

        for button in layout.buttons:
            toggle = toggle_state(self.world, button.entity)
            if toggle is None or not toggle.visible:
                continue
            self._draw_button(arcade, toggle, button.x, button.y, button.width, button.height, alpha)

    @staticmethod
    def _draw_button(arcade, toggle: ToggleState, x: float, y: float, width: float, height: float, alpha: float) -> None:
        fill = BUTTON_REMOVE_COLOR if toggle.removes else BUTTON_ADD_COLOR
        arcade.draw_lrbt_rectangle_filled(x, x + width, y, y + height, _with_alpha(fill, alpha))
        arcade.draw_text(toggle.text, x + 6, y + 5, _with_alpha(TEXT_COLOR, alpha), 11)
