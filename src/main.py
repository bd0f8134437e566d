"""Entry point for the hovercard demo.

Sets up the entity store, event bus, hover systems, and an Arcade window
with a handful of subreddit links to hover.
"""
import asyncio
import logging
from pathlib import Path

from arcade import Window, run, set_background_color, color, draw_text

from hovercard.components.anchor import Anchor
from hovercard.components.bounds import Bounds
from hovercard.config import load_hover_options
from hovercard.events.bus import EVENT_TICK, EventBus, EVENT_MOUSE_MOVE, EVENT_MOUSE_PRESS_RAW
from hovercard.factories.anchors import create_anchor
from hovercard.features.dashboard import Dashboard
from hovercard.features.filters import SubredditFilters
from hovercard.features.subreddit_manager import SubredditManager
from hovercard.logging_utils import setup_logging
from hovercard.net.ajax import RequestsTransport
from hovercard.rendering.popup_renderer import PopupRenderer
from hovercard.world import create_hovercard

LOGGER = logging.getLogger("hovercard.demo")

DEMO_LINKS = (
    ("/r/python", "/r/python", ("subreddit",)),
    ("/r/programming", "r/programming", ("subreddit",)),
    ("https://www.reddit.com/r/gamedev/", "r/gamedev", ("subreddit",)),
    ("/r/askscience", "askscience", ()),
    ("https://example.com/r/python", "off-site link", ()),
)

LINK_FONT_SIZE = 14
LINK_HEIGHT = 20


class HovercardWindow(Window):
    def __init__(self, options_path: Path | None = None):
        super().__init__(800, 600, "Subreddit hover cards")
        self.set_update_rate(1/60)
        self.options = load_hover_options(options_path)
        self.loop = asyncio.new_event_loop()
        self.event_bus = EventBus()
        self.transport = RequestsTransport(self.options.base_url)
        self.subreddit_manager = SubredditManager(shortcuts=("python",), subscriptions=("python",))
        self.hovercard = create_hovercard(
            self.event_bus,
            self.transport,
            options=self.options,
            subreddit_manager=self.subreddit_manager,
            dashboard=Dashboard(),
            filters=SubredditFilters(),
            current_user=lambda: "demo_user",
            loop=self.loop,
            window_size=lambda: (self.width, self.height),
        )
        self.world = self.hovercard.world
        self.popup_renderer = PopupRenderer(self.world, self.hovercard.popup_system.layout)
        self._place_links()
        set_background_color(color.DARK_SLATE_GRAY)

    def _place_links(self) -> None:
        y = self.height - 80
        for href, text, classes in DEMO_LINKS:
            width = len(text) * 9 + 4
            create_anchor(self.world, href, text=text, classes=classes, bounds=Bounds(40, y, width, LINK_HEIGHT))
            y -= 60

    def on_draw(self):
        self.clear()
        draw_text("Hover a subreddit link:", 40, self.height - 40, color.WHITE, 16)
        for _, (anchor, bounds) in self.world.get_components(Anchor, Bounds):
            draw_text(anchor.text, bounds.x + 2, bounds.y + 4, color.LIGHT_BLUE, LINK_FONT_SIZE)
        self.popup_renderer.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)
        # Let pending fetches and populate tasks advance one step.
        self.loop.call_soon(self.loop.stop)
        self.loop.run_forever()

    def on_mouse_motion(self, x, y, dx, dy):
        self.event_bus.emit(EVENT_MOUSE_MOVE, x=x, y=y)

    def on_mouse_press(self, x, y, button, modifiers):
        self.event_bus.emit(EVENT_MOUSE_PRESS_RAW, x=x, y=y, button=button)

    def on_close(self):
        self.hovercard.popup_system.close()
        self.transport.close()
        self.loop.close()
        super().on_close()


def main():
    setup_logging(logging.INFO)
    HovercardWindow(Path.cwd())
    run()


if __name__ == "__main__":
    main()
