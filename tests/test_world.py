from hovercard.components.anchor import Anchor
from hovercard.components.bounds import Bounds
from hovercard.components.popup_phase import PopupPhase
from hovercard.config import HoverOptions
from hovercard.events.bus import EVENT_MOUSE_MOVE, EVENT_MOUSE_PRESS_RAW, EVENT_TICK, EventBus
from hovercard.factories.anchors import create_anchor
from hovercard.factories.toggles import toggle_state
from hovercard.features.filters import SubredditFilters
from hovercard.world import create_hovercard
from tests.helpers import FakeTransport, drain, run, subreddit_payload


def test_hover_then_click_filter_end_to_end():
    bus = EventBus()
    filters = SubredditFilters()
    transport = FakeTransport({"/r/test/about.json": subreddit_payload()})
    hovercard = create_hovercard(bus, transport, options=HoverOptions(hover_delay_ms=100), filters=filters)
    world = hovercard.world
    create_anchor(world, "/r/test", text="/r/test", classes=("subreddit",), bounds=Bounds(40, 500, 60, 20))
    popup = hovercard.popup_system

    async def runner():
        bus.emit(EVENT_MOUSE_MOVE, x=50, y=510)
        bus.emit(EVENT_TICK, dt=0.2)
        await drain()

    run(runner)
    assert popup.phase == PopupPhase.SHOWN
    filter_entity = popup.state.body.toggle_entities[-1]
    button = next(b for b in popup.layout.last_layout.buttons if b.entity == filter_entity)

    # Travel from the link onto the card, then press the filter button.
    bus.emit(EVENT_MOUSE_MOVE, x=popup.state.x + 5, y=popup.state.y + popup.state.height - 5)
    bus.emit(EVENT_MOUSE_MOVE, x=button.x + 2, y=button.y + 2)
    bus.emit(EVENT_MOUSE_PRESS_RAW, x=button.x + 2, y=button.y + 2, button=1)

    assert filters.is_filtered("test")
    assert toggle_state(world, filter_entity).text == "-filter"
    assert popup.phase == PopupPhase.SHOWN
    assert len(list(world.get_component(Anchor))) == 1


def test_card_covering_another_link_keeps_the_session():
    bus = EventBus()
    transport = FakeTransport({"/r/first/about.json": subreddit_payload(display_name="first")})
    hovercard = create_hovercard(bus, transport, options=HoverOptions(hover_delay_ms=100), filters=SubredditFilters())
    world = hovercard.world
    first = create_anchor(world, "/r/first", text="/r/first", classes=("subreddit",), bounds=Bounds(40, 520, 60, 20))
    create_anchor(world, "/r/second", text="/r/second", classes=("subreddit",), bounds=Bounds(40, 460, 60, 20))
    popup = hovercard.popup_system

    async def runner():
        bus.emit(EVENT_MOUSE_MOVE, x=50, y=530)
        bus.emit(EVENT_TICK, dt=0.2)
        await drain()

    run(runner)
    assert popup.phase == PopupPhase.SHOWN
    assert popup.state.y <= 460 and popup.state.y + popup.state.height >= 505

    # Both points lie inside the card; the second also lies over /r/second.
    bus.emit(EVENT_MOUSE_MOVE, x=50, y=505)
    bus.emit(EVENT_MOUSE_MOVE, x=50, y=470)
    bus.emit(EVENT_TICK, dt=1.0)

    assert popup.session.anchor_entity == first
    assert popup.phase == PopupPhase.SHOWN
    assert transport.calls == ["/r/first/about.json"]
