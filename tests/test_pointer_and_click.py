from esper import World

from hovercard.components.bounds import Bounds
from hovercard.constants import LAYER_POPUP
from hovercard.events.bus import (
    EVENT_MOUSE_MOVE,
    EVENT_MOUSE_PRESS_RAW,
    EVENT_POINTER_OUT,
    EVENT_POINTER_OVER,
    EVENT_TOGGLE_CLICK,
    EventBus,
)
from hovercard.factories.toggles import TOGGLE_FILTER, render_toggle
from hovercard.systems.click_system import ClickSystem
from hovercard.systems.pointer_system import PointerSystem
from hovercard.utils.click_throttle import ClickThrottle
from tests.helpers import FakeClock, record


def test_pointer_system_emits_out_before_over():
    world = World()
    bus = EventBus()
    pointer = PointerSystem(world, bus)
    left = world.create_entity(Bounds(0, 0, 50, 20))
    right = world.create_entity(Bounds(100, 0, 50, 20))
    order = []
    bus.subscribe(EVENT_POINTER_OVER, lambda sender, **p: order.append(("over", p["entity"])))
    bus.subscribe(EVENT_POINTER_OUT, lambda sender, **p: order.append(("out", p["entity"])))

    bus.emit(EVENT_MOUSE_MOVE, x=10, y=10)
    bus.emit(EVENT_MOUSE_MOVE, x=12, y=10)
    bus.emit(EVENT_MOUSE_MOVE, x=120, y=10)

    assert order == [("over", left), ("out", left), ("over", right)]
    assert pointer.hovered == frozenset({right})


def test_pointer_system_ignores_collapsed_bounds():
    world = World()
    bus = EventBus()
    pointer = PointerSystem(world, bus)
    world.create_entity(Bounds(0, 0, 0, 0))
    overs = record(bus, EVENT_POINTER_OVER)

    bus.emit(EVENT_MOUSE_MOVE, x=0, y=0)

    assert overs == []
    assert pointer.hovered == frozenset()


def test_pointer_system_hides_links_covered_by_the_popup():
    world = World()
    bus = EventBus()
    pointer = PointerSystem(world, bus)
    link = world.create_entity(Bounds(40, 460, 60, 20))
    card = world.create_entity(Bounds(40, 360, 450, 148, LAYER_POPUP))
    button = world.create_entity(Bounds(50, 370, 60, 22, LAYER_POPUP))
    overs = record(bus, EVENT_POINTER_OVER)

    bus.emit(EVENT_MOUSE_MOVE, x=50, y=470)
    assert pointer.hovered == frozenset({card})
    bus.emit(EVENT_MOUSE_MOVE, x=60, y=380)
    assert pointer.hovered == frozenset({card, button})
    # Once the card collapses the link is reachable again.
    world.component_for_entity(card, Bounds).width = 0.0
    world.component_for_entity(button, Bounds).width = 0.0
    bus.emit(EVENT_MOUSE_MOVE, x=50, y=470)

    assert pointer.hovered == frozenset({link})
    assert [over["entity"] for over in overs] == [card, button, link]


def test_click_on_toggle_emits_toggle_click_once_per_interval():
    world = World()
    bus = EventBus()
    clock = FakeClock()
    ClickSystem(world, bus, throttle=ClickThrottle(min_interval=0.3, clock=clock))
    toggle = render_toggle(world, TOGGLE_FILTER, "test", False)
    world.add_component(toggle, Bounds(10, 10, 60, 22))
    clicks = record(bus, EVENT_TOGGLE_CLICK)

    bus.emit(EVENT_MOUSE_PRESS_RAW, x=20, y=20, button=1)
    clock.advance(0.1)
    bus.emit(EVENT_MOUSE_PRESS_RAW, x=20, y=20, button=1)
    clock.advance(0.3)
    bus.emit(EVENT_MOUSE_PRESS_RAW, x=20, y=20, button=1)

    assert clicks == [{"toggle_entity": toggle}, {"toggle_entity": toggle}]


def test_click_on_hidden_toggle_or_bad_payload_is_ignored():
    world = World()
    bus = EventBus()
    ClickSystem(world, bus)
    hidden = render_toggle(world, TOGGLE_FILTER, "test", False, visible=False)
    world.add_component(hidden, Bounds(10, 10, 60, 22))
    clicks = record(bus, EVENT_TOGGLE_CLICK)

    bus.emit(EVENT_MOUSE_PRESS_RAW, x=20, y=20, button=1)
    bus.emit(EVENT_MOUSE_PRESS_RAW, x="bad", y=20, button=1)

    assert clicks == []


def test_only_primary_button_operates_toggles():
    world = World()
    bus = EventBus()
    ClickSystem(world, bus)
    toggle = render_toggle(world, TOGGLE_FILTER, "test", False)
    world.add_component(toggle, Bounds(10, 10, 60, 22))
    clicks = record(bus, EVENT_TOGGLE_CLICK)

    bus.emit(EVENT_MOUSE_PRESS_RAW, x=20, y=20, button=4)
    bus.emit(EVENT_MOUSE_PRESS_RAW, x=20, y=20, button=1)

    assert clicks == [{"toggle_entity": toggle}]
