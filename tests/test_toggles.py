import pytest
from esper import World

from hovercard.events.bus import EVENT_CACHE_INVALIDATED, EVENT_TOGGLE_CHANGED, EVENT_TOGGLE_CLICK, EventBus
from hovercard.errors import ToggleActionError
from hovercard.factories.toggles import (
    TOGGLE_DASHBOARD,
    TOGGLE_FILTER,
    TOGGLE_SHORTCUT,
    TOGGLE_SUBSCRIBE,
    render_toggle,
    toggle_state,
)
from hovercard.features.dashboard import Dashboard
from hovercard.features.filters import SubredditFilters
from hovercard.features.subreddit_manager import SubredditManager
from hovercard.net.ajax import Ajax
from hovercard.systems.toggle_system import ToggleSystem
from tests.helpers import FakeTransport, drain, record, run, subreddit_payload

ABOUT = "/r/test/about.json"


def test_render_toggle_reflects_initial_state():
    world = World()
    entity = render_toggle(world, TOGGLE_SHORTCUT, "Test", True)
    state = toggle_state(world, entity)

    assert state.resource == "test"
    assert state.text == "-shortcut"
    assert state.title == "Remove this subreddit from your shortcut bar"
    assert "remove" in state.class_list()
    state.set_state(False)
    assert state.text == "+shortcut"
    assert "remove" not in state.class_list()


def test_render_toggle_rejects_unknown_kind():
    with pytest.raises(ValueError):
        render_toggle(World(), "bookmark", "test", False)


def test_toggle_state_of_missing_entity_is_none():
    world = World()
    assert toggle_state(world, 999) is None


def test_filter_click_turns_toggle_into_remove_button():
    world = World()
    bus = EventBus()
    filters = SubredditFilters()
    ToggleSystem(world, bus, filters=filters)
    changed = record(bus, EVENT_TOGGLE_CHANGED)
    entity = render_toggle(world, TOGGLE_FILTER, "test", False)

    bus.emit(EVENT_TOGGLE_CLICK, toggle_entity=entity)

    state = toggle_state(world, entity)
    assert state.active
    assert state.text == "-filter"
    assert "remove" in state.class_list()
    assert filters.is_filtered("test")
    assert changed == [{"toggle_entity": entity, "kind": "filter", "resource": "test", "active": True}]

    bus.emit(EVENT_TOGGLE_CLICK, toggle_entity=entity)
    assert not state.active
    assert not filters.is_filtered("test")


def test_shortcut_and_dashboard_clicks_use_collaborator_result():
    world = World()
    bus = EventBus()
    manager = SubredditManager(shortcuts=("test",))
    dashboard = Dashboard()
    ToggleSystem(world, bus, subreddit_manager=manager, dashboard=dashboard)
    shortcut = render_toggle(world, TOGGLE_SHORTCUT, "test", True)
    widget = render_toggle(world, TOGGLE_DASHBOARD, "test", False)

    bus.emit(EVENT_TOGGLE_CLICK, toggle_entity=shortcut)
    bus.emit(EVENT_TOGGLE_CLICK, toggle_entity=widget)

    assert not toggle_state(world, shortcut).active
    assert not manager.has_shortcut("test")
    assert toggle_state(world, widget).active
    assert dashboard.widget_exists("test")


def test_hidden_or_pending_toggles_ignore_clicks():
    world = World()
    bus = EventBus()
    filters = SubredditFilters()
    ToggleSystem(world, bus, filters=filters)
    hidden = render_toggle(world, TOGGLE_FILTER, "hidden", False, visible=False)
    busy = render_toggle(world, TOGGLE_FILTER, "busy", False)
    toggle_state(world, busy).pending = True

    bus.emit(EVENT_TOGGLE_CLICK, toggle_entity=hidden)
    bus.emit(EVENT_TOGGLE_CLICK, toggle_entity=busy)
    bus.emit(EVENT_TOGGLE_CLICK, toggle_entity=12345)

    assert filters.current_filters() == ()


def _subscription_setup(responses, subscribe_action=None):
    world = World()
    bus = EventBus()
    transport = FakeTransport(responses)
    ajax = Ajax(transport, event_bus=bus)
    actions = []

    async def action(fullname, subscribing):
        actions.append((fullname, subscribing))
        if subscribe_action is not None:
            await subscribe_action(fullname, subscribing)

    manager = SubredditManager(subscribe_action=action)
    system = ToggleSystem(world, bus, ajax=ajax, subreddit_manager=manager)
    entity = render_toggle(world, TOGGLE_SUBSCRIBE, "test", False)
    return world, bus, system, entity, actions, ajax, transport


def test_subscribe_flips_and_confirms_against_fresh_info():
    world, bus, system, entity, actions, ajax, transport = _subscription_setup(
        {ABOUT: [subreddit_payload(), subreddit_payload(user_is_subscriber=True)]}
    )
    invalidated = record(bus, EVENT_CACHE_INVALIDATED)

    async def runner():
        return await system.toggle_subscription(entity)

    assert run(runner) is True
    state = toggle_state(world, entity)
    assert state.active
    assert not state.pending
    assert actions == [("t5_2qh23", True)]
    assert invalidated == [{"key": ABOUT}]
    assert transport.calls == [ABOUT, ABOUT]


def test_subscribe_failure_reverts_and_still_invalidates():
    async def reject(fullname, subscribing):
        raise RuntimeError("403 Forbidden")

    world, bus, system, entity, actions, ajax, transport = _subscription_setup(
        {ABOUT: subreddit_payload()}, subscribe_action=reject
    )
    changes = record(bus, EVENT_TOGGLE_CHANGED)

    async def runner():
        await ajax.fetch(ABOUT, cache_for=3600)
        return await system.toggle_subscription(entity)

    assert run(runner) is False
    assert not toggle_state(world, entity).active
    assert [change["active"] for change in changes] == [True, False]
    assert ABOUT not in ajax.cache


def test_subscribe_adopts_refreshed_truth_on_mismatch():
    world, bus, system, entity, actions, ajax, transport = _subscription_setup(
        {ABOUT: [subreddit_payload(), subreddit_payload(user_is_subscriber=False)]}
    )

    async def runner():
        return await system.toggle_subscription(entity)

    assert run(runner) is False
    assert actions == [("t5_2qh23", True)]
    assert not toggle_state(world, entity).active


def test_unsubscribe_when_already_subscribed():
    world, bus, system, entity, actions, ajax, transport = _subscription_setup(
        {ABOUT: [subreddit_payload(user_is_subscriber=True), subreddit_payload(user_is_subscriber=False)]}
    )

    async def runner():
        return await system.toggle_subscription(entity)

    assert run(runner) is False
    assert actions == [("t5_2qh23", False)]
    assert toggle_state(world, entity).text == "+subscribe"


def test_subscribe_click_runs_in_background():
    world, bus, system, entity, actions, ajax, transport = _subscription_setup(
        {ABOUT: [subreddit_payload(), subreddit_payload(user_is_subscriber=True)]}
    )

    async def runner():
        bus.emit(EVENT_TOGGLE_CLICK, toggle_entity=entity)
        await drain()

    run(runner)
    assert toggle_state(world, entity).active


def test_manager_reports_rejected_subscribe_as_toggle_action_error():
    async def reject(fullname, subscribing):
        raise RuntimeError("403 Forbidden")

    manager = SubredditManager(subscriptions=("python",), subscribe_action=reject)

    async def runner():
        await manager.subscribe("t5_2qh23", True)

    with pytest.raises(ToggleActionError, match="403 Forbidden") as info:
        run(runner)

    assert isinstance(info.value.__cause__, RuntimeError)
    assert manager.subscriptions == {"python"}
