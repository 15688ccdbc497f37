"""MutableStateFlow: current value, conflation of equal values, unsubscribe."""

from peoplebook.presentation import MutableStateFlow


def test_subscribe_receives_current_then_changes():
    flow = MutableStateFlow(1)
    seen = []
    flow.subscribe(seen.append)
    flow.value = 2
    flow.update(lambda v: v + 10)
    assert seen == [1, 2, 12]
    assert flow.value == 12


def test_equal_value_is_not_emitted():
    flow = MutableStateFlow("a")
    seen = []
    flow.subscribe(seen.append)
    flow.value = "a"
    flow.update(lambda v: v)
    assert seen == ["a"]


def test_unsubscribe_stops_notifications():
    flow = MutableStateFlow(0)
    seen = []
    unsubscribe = flow.subscribe(seen.append)
    unsubscribe()
    unsubscribe()
    flow.value = 5
    assert seen == [0]


def test_read_only_view_follows_source():
    flow = MutableStateFlow(0)
    view = flow.as_state_flow()
    seen = []
    view.subscribe(seen.append)
    flow.value = 3
    assert view.value == 3
    assert seen == [0, 3]
    assert not hasattr(view, "update")
