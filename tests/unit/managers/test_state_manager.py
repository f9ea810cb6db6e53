from __future__ import annotations

import pytest

from state_managers import (
    NO_DETAIL,
    ConfigurationError,
    InvalidTransitionError,
    StateManager,
    TransitionOutcome,
    UnknownStateError,
)


def _guarded_color_states(flags: dict, include_to: bool = True) -> list[dict]:
    states = []
    for name in ("red", "blue"):
        other = "blue" if name == "red" else "red"
        transitions = {
            "from": {"states": [other], "observers": [lambda event: flags.update(origin=event.name)]},
        }
        if include_to:
            transitions["to"] = {
                "states": [other],
                "observers": [lambda event: flags.update(destination=event.name)],
            }
        states.append({"name": name, "transitions": transitions})
    return states


def test_state_manager_starts_in_initial_state(color_states):
    color = StateManager(initial_state="red", states=color_states)
    assert color.current == "red"
    assert color.previous is None
    assert color.history == []
    assert color.name == "StateManager"
    assert color.events == ["red", "blue"]


def test_state_manager_accepts_contexts(color_states):
    color = StateManager(
        initial_state="gray",
        contexts={"normal": color_states, "extended": [*color_states, {"name": "gray"}]},
        context="extended",
    )
    assert color.current == "gray"
    assert color.context == "extended"
    assert color.event_is_registered("gray") is True


def test_state_manager_changes_state(color_states):
    color = StateManager(initial_state="red", states=color_states)
    color.current = "blue"
    assert color.current == "blue"
    assert color.transition("red") is TransitionOutcome.COMMITTED
    assert color.current == "red"


def test_state_manager_rejects_unknown_state(color_states):
    color = StateManager(initial_state="red", states=color_states)
    with pytest.raises(UnknownStateError, match="green"):
        color.current = "green"
    assert color.current == "red"


def test_state_manager_tracks_previous(color_states):
    color = StateManager(initial_state="red", states=color_states)
    color.current = "blue"
    assert color.previous == "red"
    color.current = "red"
    assert color.previous == "blue"


def test_state_manager_history_disabled_by_default(color_states):
    color = StateManager(initial_state="red", states=color_states)
    for target in ("blue", "red", "blue"):
        color.current = target
    assert color.history == []


def test_state_manager_saves_history(color_states):
    color = StateManager(initial_state="red", states=color_states, save_history=True)
    color.current = "blue"
    assert color.history == ["red"]
    color.current = "red"
    assert color.history == ["red", "blue"]


def test_state_manager_notifies_declared_observers():
    flags = {"red": False, "blue": False}
    color = StateManager(
        initial_state="red",
        states=[
            {"name": "red", "observers": [lambda event: flags.update(red=True)]},
            {"name": "blue", "observers": [lambda event: flags.update(blue=True)]},
        ],
    )
    assert flags == {"red": False, "blue": False}
    color.current = "blue"
    assert flags["blue"] is True
    assert flags["red"] is False
    color.current = "red"
    assert flags["red"] is True


def test_state_manager_observer_receives_state_event(color_states, recorder):
    color = StateManager(initial_state="red", states=color_states)
    color.add_observer("blue", recorder)
    color.current = "blue"
    assert recorder.names == ["blue"]
    assert recorder.events[0].subject is color


def test_state_manager_add_and_remove_observer(color_states, recorder):
    color = StateManager(initial_state="red", states=color_states)
    handle = color.add_observer("red", recorder)
    color.current = "blue"
    color.current = "red"
    assert len(recorder.events) == 1
    assert color.observers("red") == [recorder]

    assert color.remove_observer(handle) is True
    assert color.remove_observer(handle) is False
    color.current = "blue"
    color.current = "red"
    assert len(recorder.events) == 1
    assert color.observers("red") == []


def test_state_manager_observer_registration_errors(color_states, recorder):
    color = StateManager(initial_state="red", states=color_states)
    with pytest.raises(UnknownStateError):
        color.add_observer("green", recorder)
    with pytest.raises(UnknownStateError):
        color.observers("green")


def test_state_manager_fans_out_to_every_registration(color_states):
    calls = {"first": 0, "second": 0, "shared": 0}

    def shared(event):
        calls["shared"] += 1

    color = StateManager(initial_state="red", states=color_states)
    color.add_observer("blue", lambda event: calls.update(first=calls["first"] + 1))
    color.add_observer("blue", lambda event: calls.update(second=calls["second"] + 1))
    color.add_observer("blue", shared)
    color.add_observer("blue", shared)

    color.current = "blue"
    assert calls == {"first": 1, "second": 1, "shared": 2}


def test_state_manager_duplicate_registration_removed_by_handle(color_states):
    calls = []
    observer = calls.append
    color = StateManager(initial_state="red", states=color_states)
    first = color.add_observer("blue", observer)
    color.add_observer("blue", observer)
    color.remove_observer(first)

    color.current = "blue"
    assert len(calls) == 1


def test_state_manager_notifies_transition_observers():
    flags = {"origin": "", "destination": ""}
    color = StateManager(initial_state="red", states=_guarded_color_states(flags))

    color.current = "blue"
    assert flags == {"origin": "red", "destination": "blue"}
    color.current = "red"
    assert flags == {"origin": "blue", "destination": "red"}


def test_state_manager_runs_guard_observers_around_commit():
    order = []
    color = StateManager(
        initial_state="red",
        states=[
            {
                "name": "red",
                "transitions": {
                    "to": {"states": ["blue"], "observers": [lambda event: order.append(("to", color.current))]}
                },
            },
            {
                "name": "blue",
                "observers": [lambda event: order.append(("enter", color.current))],
                "transitions": {
                    "from": {"states": ["red"], "observers": [lambda event: order.append(("from", color.current))]}
                },
            },
        ],
    )

    color.current = "blue"
    assert order == [("to", "red"), ("from", "blue"), ("enter", "blue")]


def test_state_manager_suspends_without_outbound_guard():
    suspended = []
    flags = {"origin": "", "destination": ""}
    color = StateManager(
        initial_state="red",
        states=_guarded_color_states(flags, include_to=False),
        on_suspense=suspended.append,
    )

    assert color.transition("blue") is TransitionOutcome.SUSPENDED
    assert color.current == "red"
    assert color.previous is None
    assert len(suspended) == 1
    assert suspended[0].name == "blue"
    assert suspended[0].previous == "red"
    assert suspended[0].subject is color
    assert flags == {"origin": "", "destination": ""}


def test_state_manager_suspends_target_outside_allow_list():
    suspended = []
    entered = []
    states = [
        {"name": "a", "transitions": {"to": {"states": ["b"]}}},
        {"name": "b"},
        {"name": "c", "observers": [entered.append]},
    ]
    machine = StateManager(initial_state="a", states=states, on_suspense=suspended.append)

    machine.current = "c"
    assert machine.current == "a"
    assert [event.name for event in suspended] == ["c"]
    assert entered == []

    machine.current = "b"
    machine.current = "c"
    assert machine.current == "c"
    assert len(entered) == 1


def test_state_manager_default_suspense_raises():
    machine = StateManager(
        initial_state="a",
        states=[{"name": "a", "transitions": {"to": {"states": ["b"]}}}, {"name": "b"}, {"name": "c"}],
    )
    with pytest.raises(InvalidTransitionError, match="from a to c") as excinfo:
        machine.current = "c"
    assert excinfo.value.event.name == "c"
    assert machine.current == "a"


def test_state_manager_unguarded_state_allows_self_transition(color_states, recorder):
    color = StateManager(initial_state="red", states=color_states, save_history=True)
    color.add_observer("red", recorder)
    color.current = "red"
    assert color.history == ["red"]
    assert recorder.names == ["red"]


def test_state_manager_requires_state_source():
    with pytest.raises(ConfigurationError, match="states or contexts"):
        StateManager(initial_state="red")


def test_state_manager_requires_context_with_contexts(color_states):
    with pytest.raises(ConfigurationError, match="without specifying context"):
        StateManager(initial_state="red", contexts={"normal": color_states})


def test_state_manager_rejects_unknown_context(color_states):
    with pytest.raises(ConfigurationError, match="Context dark"):
        StateManager(initial_state="red", contexts={"normal": color_states}, context="dark")


def test_state_manager_rejects_unregistered_initial_state(color_states):
    with pytest.raises(ConfigurationError, match="Initial state green"):
        StateManager(initial_state="green", states=color_states)


def test_state_manager_uses_custom_name_in_errors(color_states):
    with pytest.raises(ConfigurationError, match="Failed to create Palette"):
        StateManager(name="Palette", initial_state="red")


def test_state_manager_suspense_distinguishes_none_detail():
    suspended = []
    machine = StateManager(
        initial_state="a",
        states=[{"name": "a", "transitions": {"to": {"states": []}}}, {"name": "b"}],
        on_suspense=suspended.append,
    )

    machine.transition("b")
    machine.transition("b", detail=None)

    assert suspended[0].detail is NO_DETAIL
    assert suspended[1].detail is None
