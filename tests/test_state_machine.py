import pytest

from inventory_core.constants import BUS_STATUS_TRANSITIONS, DRIVER_STATUS_TRANSITIONS
from inventory_core.errors import InvalidStateTransitionError
from inventory_core.models import BusStatus, DriverStatus
from inventory_core.state_machine import StateMachine, bus_status_machine, driver_status_machine


def test_tables_cover_every_status():
    assert set(BUS_STATUS_TRANSITIONS) == {s.value for s in BusStatus}
    assert set(DRIVER_STATUS_TRANSITIONS) == {s.value for s in DriverStatus}
    for targets in BUS_STATUS_TRANSITIONS.values():
        assert set(targets) <= set(BUS_STATUS_TRANSITIONS)
    for targets in DRIVER_STATUS_TRANSITIONS.values():
        assert set(targets) <= set(DRIVER_STATUS_TRANSITIONS)


def test_bus_next_states():
    assert bus_status_machine.next_states("RETIRED") == ["OUT_OF_SERVICE"]
    assert "MAINTENANCE" in bus_status_machine.next_states("ACTIVE")


def test_next_states_returns_a_copy():
    states = bus_status_machine.next_states("RETIRED")
    states.append("ACTIVE")
    assert bus_status_machine.next_states("RETIRED") == ["OUT_OF_SERVICE"]


def test_unknown_status_raises():
    with pytest.raises(ValueError, match="Unknown Bus status: PARKED"):
        bus_status_machine.next_states("PARKED")


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        ("ACTIVE", "MAINTENANCE", True),
        ("ACTIVE", "ACTIVE", True),
        ("RETIRED", "ACTIVE", False),
        ("RETIRED", "OUT_OF_SERVICE", True),
        ("IN_TRANSIT", "RETIRED", False),
    ],
)
def test_bus_can_transition(current, target, allowed):
    assert bus_status_machine.can_transition(current, target) is allowed


def test_assert_transition_raises_with_allowed_list():
    with pytest.raises(InvalidStateTransitionError) as exc_info:
        bus_status_machine.assert_transition("RETIRED", "ACTIVE")
    assert exc_info.value.allowed == ["OUT_OF_SERVICE"]
    assert "from RETIRED to ACTIVE" in exc_info.value.message


def test_driver_terminated_is_terminal():
    assert driver_status_machine.is_terminal("TERMINATED")
    assert not driver_status_machine.is_terminal("ACTIVE")
    assert not driver_status_machine.can_transition("TERMINATED", "ACTIVE")


def test_driver_initial_statuses():
    assert driver_status_machine.can_start_in("IN_TRAINING")
    assert driver_status_machine.can_start_in("PROBATION")
    assert not driver_status_machine.can_start_in("SUSPENDED")
    assert not driver_status_machine.can_start_in("TERMINATED")


def test_initial_states_default_to_every_state():
    machine = StateMachine({"DRAFT": ["PUBLISHED"], "PUBLISHED": []}, "Post")
    assert machine.initial_states == ["DRAFT", "PUBLISHED"]
