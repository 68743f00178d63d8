"""Table-driven status transitions for buses and drivers."""

from .constants import BUS_STATUS_TRANSITIONS, DRIVER_INITIAL_STATUSES, DRIVER_STATUS_TRANSITIONS
from .errors import InvalidStateTransitionError


class StateMachine:
    """
    Validates status changes against an allowed-transitions table.

    Usage:
        machine = StateMachine(BUS_STATUS_TRANSITIONS, "Bus")
        machine.next_states("ACTIVE")            # ["MAINTENANCE", ...]
        machine.assert_transition("RETIRED", "ACTIVE")  # raises
    """

    def __init__(
        self,
        transitions: dict[str, list[str]],
        entity_name: str,
        initial_states: list[str] | None = None,
    ):
        self.transitions = transitions
        self.entity_name = entity_name
        self._initial_states = initial_states

    @property
    def states(self) -> list[str]:
        return list(self.transitions)

    @property
    def initial_states(self) -> list[str]:
        return list(self._initial_states) if self._initial_states is not None else self.states

    def next_states(self, current: str) -> list[str]:
        if current not in self.transitions:
            raise ValueError(f"Unknown {self.entity_name} status: {current}")
        return list(self.transitions[current])

    def can_transition(self, current: str, target: str) -> bool:
        # Re-saving the same status is not a transition
        if current == target:
            return True
        return target in self.transitions.get(current, [])

    def can_start_in(self, status: str) -> bool:
        return status in self.initial_states

    def assert_transition(self, current: str, target: str) -> None:
        if not self.can_transition(current, target):
            raise InvalidStateTransitionError(
                self.entity_name, current, target, self.transitions.get(current, [])
            )

    def is_terminal(self, status: str) -> bool:
        return not self.transitions.get(status)


bus_status_machine = StateMachine(BUS_STATUS_TRANSITIONS, "Bus")
driver_status_machine = StateMachine(
    DRIVER_STATUS_TRANSITIONS, "Driver", initial_states=DRIVER_INITIAL_STATUSES
)


__all__ = ["StateMachine", "bus_status_machine", "driver_status_machine"]
