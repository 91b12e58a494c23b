"""Outbound call lifecycle state machine."""

from enum import Enum, auto
from typing import ClassVar

import structlog


logger = structlog.get_logger()


class RequestState(Enum):
    """Outbound call lifecycle states.

    State transitions:
        PENDING -> DISPATCHED: Request built and handed to the transport
        PENDING -> NORMALIZED_ERROR: Request could not be built
        DISPATCHED -> NORMALIZED_SUCCESS: Response decoded to text
        DISPATCHED -> NORMALIZED_ERROR: Status or transport failure
        NORMALIZED_SUCCESS -> GATE_SUCCESS: Envelope reported success
        NORMALIZED_SUCCESS -> GATE_ERROR: Envelope reported failure
    """

    PENDING = auto()
    DISPATCHED = auto()
    NORMALIZED_SUCCESS = auto()
    NORMALIZED_ERROR = auto()
    GATE_SUCCESS = auto()
    GATE_ERROR = auto()


class RequestStateError(Exception):
    """Raised when an invalid call state transition is attempted."""

    def __init__(self, from_state: RequestState, to_state: RequestState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid request state transition: {from_state.name} -> {to_state.name}"
        )


class RequestStateMachine:
    """State machine for one outbound call.

    Enforces valid transitions; terminal states are never re-entered.
    """

    VALID_TRANSITIONS: ClassVar[dict[RequestState, set[RequestState]]] = {
        RequestState.PENDING: {
            RequestState.DISPATCHED,
            RequestState.NORMALIZED_ERROR,
        },
        RequestState.DISPATCHED: {
            RequestState.NORMALIZED_SUCCESS,
            RequestState.NORMALIZED_ERROR,
        },
        RequestState.NORMALIZED_SUCCESS: {
            RequestState.GATE_SUCCESS,
            RequestState.GATE_ERROR,
        },
        RequestState.NORMALIZED_ERROR: set(),  # Terminal state
        RequestState.GATE_SUCCESS: set(),  # Terminal state
        RequestState.GATE_ERROR: set(),  # Terminal state
    }

    def __init__(self, request_id: str) -> None:
        """Initialize the state machine in PENDING state.

        Args:
            request_id: Unique call identifier for logging.
        """
        self._request_id = request_id
        self._state = RequestState.PENDING
        self._log = logger.bind(request_id=request_id, component="rest")

    @property
    def state(self) -> RequestState:
        """Get the current state."""
        return self._state

    @property
    def request_id(self) -> str:
        """Get the call ID."""
        return self._request_id

    def can_transition(self, to_state: RequestState) -> bool:
        """Check if a transition to the given state is valid."""
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: RequestState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            RequestStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise RequestStateError(self._state, to_state)

        old_state = self._state
        self._state = to_state
        self._log.debug(
            "request_state_transition",
            from_state=old_state.name,
            to_state=to_state.name,
        )

    def is_terminal(self) -> bool:
        """Check if the current state is terminal."""
        return not self.VALID_TRANSITIONS[self._state]

    def is_success(self) -> bool:
        """Check if the call finished successfully."""
        return self._state in (
            RequestState.NORMALIZED_SUCCESS,
            RequestState.GATE_SUCCESS,
        )

    def is_failure(self) -> bool:
        """Check if the call finished with an error."""
        return self._state in (
            RequestState.NORMALIZED_ERROR,
            RequestState.GATE_ERROR,
        )
