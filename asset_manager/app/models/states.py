# app/models/states.py
from enum import Enum


class AssetState(Enum):
    AVAILABLE = "Available"
    NOT_AVAILABLE = "Not available"
    ASSIGNED = "Assigned"
    WAITING_FOR_RECYCLING = "Waiting for recycling"
    RECYCLED = "Recycled"


class AssignmentState(Enum):
    WAITING_FOR_ACCEPTANCE = "Waiting for acceptance"
    ACCEPTED = "Accepted"
    DECLINED = "Declined"
    DONE = "Done"


# Done assignments are kept for history but never show up in assignment searches.
TERMINAL_ASSIGNMENT_STATE = AssignmentState.DONE

# States shown on a user's own dashboard.
OPEN_ASSIGNMENT_STATES = (AssignmentState.ACCEPTED, AssignmentState.WAITING_FOR_ACCEPTANCE)


def match_state(state_enum, value):
    """Return the member of ``state_enum`` whose value matches ``value``, ignoring case."""
    if isinstance(value, state_enum):
        return value
    try:
        return next(s for s in state_enum if s.value.lower() == str(value).strip().lower())
    except StopIteration:
        raise ValueError(f"Invalid state: {value}")
