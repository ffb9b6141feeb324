"""State tracking exports."""

from .state_file import StateError, load_state, write_state
from .state_models import STATE_FORMAT_VERSION, StateDocument, TrackedResource

__all__ = [
    "STATE_FORMAT_VERSION",
    "StateDocument",
    "StateError",
    "TrackedResource",
    "load_state",
    "write_state",
]
