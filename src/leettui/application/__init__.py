from .context import AppContext
from .machine import AppStateMachine, describe_error
from .states import (
    AppState,
    BrowseState,
    DetailState,
    ExitState,
    SetupState,
    SolveState,
    transition,
)
from .view_model import ViewModel

__all__ = [
    "AppContext",
    "AppState",
    "AppStateMachine",
    "BrowseState",
    "DetailState",
    "ExitState",
    "SetupState",
    "SolveState",
    "ViewModel",
    "describe_error",
    "transition",
]
