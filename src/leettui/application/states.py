"""Application states and the pure transition table between them."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace

from leettui.domain.models import ProblemFilter

from .intents import (
    Back,
    ChangeFilter,
    CompleteSetup,
    Intent,
    MoveCursor,
    OpenSetup,
    Quit,
    Refresh,
    Return,
    RunCode,
    Scaffold,
    SelectProblem,
    Submit,
)


@dataclass(frozen=True)
class SetupState:
    pass


@dataclass(frozen=True)
class BrowseState:
    filter: ProblemFilter = field(default_factory=ProblemFilter)
    cursor: int = 0


@dataclass(frozen=True)
class DetailState:
    problem_id: str
    origin: BrowseState = field(default_factory=BrowseState)


@dataclass(frozen=True)
class SolveState:
    problem_id: str
    origin: BrowseState = field(default_factory=BrowseState)
    submission_in_flight: bool = False
    run_in_flight: bool = False

    @property
    def busy(self) -> bool:
        """A submission or an example run is being awaited."""
        return self.submission_in_flight or self.run_in_flight


@dataclass(frozen=True)
class ExitState:
    pass


AppState = SetupState | BrowseState | DetailState | SolveState | ExitState

ALL_STATES: tuple[type, ...] = (SetupState, BrowseState, DetailState, SolveState, ExitState)


def _select(state: BrowseState, intent: SelectProblem):
    if intent.problem_id is None:
        return state
    return DetailState(problem_id=intent.problem_id, origin=state)


def _submit(state: SolveState, intent: Submit):
    if state.busy:
        return state
    return replace(state, submission_in_flight=True)


def _run(state: SolveState, intent: RunCode):
    if state.busy:
        return state
    return replace(state, run_in_flight=True)


TRANSITIONS: dict[tuple[type, type], Callable[[AppState, Intent], AppState]] = {
    (SetupState, CompleteSetup): lambda state, intent: BrowseState(),
    (BrowseState, SelectProblem): _select,
    (BrowseState, MoveCursor): lambda state, intent: replace(
        state, cursor=max(0, state.cursor + intent.delta)
    ),
    (BrowseState, ChangeFilter): lambda state, intent: BrowseState(filter=intent.filter),
    (BrowseState, Refresh): lambda state, intent: state,
    (BrowseState, OpenSetup): lambda state, intent: SetupState(),
    (DetailState, OpenSetup): lambda state, intent: SetupState(),
    (SolveState, OpenSetup): lambda state, intent: SetupState(),
    (DetailState, Back): lambda state, intent: state.origin,
    (DetailState, Scaffold): lambda state, intent: SolveState(
        problem_id=state.problem_id, origin=state.origin
    ),
    (SolveState, Return): lambda state, intent: DetailState(
        problem_id=state.problem_id, origin=state.origin
    ),
    (SolveState, Submit): _submit,
    (SolveState, RunCode): _run,
}


def transition(state: AppState, intent: Intent) -> AppState:
    """
    Next state for an intent. Pure and total.

    Quit ends every state, nothing leaves Exit, and pairs missing from the
    table leave the state unchanged.
    """
    if isinstance(state, ExitState):
        return state
    if isinstance(intent, Quit):
        return ExitState()

    handler = TRANSITIONS.get((type(state), type(intent)))
    if handler is None:
        return state
    return handler(state, intent)
