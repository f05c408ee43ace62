"""User intents emitted by the frontend."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from leettui.domain.models import ProblemFilter

if TYPE_CHECKING:
    from leettui.config import Config


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class CompleteSetup:
    config: "Config" = field(repr=False)


@dataclass(frozen=True)
class OpenSetup:
    pass


@dataclass(frozen=True)
class MoveCursor:
    delta: int


@dataclass(frozen=True)
class ChangeFilter:
    filter: ProblemFilter


@dataclass(frozen=True)
class Refresh:
    pass


@dataclass(frozen=True)
class SelectProblem:
    """Open a problem; without an id the one under the cursor is used."""

    problem_id: str | None = None


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class Scaffold:
    pass


@dataclass(frozen=True)
class Return:
    pass


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class RunCode:
    """Run the solution against the example testcases."""

    pass


@dataclass(frozen=True)
class OpenEditor:
    """Ask the frontend to reopen the current solution file."""

    pass


Intent = (
    Quit
    | CompleteSetup
    | OpenSetup
    | MoveCursor
    | ChangeFilter
    | Refresh
    | SelectProblem
    | Back
    | Scaffold
    | Return
    | Submit
    | RunCode
    | OpenEditor
)

ALL_INTENTS: tuple[type, ...] = (
    Quit,
    CompleteSetup,
    OpenSetup,
    MoveCursor,
    ChangeFilter,
    Refresh,
    SelectProblem,
    Back,
    Scaffold,
    Return,
    Submit,
    RunCode,
    OpenEditor,
)
