"""Result events posted by background tasks to the state machine."""

from dataclasses import dataclass
from pathlib import Path

from leettui.domain.models import Problem, ProblemFilter, ProblemSummary, RunResult, Submission


@dataclass(frozen=True)
class ListLoaded:
    filter: ProblemFilter
    problems: list[ProblemSummary]


@dataclass(frozen=True)
class ListFailed:
    filter: ProblemFilter
    error: BaseException


@dataclass(frozen=True)
class DetailLoaded:
    problem_id: str
    problem: Problem


@dataclass(frozen=True)
class DetailFailed:
    problem_id: str
    error: BaseException


@dataclass(frozen=True)
class Scaffolded:
    problem_id: str
    path: Path
    directory: Path


@dataclass(frozen=True)
class ScaffoldFailed:
    problem_id: str
    error: BaseException


@dataclass(frozen=True)
class SubmissionCompleted:
    problem_id: str
    submission: Submission


@dataclass(frozen=True)
class SubmissionFailed:
    problem_id: str
    error: BaseException


@dataclass(frozen=True)
class RunCompleted:
    problem_id: str
    result: RunResult


@dataclass(frozen=True)
class RunFailed:
    problem_id: str
    error: BaseException


Event = (
    ListLoaded
    | ListFailed
    | DetailLoaded
    | DetailFailed
    | Scaffolded
    | ScaffoldFailed
    | SubmissionCompleted
    | SubmissionFailed
    | RunCompleted
    | RunFailed
)
