"""Domain models package."""

from .problem import (
    CodeSnippet,
    Difficulty,
    Example,
    Problem,
    ProblemFilter,
    ProblemPage,
    ProblemStatus,
    ProblemSummary,
)
from .scaffold import Language, ScaffoldSpec
from .session import Session
from .submission import RunResult, Submission, SubmissionHandle, Verdict

__all__ = [
    "CodeSnippet",
    "Difficulty",
    "Example",
    "Language",
    "Problem",
    "ProblemFilter",
    "ProblemPage",
    "ProblemStatus",
    "ProblemSummary",
    "RunResult",
    "ScaffoldSpec",
    "Session",
    "Submission",
    "SubmissionHandle",
    "Verdict",
]
