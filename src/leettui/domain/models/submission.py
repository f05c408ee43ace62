"""Domain models for solution submissions."""

from dataclasses import dataclass, field
from enum import Enum


class Verdict(str, Enum):
    """Graded outcome of a submission."""

    PENDING = "Pending"
    ACCEPTED = "Accepted"
    WRONG_ANSWER = "Wrong Answer"
    TIME_LIMIT_EXCEEDED = "Time Limit Exceeded"
    MEMORY_LIMIT_EXCEEDED = "Memory Limit Exceeded"
    OUTPUT_LIMIT_EXCEEDED = "Output Limit Exceeded"
    RUNTIME_ERROR = "Runtime Error"
    COMPILE_ERROR = "Compile Error"
    UNKNOWN = "Unknown"
    TIMEOUT = "Timed Out Waiting"

    @property
    def is_terminal(self) -> bool:
        return self is not Verdict.PENDING

    @classmethod
    def from_status(cls, status_code: int | None, status_msg: str | None = None) -> "Verdict":
        """Map the judge's numeric status code (or message) to a verdict."""
        if status_code in _STATUS_CODES:
            return _STATUS_CODES[status_code]
        if status_msg:
            for member in cls:
                if member.value.lower() == status_msg.strip().lower():
                    return member
        return cls.UNKNOWN


_STATUS_CODES = {
    10: Verdict.ACCEPTED,
    11: Verdict.WRONG_ANSWER,
    12: Verdict.MEMORY_LIMIT_EXCEEDED,
    13: Verdict.OUTPUT_LIMIT_EXCEEDED,
    14: Verdict.TIME_LIMIT_EXCEEDED,
    15: Verdict.RUNTIME_ERROR,
    20: Verdict.COMPILE_ERROR,
}


@dataclass(frozen=True)
class SubmissionHandle:
    """Reference to a submission (or example run) the judge has accepted for grading."""

    submission_id: str
    problem_id: str


@dataclass(frozen=True)
class Submission:
    """A submitted solution and its (possibly pending) verdict."""

    problem_id: str
    verdict: Verdict
    source: str = field(default="", repr=False)
    submission_id: str | None = None
    runtime: str | None = None
    memory: str | None = None
    passed: int | None = None
    total: int | None = None
    detail: str | None = None

    @property
    def is_accepted(self) -> bool:
        return self.verdict is Verdict.ACCEPTED

    def summary(self) -> str:
        parts = [self.verdict.value]
        if self.passed is not None and self.total is not None:
            parts.append(f"{self.passed}/{self.total} testcases passed")
        if self.runtime:
            parts.append(f"runtime {self.runtime}")
        if self.memory:
            parts.append(f"memory {self.memory}")
        return ", ".join(parts)


@dataclass(frozen=True)
class RunResult:
    """Outcome of running a solution against the example testcases only."""

    problem_id: str
    verdict: Verdict
    run_id: str | None = None
    output: tuple[str, ...] = ()
    expected: tuple[str, ...] = ()
    runtime: str | None = None
    detail: str | None = None

    @property
    def is_correct(self) -> bool:
        return self.verdict is Verdict.ACCEPTED

    def summary(self) -> str:
        parts = [self.verdict.value]
        if self.expected:
            parts.append(f"{len(self.expected)} example(s)")
        if self.runtime:
            parts.append(f"runtime {self.runtime}")
        return ", ".join(parts)
