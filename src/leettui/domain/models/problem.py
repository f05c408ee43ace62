"""Domain models for judge problems."""

from dataclasses import dataclass, field, replace
from enum import Enum


class Difficulty(str, Enum):
    """Problem difficulty as reported by the judge."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def parse(cls, value: str) -> "Difficulty":
        """Parse a difficulty name, ignoring case."""
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ValueError(f"Unknown difficulty: {value}")


class ProblemStatus(str, Enum):
    """Whether the signed-in user has solved a problem."""

    SOLVED = "Solved"
    ATTEMPTED = "Attempted"
    UNTOUCHED = "Untouched"

    @classmethod
    def from_remote(cls, value: str | None) -> "ProblemStatus":
        if value == "ac":
            return cls.SOLVED
        if value == "notac":
            return cls.ATTEMPTED
        return cls.UNTOUCHED


@dataclass(frozen=True)
class ProblemFilter:
    """Criteria for the problem list. Hashable, used as a cache key."""

    difficulty: Difficulty | None = None
    search: str | None = None
    tags: tuple[str, ...] = ()

    def __str__(self) -> str:
        parts = []
        if self.difficulty:
            parts.append(self.difficulty.value)
        if self.search:
            parts.append(f'"{self.search}"')
        parts.extend(f"#{tag}" for tag in self.tags)
        return " ".join(parts) or "all"


@dataclass(frozen=True)
class ProblemSummary:
    """Lightweight projection of a problem used by list views."""

    id: str
    title: str
    slug: str
    difficulty: Difficulty
    status: ProblemStatus = ProblemStatus.UNTOUCHED
    ac_rate: float = 0.0
    paid_only: bool = False
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProblemPage:
    """One page of the remote problem list."""

    total: int
    problems: list[ProblemSummary] = field(default_factory=list)


@dataclass(frozen=True)
class Example:
    """A worked example from the problem statement."""

    input: str
    output: str
    explanation: str | None = None


@dataclass(frozen=True)
class CodeSnippet:
    """Starter code the judge provides for one language."""

    lang_slug: str
    lang: str
    code: str


@dataclass(frozen=True)
class Problem:
    """Full problem detail.

    Everything except ``status`` is fixed once fetched; use ``with_status``
    to get a copy with a refreshed solved-status.
    """

    id: str
    question_id: str
    slug: str
    title: str
    difficulty: Difficulty
    status: ProblemStatus = ProblemStatus.UNTOUCHED
    description: str = ""
    tags: tuple[str, ...] = ()
    examples: tuple[Example, ...] = ()
    code_snippets: tuple[CodeSnippet, ...] = ()
    hints: tuple[str, ...] = ()
    paid_only: bool = False
    ac_rate: float = 0.0
    example_testcases: tuple[str, ...] = ()

    def snippet_for(self, lang_slug: str) -> CodeSnippet | None:
        for snippet in self.code_snippets:
            if snippet.lang_slug == lang_slug:
                return snippet
        return None

    def with_status(self, status: ProblemStatus) -> "Problem":
        return replace(self, status=status)

    def summary(self) -> ProblemSummary:
        return ProblemSummary(
            id=self.id,
            title=self.title,
            slug=self.slug,
            difficulty=self.difficulty,
            status=self.status,
            ac_rate=self.ac_rate,
            paid_only=self.paid_only,
            tags=self.tags,
        )

    def testcase_input(self) -> str:
        """Example testcase inputs, one argument per line, as the judge runs them."""
        return "\n".join(self.example_testcases)
