"""Protocol interfaces for parsers and remote collaborators."""

from typing import Any, Protocol

from leettui.domain.models import (
    Example,
    Language,
    Problem,
    ProblemFilter,
    ProblemSummary,
    RunResult,
    Submission,
    SubmissionHandle,
)


class ParsingError(ValueError):
    """Error parsing HTML content."""

    pass


class URLParserProtocol(Protocol):
    """Protocol for URL parsing."""

    @classmethod
    def parse(cls, url: str) -> str:
        """Parse URL to extract the problem slug."""
        ...

    @classmethod
    def build_problem_url(cls, slug: str) -> str:
        """Build problem URL from slug."""
        ...


class ContentParserProtocol(Protocol):
    """Protocol for converting problem markup."""

    def to_text(self, html: str | None) -> str:
        """Convert description markup into plain text."""
        ...

    def extract_examples(self, text: str) -> list[Example]:
        """Extract worked examples from plain-text description."""
        ...


class HTTPClientProtocol(Protocol):
    """Protocol for HTTP client."""

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        *,
        headers: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
    ) -> Any:
        """POST a JSON payload and return the response."""
        ...

    async def get(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
    ) -> Any:
        """GET a resource and return the response."""
        ...


class RemoteClientProtocol(Protocol):
    """Protocol for the judge API client."""

    async def fetch_problem_list(self, problem_filter: ProblemFilter) -> list[ProblemSummary]:
        ...

    async def fetch_problem_detail(self, slug: str) -> Problem:
        ...

    async def submit(self, problem: Problem, source: str, language: Language) -> SubmissionHandle:
        ...

    async def poll_submission(self, handle: SubmissionHandle) -> Submission:
        ...

    async def run_code(self, problem: Problem, source: str, language: Language) -> SubmissionHandle:
        ...

    async def poll_run(self, handle: SubmissionHandle) -> RunResult:
        ...
