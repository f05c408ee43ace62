"""Client for the judge's GraphQL endpoint and its example-run routes."""

import asyncio
import re
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError

from leettui.domain.exceptions import (
    AuthError,
    ProblemNotFoundError,
    RemoteRejectedError,
    TransportError,
)
from leettui.domain.models import (
    Difficulty,
    Language,
    Problem,
    ProblemFilter,
    ProblemPage,
    ProblemSummary,
    RunResult,
    Session,
    Submission,
    SubmissionHandle,
)

from .parsers import ContentParserProtocol, HTTPClientProtocol, ProblemContentParser, URLParser
from .parsers.url_parser import BASE_URL
from .queries import (
    PROBLEM_LIST,
    QUESTION_DETAIL,
    SUBMISSION_STATUS,
    SUBMIT_SOLUTION,
    GraphQLOperation,
)
from .schemas import (
    InterpretResultSchema,
    ProblemListSchema,
    QuestionDetailSchema,
    RunCheckSchema,
    SubmissionStatusSchema,
    SubmitResultSchema,
)

GRAPHQL_URL = f"{BASE_URL}/graphql"
ERROR_EXCERPT_LENGTH = 200

# GraphQL answers an expired session with HTTP 200 and one of these messages.
AUTH_ERROR_PATTERN = re.compile(
    r"not (?:authenticated|logged in|signed in)|login required|unauthori[sz]ed|permission",
    re.IGNORECASE,
)


class LeetCodeClient:
    """Issues named GraphQL operations, attaching the session when one is configured."""

    def __init__(
        self,
        http_client: HTTPClientProtocol,
        *,
        session: Session | None = None,
        content_parser: ContentParserProtocol | None = None,
        max_retries: int = 3,
        retry_delay: float = 0.5,
        page_size: int = 100,
    ):
        """
        Initialize client.

        Args:
            http_client: Transport used for every request
            session: Credentials for authenticated operations (optional)
            content_parser: Converts description markup to text
            max_retries: Retries for transport failures and 5xx responses
            retry_delay: Base delay in seconds, doubled after every retry
            page_size: Problems requested per list page
        """
        self.http_client = http_client
        self.session = session
        self.content_parser = content_parser or ProblemContentParser()
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.page_size = page_size

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    async def fetch_problem_page(
        self, problem_filter: ProblemFilter, *, limit: int, skip: int = 0
    ) -> ProblemPage:
        """Fetch one page of the problem list."""
        variables = {
            "categorySlug": "all-code-essentials",
            "limit": limit,
            "skip": skip,
            "filters": self._build_filters(problem_filter),
        }
        data = await self._execute(
            PROBLEM_LIST, variables, referer=URLParser.build_problemset_url()
        )
        page = self._validate(
            ProblemListSchema, data.get("problemsetQuestionList"), PROBLEM_LIST.name
        )
        return page.to_domain()

    async def fetch_problem_list(self, problem_filter: ProblemFilter) -> list[ProblemSummary]:
        """Fetch every problem matching the filter, page by page."""
        logger.debug(f"Fetching problem list: {problem_filter}")

        problems: list[ProblemSummary] = []
        skip = 0
        while True:
            page = await self.fetch_problem_page(problem_filter, limit=self.page_size, skip=skip)
            problems.extend(page.problems)
            skip += len(page.problems)
            if len(page.problems) < self.page_size or skip >= page.total:
                break

        logger.info(f"Fetched {len(problems)} problems for filter {problem_filter}")
        return problems

    async def fetch_problem_detail(self, slug: str) -> Problem:
        """Fetch full problem detail by slug."""
        logger.debug(f"Fetching problem detail: {slug}")

        data = await self._execute(
            QUESTION_DETAIL, {"titleSlug": slug}, referer=URLParser.build_problem_url(slug)
        )
        if not data.get("question"):
            raise ProblemNotFoundError(slug)

        detail = self._validate(QuestionDetailSchema, data["question"], QUESTION_DETAIL.name)
        problem = detail.to_domain(self.content_parser)

        logger.info(f"Fetched problem {problem.id}: {problem.title}")
        return problem

    async def submit(self, problem: Problem, source: str, language: Language) -> SubmissionHandle:
        """Submit a solution for grading. Requires a session."""
        variables = {
            "titleSlug": problem.slug,
            "questionId": problem.question_id,
            "lang": language.value,
            "typedCode": source,
        }
        data = await self._execute(
            SUBMIT_SOLUTION, variables, referer=URLParser.build_problem_url(problem.slug)
        )
        result = self._validate(
            SubmitResultSchema, data.get("submitSolution"), SUBMIT_SOLUTION.name
        )
        handle = result.to_domain(problem.id)

        logger.info(f"Submitted problem {problem.id} as submission {handle.submission_id}")
        return handle

    async def poll_submission(self, handle: SubmissionHandle) -> Submission:
        """Fetch the current grading state of a submission. Requires a session."""
        data = await self._execute(
            SUBMISSION_STATUS,
            {"submissionId": handle.submission_id},
            referer=URLParser.build_problemset_url(),
        )
        status = self._validate(
            SubmissionStatusSchema, data.get("submissionStatus"), SUBMISSION_STATUS.name
        )
        submission = status.to_domain(handle)

        logger.debug(f"Submission {handle.submission_id}: {submission.verdict.value}")
        return submission

    async def run_code(
        self, problem: Problem, source: str, language: Language
    ) -> SubmissionHandle:
        """
        Run a solution against the problem's example testcases. Requires a session.

        GraphQL has no run operation, so this uses the interpret route the
        problem page itself calls.
        """
        url = f"{BASE_URL}/problems/{problem.slug}/interpret_solution/"
        payload = {
            "lang": language.value,
            "question_id": problem.question_id,
            "typed_code": source,
            "data_input": problem.testcase_input(),
        }
        response = await self._send(
            "interpretSolution",
            lambda **kwargs: self.http_client.post_json(url, payload, **kwargs),
            referer=URLParser.build_problem_url(problem.slug),
            requires_auth=True,
        )
        body = self._decode_json("interpretSolution", response)
        handle = self._validate(InterpretResultSchema, body, "interpretSolution").to_domain(
            problem.id
        )

        logger.info(f"Started example run {handle.submission_id} for problem {problem.id}")
        return handle

    async def poll_run(self, handle: SubmissionHandle) -> RunResult:
        """Fetch the current state of an example run. Requires a session."""
        url = f"{BASE_URL}/submissions/detail/{handle.submission_id}/check/"
        response = await self._send(
            "checkRun",
            lambda **kwargs: self.http_client.get(url, **kwargs),
            referer=URLParser.build_problemset_url(),
            requires_auth=True,
        )
        body = self._decode_json("checkRun", response)
        result = self._validate(RunCheckSchema, body, "checkRun").to_domain(handle)

        logger.debug(f"Example run {handle.submission_id}: {result.verdict.value}")
        return result

    def _build_filters(self, problem_filter: ProblemFilter) -> dict[str, Any]:
        filters: dict[str, Any] = {}
        if problem_filter.difficulty:
            filters["difficulty"] = _DIFFICULTY_FILTERS[problem_filter.difficulty]
        if problem_filter.search:
            filters["searchKeywords"] = problem_filter.search
        if problem_filter.tags:
            filters["tags"] = list(problem_filter.tags)
        return filters

    def _build_headers(self, referer: str) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Referer": referer}
        if self.session:
            headers["x-csrftoken"] = self.session.csrf_token
        return headers

    async def _execute(
        self, operation: GraphQLOperation, variables: dict[str, Any], *, referer: str
    ) -> dict[str, Any]:
        """Run one GraphQL operation and return its ``data`` object."""
        payload = operation.payload(variables)
        response = await self._send(
            operation.name,
            lambda **kwargs: self.http_client.post_json(GRAPHQL_URL, payload, **kwargs),
            referer=referer,
            requires_auth=operation.requires_auth,
        )
        body = self._decode_json(operation.name, response)
        return self._graphql_data(operation, body, response.status)

    async def _send(
        self,
        name: str,
        request: Callable[..., Awaitable[Any]],
        *,
        referer: str,
        requires_auth: bool,
    ) -> Any:
        """
        Send one request, retrying transport failures with exponential backoff.

        Raises:
            AuthError: Request needs a session and none is configured, or
                the service rejected the credentials
            RemoteRejectedError: 4xx response
            TransportError: Network failure or 5xx after all retries
        """
        if requires_auth and not self.session:
            raise AuthError(f"Sign-in required for {name}")

        headers = self._build_headers(referer)
        cookies = self.session.cookies if self.session else None

        attempt = 0
        while True:
            try:
                response = await request(headers=headers, cookies=cookies)
                if response.status >= 500:
                    raise TransportError(f"{name} failed with server error {response.status}")
                break
            except TransportError as e:
                if attempt >= self.max_retries:
                    logger.error(f"{name} failed after {attempt + 1} attempt(s): {e}")
                    raise
                delay = self.retry_delay * 2**attempt
                attempt += 1
                logger.warning(f"{name} attempt {attempt} failed ({e}), retrying in {delay:.2f}s")
                await asyncio.sleep(delay)

        if response.status in (401, 403):
            raise AuthError(f"{name} was rejected: session is invalid or expired")
        if response.status >= 400:
            excerpt = response.text[:ERROR_EXCERPT_LENGTH].strip()
            raise RemoteRejectedError(
                f"{name} rejected with status {response.status}: {excerpt}",
                status=response.status,
            )
        return response

    def _decode_json(self, name: str, response: Any) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise RemoteRejectedError(
                f"{name} returned invalid JSON", status=response.status
            ) from e

    def _graphql_data(
        self, operation: GraphQLOperation, body: Any, status: int
    ) -> dict[str, Any]:
        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            messages = "; ".join(str(error.get("message", error)) for error in errors)
            if operation.requires_auth and AUTH_ERROR_PATTERN.search(messages):
                logger.warning(f"{operation.name} refused the session: {messages}")
                raise AuthError(f"{operation.name} was rejected: {messages}")
            raise RemoteRejectedError(f"{operation.name}: {messages}", status=status)

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise RemoteRejectedError(f"{operation.name} returned no data", status=status)
        return data

    def _validate(self, schema: type[BaseModel], data: Any, name: str) -> Any:
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected {name} payload: {e}")
            raise RemoteRejectedError(f"{name} returned an unexpected payload") from e


_DIFFICULTY_FILTERS = {
    Difficulty.EASY: "EASY",
    Difficulty.MEDIUM: "MEDIUM",
    Difficulty.HARD: "HARD",
}
