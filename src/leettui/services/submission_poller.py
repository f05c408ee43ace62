"""Service for submitting solutions (or running examples) and waiting for the verdict."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any

from loguru import logger

from leettui.domain.exceptions import SubmissionInProgressError
from leettui.domain.models import (
    Language,
    Problem,
    RunResult,
    Submission,
    SubmissionHandle,
    Verdict,
)
from leettui.infrastructure.parsers import RemoteClientProtocol


class SubmissionPoller:
    """
    Submits code, then polls with backoff until the verdict is terminal.

    Submissions and example runs share one guard: a problem has at most one
    remote job being awaited at a time.

    Polling gives up after ``max_attempts`` and reports a Timeout verdict.
    Cancelling the wait leaves the remote grading job running; only the local
    wait stops.
    """

    def __init__(
        self,
        client: RemoteClientProtocol,
        *,
        max_attempts: int = 20,
        initial_delay: float = 0.5,
        backoff_factor: float = 1.5,
        max_delay: float = 4.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.client = client
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.backoff_factor = backoff_factor
        self.max_delay = max_delay
        self._sleep = sleep
        self._in_flight: set[str] = set()

    def delays(self) -> list[float]:
        """Wait before each poll attempt."""
        delays = []
        delay = self.initial_delay
        for _ in range(self.max_attempts):
            delays.append(delay)
            delay = min(delay * self.backoff_factor, self.max_delay)
        return delays

    def is_in_flight(self, problem_id: str) -> bool:
        return problem_id in self._in_flight

    async def submit_and_await(
        self, problem: Problem, source: str, language: Language
    ) -> Submission:
        """
        Submit a solution and wait for a terminal verdict.

        Raises:
            SubmissionInProgressError: Previous submission or run for the
                problem is still being awaited
            AuthError, RemoteRejectedError, TransportError: From the client
        """
        handle, submission = await self._await_terminal(
            problem.id,
            lambda: self.client.submit(problem, source, language),
            self.client.poll_submission,
            label="submission",
        )
        if submission is not None:
            return replace(submission, source=source)

        return Submission(
            problem_id=problem.id,
            verdict=Verdict.TIMEOUT,
            source=source,
            submission_id=handle.submission_id,
            detail=(
                f"No verdict after {self.max_attempts} checks; "
                "it may still be graded remotely"
            ),
        )

    async def run_and_await(self, problem: Problem, source: str, language: Language) -> RunResult:
        """Run a solution against the example testcases and wait for the result."""
        handle, result = await self._await_terminal(
            problem.id,
            lambda: self.client.run_code(problem, source, language),
            self.client.poll_run,
            label="example run",
        )
        if result is not None:
            return result

        return RunResult(
            problem_id=problem.id,
            verdict=Verdict.TIMEOUT,
            run_id=handle.submission_id,
            detail=f"No result after {self.max_attempts} checks",
        )

    async def _await_terminal(
        self,
        problem_id: str,
        start: Callable[[], Awaitable[SubmissionHandle]],
        poll: Callable[[SubmissionHandle], Awaitable[Any]],
        *,
        label: str,
    ) -> tuple[SubmissionHandle, Any]:
        """Start a remote job and poll it. The result is None when polling gave up."""
        if problem_id in self._in_flight:
            raise SubmissionInProgressError(problem_id)

        self._in_flight.add(problem_id)
        try:
            handle = await start()

            for attempt, delay in enumerate(self.delays(), start=1):
                await self._sleep(delay)
                result = await poll(handle)
                if result.verdict.is_terminal:
                    logger.info(
                        f"{label.capitalize()} {handle.submission_id} finished after "
                        f"{attempt} poll(s): {result.verdict.value}"
                    )
                    return handle, result

            logger.warning(
                f"{label.capitalize()} {handle.submission_id} still pending "
                f"after {self.max_attempts} polls"
            )
            return handle, None
        except asyncio.CancelledError:
            logger.info(f"Stopped waiting for {label} of problem {problem_id}")
            raise
        finally:
            self._in_flight.discard(problem_id)
