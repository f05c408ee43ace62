"""Unit tests for the submission poller."""

import asyncio

import pytest
from unittest.mock import AsyncMock

from leettui.domain.exceptions import AuthError, SubmissionInProgressError
from leettui.domain.models import Language, RunResult, Submission, SubmissionHandle, Verdict
from leettui.services import SubmissionPoller

HANDLE = SubmissionHandle(submission_id="1001", problem_id="27")


def pending():
    return Submission(problem_id="27", verdict=Verdict.PENDING, submission_id="1001")


def make_poller(client, **kwargs):
    sleep = AsyncMock()
    poller = SubmissionPoller(client, sleep=sleep, **kwargs)
    return poller, sleep


@pytest.mark.asyncio
async def test_returns_first_terminal_verdict(remove_element_problem):
    client = AsyncMock()
    client.submit.return_value = HANDLE
    client.poll_submission.side_effect = [
        pending(),
        pending(),
        Submission(
            problem_id="27",
            verdict=Verdict.ACCEPTED,
            submission_id="1001",
            runtime="0 ms",
            passed=113,
            total=113,
        ),
    ]
    poller, sleep = make_poller(client)

    submission = await poller.submit_and_await(
        remove_element_problem, "class Solution: ...", Language.PYTHON3
    )

    assert submission.verdict is Verdict.ACCEPTED
    assert submission.source == "class Solution: ..."
    assert submission.runtime == "0 ms"
    assert client.poll_submission.await_count == 3
    client.submit.assert_awaited_once_with(
        remove_element_problem, "class Solution: ...", Language.PYTHON3
    )
    assert not poller.is_in_flight("27")


@pytest.mark.asyncio
async def test_gives_up_after_max_attempts(remove_element_problem):
    client = AsyncMock()
    client.submit.return_value = HANDLE
    client.poll_submission.return_value = pending()
    poller, sleep = make_poller(client, max_attempts=4)

    submission = await poller.submit_and_await(remove_element_problem, "code", Language.PYTHON3)

    assert submission.verdict is Verdict.TIMEOUT
    assert submission.verdict.is_terminal
    assert submission.submission_id == "1001"
    assert client.poll_submission.await_count == 4
    assert sleep.await_count == 4


def test_backoff_grows_and_is_capped():
    poller = SubmissionPoller(
        AsyncMock(), max_attempts=6, initial_delay=1.0, backoff_factor=2.0, max_delay=5.0
    )

    assert poller.delays() == [1.0, 2.0, 4.0, 5.0, 5.0, 5.0]


def test_rejects_non_positive_attempts():
    with pytest.raises(ValueError):
        SubmissionPoller(AsyncMock(), max_attempts=0)


@pytest.mark.asyncio
async def test_submit_errors_propagate_and_release_guard(remove_element_problem):
    client = AsyncMock()
    client.submit.side_effect = AuthError("Sign-in required")
    poller, _ = make_poller(client)

    with pytest.raises(AuthError):
        await poller.submit_and_await(remove_element_problem, "code", Language.PYTHON3)

    assert not poller.is_in_flight("27")
    client.poll_submission.assert_not_called()


@pytest.mark.asyncio
async def test_second_submission_while_waiting_is_refused(remove_element_problem):
    release = asyncio.Event()

    async def slow_poll(handle):
        await release.wait()
        return Submission(problem_id="27", verdict=Verdict.WRONG_ANSWER)

    client = AsyncMock()
    client.submit.return_value = HANDLE
    client.poll_submission.side_effect = slow_poll
    poller, _ = make_poller(client)

    first = asyncio.create_task(
        poller.submit_and_await(remove_element_problem, "code", Language.PYTHON3)
    )
    await asyncio.sleep(0)
    assert poller.is_in_flight("27")

    with pytest.raises(SubmissionInProgressError):
        await poller.submit_and_await(remove_element_problem, "code", Language.PYTHON3)

    release.set()
    assert (await first).verdict is Verdict.WRONG_ANSWER
    assert client.submit.await_count == 1


@pytest.mark.asyncio
async def test_cancelling_wait_stops_polling_only(remove_element_problem):
    release = asyncio.Event()

    async def never_finishes(handle):
        await release.wait()
        return pending()

    client = AsyncMock()
    client.submit.return_value = HANDLE
    client.poll_submission.side_effect = never_finishes
    poller, _ = make_poller(client)

    task = asyncio.create_task(
        poller.submit_and_await(remove_element_problem, "code", Language.PYTHON3)
    )
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert not poller.is_in_flight("27")
    client.submit.assert_awaited_once()


@pytest.mark.asyncio
async def test_run_returns_first_finished_result(remove_element_problem):
    run_handle = SubmissionHandle(submission_id="runcode_1", problem_id="27")
    client = AsyncMock()
    client.run_code.return_value = run_handle
    client.poll_run.side_effect = [
        RunResult(problem_id="27", verdict=Verdict.PENDING, run_id="runcode_1"),
        RunResult(
            problem_id="27",
            verdict=Verdict.ACCEPTED,
            run_id="runcode_1",
            output=("2",),
            expected=("2",),
        ),
    ]
    poller, sleep = make_poller(client)

    result = await poller.run_and_await(
        remove_element_problem, "class Solution: ...", Language.PYTHON3
    )

    assert result.is_correct
    assert result.output == ("2",)
    client.poll_run.assert_awaited_with(run_handle)
    assert sleep.await_count == 2
    client.submit.assert_not_awaited()
    assert not poller.is_in_flight("27")


@pytest.mark.asyncio
async def test_run_gives_up_with_timeout(remove_element_problem):
    client = AsyncMock()
    client.run_code.return_value = SubmissionHandle(submission_id="runcode_1", problem_id="27")
    client.poll_run.return_value = RunResult(problem_id="27", verdict=Verdict.PENDING)
    poller, _ = make_poller(client, max_attempts=2)

    result = await poller.run_and_await(remove_element_problem, "code", Language.PYTHON3)

    assert result.verdict is Verdict.TIMEOUT
    assert result.run_id == "runcode_1"
    assert client.poll_run.await_count == 2


@pytest.mark.asyncio
async def test_run_and_submission_share_the_guard(remove_element_problem):
    release = asyncio.Event()

    async def slow_poll(handle):
        await release.wait()
        return Submission(problem_id="27", verdict=Verdict.ACCEPTED)

    client = AsyncMock()
    client.submit.return_value = HANDLE
    client.poll_submission.side_effect = slow_poll
    poller, _ = make_poller(client)

    waiting = asyncio.ensure_future(
        poller.submit_and_await(remove_element_problem, "code", Language.PYTHON3)
    )
    while not client.poll_submission.await_count:
        await asyncio.sleep(0)

    with pytest.raises(SubmissionInProgressError):
        await poller.run_and_await(remove_element_problem, "code", Language.PYTHON3)

    release.set()
    await waiting
    client.run_code.assert_not_awaited()
