"""Unit tests for the problem cache."""

import asyncio

import pytest
from unittest.mock import AsyncMock

from leettui.domain.exceptions import ProblemNotFoundError, TransportError
from leettui.domain.models import (
    Difficulty,
    Problem,
    ProblemFilter,
    ProblemStatus,
    ProblemSummary,
)
from leettui.services import ProblemCache

SUMMARY = ProblemSummary(
    id="27", title="Remove Element", slug="remove-element", difficulty=Difficulty.EASY
)
PROBLEM = Problem(
    id="27",
    question_id="27",
    slug="remove-element",
    title="Remove Element",
    difficulty=Difficulty.EASY,
)


def make_client():
    client = AsyncMock()
    client.fetch_problem_list.return_value = [SUMMARY]
    client.fetch_problem_detail.return_value = PROBLEM
    return client


@pytest.mark.asyncio
async def test_list_is_fetched_once_per_filter():
    client = make_client()
    cache = ProblemCache(client)
    easy = ProblemFilter(difficulty=Difficulty.EASY)

    first = await cache.get_list(easy)
    second = await cache.get_list(easy)
    await cache.get_list(ProblemFilter())

    assert first == second == [SUMMARY]
    assert client.fetch_problem_list.await_count == 2
    assert cache.peek_list(easy) == [SUMMARY]


@pytest.mark.asyncio
async def test_detail_requires_known_slug():
    client = make_client()
    cache = ProblemCache(client)

    with pytest.raises(ProblemNotFoundError):
        await cache.get_detail("27")

    client.fetch_problem_detail.assert_not_called()


@pytest.mark.asyncio
async def test_detail_resolved_through_list_slug():
    client = make_client()
    cache = ProblemCache(client)
    await cache.get_list()

    problem = await cache.get_detail("27")
    again = await cache.get_detail("27")

    assert problem is again is PROBLEM
    client.fetch_problem_detail.assert_awaited_once_with("remove-element")


@pytest.mark.asyncio
async def test_concurrent_requests_share_one_fetch():
    release = asyncio.Event()

    async def slow_detail(slug):
        await release.wait()
        return PROBLEM

    client = make_client()
    client.fetch_problem_detail.side_effect = slow_detail
    cache = ProblemCache(client)
    await cache.get_list()

    waiters = [asyncio.create_task(cache.get_detail("27")) for _ in range(3)]
    await asyncio.sleep(0)
    assert cache.is_pending("detail", "27")

    release.set()
    results = await asyncio.gather(*waiters)

    assert all(result is PROBLEM for result in results)
    assert client.fetch_problem_detail.await_count == 1
    assert not cache.is_pending("detail", "27")


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_shared_fetch():
    release = asyncio.Event()

    async def slow_detail(slug):
        await release.wait()
        return PROBLEM

    client = make_client()
    client.fetch_problem_detail.side_effect = slow_detail
    cache = ProblemCache(client)
    await cache.get_list()

    cancelled = asyncio.create_task(cache.get_detail("27"))
    survivor = asyncio.create_task(cache.get_detail("27"))
    await asyncio.sleep(0)

    cancelled.cancel()
    release.set()

    assert await survivor is PROBLEM
    with pytest.raises(asyncio.CancelledError):
        await cancelled
    assert cache.peek_detail("27") is PROBLEM


@pytest.mark.asyncio
async def test_failed_fetch_is_not_cached():
    client = make_client()
    client.fetch_problem_list.side_effect = [TransportError("offline"), [SUMMARY]]
    cache = ProblemCache(client)

    with pytest.raises(TransportError):
        await cache.get_list()
    assert cache.peek_list() is None

    assert await cache.get_list() == [SUMMARY]
    assert client.fetch_problem_list.await_count == 2


@pytest.mark.asyncio
async def test_invalidate_status_drops_detail_and_lists_containing_problem():
    client = make_client()
    solved = PROBLEM.with_status(ProblemStatus.SOLVED)
    client.fetch_problem_detail.side_effect = [PROBLEM, solved]
    cache = ProblemCache(client)
    easy = ProblemFilter(difficulty=Difficulty.EASY)
    await cache.get_list(easy)
    await cache.get_detail("27")

    refreshed = await cache.refresh_status("27")

    assert refreshed.status is ProblemStatus.SOLVED
    assert cache.peek_list(easy) is None
    assert client.fetch_problem_detail.await_count == 2


@pytest.mark.asyncio
async def test_invalidate_list_forces_refetch():
    client = make_client()
    cache = ProblemCache(client)
    await cache.get_list()

    cache.invalidate_list()
    await cache.get_list()

    assert client.fetch_problem_list.await_count == 2


@pytest.mark.asyncio
async def test_concurrent_list_requests_fetch_once_per_filter():
    easy = ProblemFilter(difficulty=Difficulty.EASY)
    release = asyncio.Event()
    started = []

    async def slow_list(problem_filter):
        started.append(problem_filter)
        await release.wait()
        return [SUMMARY]

    client = make_client()
    client.fetch_problem_list.side_effect = slow_list
    cache = ProblemCache(client)

    waiters = [asyncio.ensure_future(cache.get_list(easy)) for _ in range(5)]
    waiters.append(asyncio.ensure_future(cache.get_list(ProblemFilter())))
    while len(started) < 2:
        await asyncio.sleep(0)

    assert cache.is_pending("list", easy)
    assert cache.is_pending("list", ProblemFilter())

    release.set()
    results = await asyncio.gather(*waiters)

    assert results == [[SUMMARY]] * 6
    assert sorted(started, key=str) == [easy, ProblemFilter()]
    assert client.fetch_problem_list.await_count == 2
    assert not cache.is_pending("list", easy)


@pytest.mark.asyncio
async def test_shared_list_failure_is_refetched_on_next_call():
    easy = ProblemFilter(difficulty=Difficulty.EASY)
    release = asyncio.Event()
    calls = 0

    async def flaky_list(problem_filter):
        nonlocal calls
        calls += 1
        if calls == 1:
            await release.wait()
            raise TransportError("connection reset")
        return [SUMMARY]

    client = make_client()
    client.fetch_problem_list.side_effect = flaky_list
    cache = ProblemCache(client)

    waiters = [asyncio.ensure_future(cache.get_list(easy)) for _ in range(3)]
    while calls < 1:
        await asyncio.sleep(0)
    assert cache.is_pending("list", easy)

    release.set()
    results = await asyncio.gather(*waiters, return_exceptions=True)

    assert all(isinstance(result, TransportError) for result in results)
    assert calls == 1
    assert cache.peek_list(easy) is None

    assert await cache.get_list(easy) == [SUMMARY]
    assert calls == 2


@pytest.mark.asyncio
async def test_clear_forgets_known_slugs():
    client = make_client()
    cache = ProblemCache(client)
    await cache.get_list()

    cache.clear()

    assert cache.peek_list() is None
    with pytest.raises(ProblemNotFoundError):
        await cache.get_detail("27")
    client.fetch_problem_detail.assert_not_called()


@pytest.mark.asyncio
async def test_remember_resolves_slugs_without_caching_the_list():
    client = make_client()
    cache = ProblemCache(client)

    cache.remember([SUMMARY])
    problem = await cache.get_detail("27")

    assert problem is PROBLEM
    assert cache.peek_list() is None
    client.fetch_problem_detail.assert_awaited_once_with("remove-element")
