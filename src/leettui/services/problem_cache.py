"""In-memory cache for problem lists and problem details."""

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from typing import Any

from loguru import logger

from leettui.domain.exceptions import ProblemNotFoundError
from leettui.domain.models import Problem, ProblemFilter, ProblemSummary
from leettui.infrastructure.parsers import RemoteClientProtocol


class ProblemCache:
    """
    Memoizes remote problem fetches for the lifetime of the process.

    At most one remote fetch per key is in flight at any time. Concurrent
    callers for the same key share the pending fetch, and cancelling one of
    them does not cancel it for the others. A failed fetch is not cached.
    """

    def __init__(self, client: RemoteClientProtocol):
        self.client = client
        self._lists: dict[ProblemFilter, tuple[ProblemSummary, ...]] = {}
        self._details: dict[str, Problem] = {}
        self._slugs: dict[str, str] = {}
        self._pending: dict[tuple[str, Hashable], asyncio.Task] = {}

    async def get_list(self, problem_filter: ProblemFilter | None = None) -> list[ProblemSummary]:
        problem_filter = problem_filter or ProblemFilter()

        cached = self._lists.get(problem_filter)
        if cached is not None:
            logger.debug(f"Problem list cache hit: {problem_filter}")
            return list(cached)

        problems = await self._fetch_once(
            ("list", problem_filter),
            lambda: self.client.fetch_problem_list(problem_filter),
            lambda value: self._store_list(problem_filter, value),
        )
        return list(problems)

    async def get_detail(self, problem_id: str) -> Problem:
        cached = self._details.get(problem_id)
        if cached is not None:
            logger.debug(f"Problem detail cache hit: {problem_id}")
            return cached

        slug = self._slugs.get(problem_id)
        if slug is None:
            raise ProblemNotFoundError(problem_id)

        return await self._fetch_once(
            ("detail", problem_id),
            lambda: self.client.fetch_problem_detail(slug),
            self._store_detail,
        )

    def peek_list(self, problem_filter: ProblemFilter | None = None) -> list[ProblemSummary] | None:
        """Cached list without touching the network, or None."""
        cached = self._lists.get(problem_filter or ProblemFilter())
        return list(cached) if cached is not None else None

    def peek_detail(self, problem_id: str) -> Problem | None:
        """Cached detail without touching the network, or None."""
        return self._details.get(problem_id)

    def is_pending(self, kind: str, key: Hashable) -> bool:
        return (kind, key) in self._pending

    def invalidate_list(self, problem_filter: ProblemFilter | None = None) -> None:
        self._lists.pop(problem_filter or ProblemFilter(), None)

    def invalidate_status(self, problem_id: str) -> None:
        """Forget everything that carries a (possibly stale) status for the problem."""
        self._details.pop(problem_id, None)
        stale = [
            key
            for key, problems in self._lists.items()
            if any(p.id == problem_id for p in problems)
        ]
        for key in stale:
            del self._lists[key]
        logger.debug(f"Invalidated status of problem {problem_id} ({len(stale)} list(s) dropped)")

    async def refresh_status(self, problem_id: str) -> Problem:
        self.invalidate_status(problem_id)
        return await self.get_detail(problem_id)

    def remember(self, problems: list[ProblemSummary]) -> None:
        """Learn id to slug mappings without caching the list itself."""
        for problem in problems:
            self._slugs.setdefault(problem.id, problem.slug)

    def clear(self) -> None:
        self._lists.clear()
        self._details.clear()
        self._slugs.clear()

    async def _fetch_once(
        self,
        key: tuple[str, Hashable],
        loader: Callable[[], Awaitable[Any]],
        store: Callable[[Any], None],
    ) -> Any:
        task = self._pending.get(key)
        if task is None:
            logger.debug(f"Cache miss, fetching {key[0]}: {key[1]}")
            task = asyncio.ensure_future(self._load(key, loader, store))
            task.add_done_callback(_retrieve_exception)
            self._pending[key] = task
        else:
            logger.debug(f"Joining in-flight fetch for {key[0]}: {key[1]}")

        return await asyncio.shield(task)

    async def _load(
        self,
        key: tuple[str, Hashable],
        loader: Callable[[], Awaitable[Any]],
        store: Callable[[Any], None],
    ) -> Any:
        try:
            value = await loader()
            store(value)
            return value
        finally:
            self._pending.pop(key, None)

    def _store_list(self, problem_filter: ProblemFilter, problems: list[ProblemSummary]) -> None:
        self._lists[problem_filter] = tuple(problems)
        for problem in problems:
            self._slugs[problem.id] = problem.slug

    def _store_detail(self, problem: Problem) -> None:
        self._details[problem.id] = problem
        self._slugs[problem.id] = problem.slug


def _retrieve_exception(task: asyncio.Task) -> None:
    # Marks the exception as retrieved when every waiter was cancelled.
    if not task.cancelled():
        task.exception()
