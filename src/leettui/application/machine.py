"""State machine driving the application."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import replace

from loguru import logger

from leettui.config import Config
from leettui.domain.exceptions import (
    AuthError,
    LeetTuiError,
    RemoteRejectedError,
    TransportError,
)
from leettui.domain.models import Language, ProblemFilter, ProblemStatus

from .context import AppContext
from .events import (
    DetailFailed,
    DetailLoaded,
    Event,
    ListFailed,
    ListLoaded,
    RunCompleted,
    RunFailed,
    ScaffoldFailed,
    Scaffolded,
    SubmissionCompleted,
    SubmissionFailed,
)
from .intents import (
    CompleteSetup,
    Intent,
    MoveCursor,
    OpenEditor,
    Refresh,
    RunCode,
    Scaffold,
    SelectProblem,
    Submit,
)
from .states import (
    AppState,
    BrowseState,
    DetailState,
    ExitState,
    SetupState,
    SolveState,
    transition,
)
from .view_model import ViewModel

SLOTS = ("list", "detail", "scaffold", "submission", "run")

AUTH_MESSAGE = "Not signed in or session expired. Press S to enter your session tokens."


def describe_error(error: BaseException) -> str:
    """Human readable status line for a failure."""
    if isinstance(error, AuthError):
        return AUTH_MESSAGE
    if isinstance(error, TransportError):
        return f"Network error: {error}. Press r to retry."
    if isinstance(error, RemoteRejectedError):
        return f"Request rejected by the judge: {error}"
    if isinstance(error, LeetTuiError):
        return str(error)
    return "Unexpected error, see the log file for details."


class AppStateMachine:
    """
    Owns the current state, the view-model and the background tasks.

    Intents arrive through ``dispatch``; background work runs in tasks, one per
    slot, and reports back by putting a result event on a queue that
    ``next_event`` folds into the state. State is only touched on the loop.
    """

    def __init__(
        self,
        context: AppContext | None,
        context_factory: Callable[[Config], AppContext] = AppContext.create,
    ):
        self.context = context
        self.context_factory = context_factory
        self.state: AppState = BrowseState() if context else SetupState()
        self.view = ViewModel()
        self._tasks: dict[str, asyncio.Task] = {}
        self._events: asyncio.Queue = asyncio.Queue()

    @property
    def running(self) -> bool:
        return not isinstance(self.state, ExitState)

    def task(self, slot: str) -> asyncio.Task | None:
        return self._tasks.get(slot)

    def start(self) -> None:
        """Run the initial state's entry work. Must be called on the loop."""
        logger.info(f"Starting in {type(self.state).__name__}")
        self._enter(None, self.state, None)

    async def dispatch(self, intent: Intent) -> AppState:
        """Apply an intent and return the resulting state."""
        previous = self.state
        if not self.running:
            return previous

        resolved = await self._resolve(intent)
        if resolved is None:
            return previous

        state = transition(previous, resolved)
        if isinstance(state, BrowseState) and self.view.problems:
            state = replace(state, cursor=min(state.cursor, len(self.view.problems) - 1))

        if state != previous:
            logger.debug(
                f"{type(previous).__name__} --{type(resolved).__name__}--> {type(state).__name__}"
            )
        self.state = state
        self._exit(previous, state)
        self._enter(previous, state, resolved)
        return state

    async def next_event(self) -> Event:
        """Wait for the next task result and apply it."""
        event = await self._events.get()
        self._apply(event)
        return event

    def process_events(self) -> int:
        """Apply every queued event without waiting. Returns how many were applied."""
        count = 0
        while not self._events.empty():
            self._apply(self._events.get_nowait())
            count += 1
        return count

    async def wait_idle(self) -> None:
        """Wait for all running tasks and apply their results."""
        while self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        self.process_events()

    async def shutdown(self) -> None:
        await self._cancel(*SLOTS)
        if self.context is not None:
            await self.context.close()
        logger.info("Shut down")

    # Intent resolution and guards

    async def _resolve(self, intent: Intent) -> Intent | None:
        state = self.state

        if isinstance(intent, SelectProblem) and isinstance(state, BrowseState):
            if intent.problem_id is not None:
                return intent
            selected = self.view.selected
            if selected is None:
                return None
            return SelectProblem(selected.id)

        if isinstance(intent, CompleteSetup) and isinstance(state, SetupState):
            return await self._replace_context(intent)

        if isinstance(intent, Scaffold) and isinstance(state, DetailState):
            problem = self.view.problem
            if problem is None or problem.id != state.problem_id:
                self.view.set_status("Problem is still loading.")
                return None
            return intent

        if isinstance(intent, (Submit, RunCode)) and isinstance(state, SolveState):
            if state.submission_in_flight:
                self.view.set_status("Submission already in flight, waiting for the verdict.")
                return intent
            if state.run_in_flight:
                self.view.set_status("Example run in progress, waiting for the result.")
                return intent
            if self.context is None or self.context.session is None:
                logger.warning(f"{type(intent).__name__} refused: no session configured")
                self.view.auth_required = True
                self.view.set_status(AUTH_MESSAGE, error=True)
                return None
            if self.view.solution_path is None:
                self.view.set_status("Nothing to send yet, the solution file is not ready.")
                return None
            if isinstance(intent, RunCode) and not self.view.problem.example_testcases:
                self.view.set_status("This problem has no example testcases to run.")
                return None
            return intent

        if isinstance(intent, OpenEditor) and isinstance(state, SolveState):
            if self.view.solution_path is not None:
                self.view.editor_request = self.view.solution_path
            return intent

        return intent

    async def _replace_context(self, intent: CompleteSetup) -> CompleteSetup | None:
        try:
            context = self.context_factory(intent.config)
        except LeetTuiError as e:
            logger.error(f"Setup failed: {e}")
            self.view.set_status(describe_error(e), error=True)
            return None

        previous, self.context = self.context, context
        if previous is not None:
            await previous.close()
        self.view.auth_required = False
        self.view.problems = []
        self.view.problem = None
        return intent

    # State entry and exit

    def _exit(self, previous: AppState, state: AppState) -> None:
        if isinstance(state, (ExitState, SetupState)) and type(previous) is not type(state):
            self._cancel_nowait(*SLOTS)
            return

        if isinstance(previous, BrowseState) and not isinstance(state, BrowseState):
            self._cancel_nowait("list")
        if isinstance(previous, DetailState) and not isinstance(state, (DetailState, SolveState)):
            self._cancel_nowait("detail")
        if isinstance(previous, SolveState) and not isinstance(state, SolveState):
            self._cancel_nowait("scaffold", "submission", "run")
            self.view.scaffolding = False

    def _enter(self, previous: AppState | None, state: AppState, intent: Intent | None) -> None:
        if isinstance(state, SetupState):
            self.view.set_status("Setup: choose a workspace directory, language and session.")

        elif isinstance(state, BrowseState):
            self.view.cursor = state.cursor
            if isinstance(intent, MoveCursor):
                return
            refresh = isinstance(intent, Refresh)
            filter_changed = (
                not isinstance(previous, BrowseState) or previous.filter != state.filter
            )
            if refresh or filter_changed:
                self._load_list(state.filter, force=refresh)

        elif isinstance(state, DetailState):
            if isinstance(previous, SolveState):
                self.view.submission = None
                self.view.run_result = None
            if not isinstance(previous, (DetailState, SolveState)):
                self._load_detail(state.problem_id)

        elif isinstance(state, SolveState):
            if not isinstance(previous, SolveState):
                self._scaffold(state.problem_id)
            elif state.submission_in_flight and not previous.submission_in_flight:
                self._submit(state.problem_id)
            elif state.run_in_flight and not previous.run_in_flight:
                self._run_examples(state.problem_id)

        elif isinstance(state, ExitState):
            self.view.set_status("Bye.")

    def _load_list(self, problem_filter: ProblemFilter, force: bool = False) -> None:
        cache = self.context.cache
        if force:
            cache.invalidate_list(problem_filter)

        cached = cache.peek_list(problem_filter)
        if cached is not None:
            self.view.problems = cached
            self.view.list_loading = False
            return

        # Only the unfiltered list is persisted.
        store = self.context.list_store if problem_filter == ProblemFilter() else None
        stored = store.load() if store is not None and not force else None

        self.view.list_loading = True
        if stored:
            cache.remember(stored)
            self.view.problems = stored
            self.view.set_status(f"Showing {len(stored)} saved problems, refreshing...")
        else:
            self.view.set_status(f"Loading problems ({problem_filter})...")

        async def work() -> Event:
            problems = await cache.get_list(problem_filter)
            if store is not None:
                await asyncio.to_thread(store.save, problems)
            return ListLoaded(problem_filter, problems)

        self._spawn("list", work, lambda e: ListFailed(problem_filter, e))

    def _load_detail(self, problem_id: str) -> None:
        if self.view.problem is not None and self.view.problem.id == problem_id:
            return

        cached = self.context.cache.peek_detail(problem_id)
        if cached is not None:
            self.view.problem = cached
            self.view.detail_loading = False
            return

        self.view.problem = None
        self.view.detail_loading = True
        self.view.set_status(f"Loading problem {problem_id}...")
        cache = self.context.cache

        async def work() -> Event:
            return DetailLoaded(problem_id, await cache.get_detail(problem_id))

        self._spawn("detail", work, lambda e: DetailFailed(problem_id, e))

    def _scaffold(self, problem_id: str) -> None:
        context = self.context
        problem = self.view.problem
        self.view.solution_path = None
        self.view.submission = None
        self.view.run_result = None
        self.view.scaffolding = True
        self.view.clear_status()

        async def work() -> Event:
            spec = context.scaffolder.spec_for(
                problem, context.config.language, context.config.workspace_root
            )
            path = await asyncio.to_thread(
                context.scaffolder.scaffold,
                problem,
                context.config.language,
                context.config.workspace_root,
            )
            return Scaffolded(problem_id, path, spec.problem_dir)

        self._spawn("scaffold", work, lambda e: ScaffoldFailed(problem_id, e))

    def _submit(self, problem_id: str) -> None:
        context = self.context
        problem = self.view.problem
        path = self.view.solution_path
        self.view.submission = None
        self.view.set_status(f"Submitting {path.name}...")

        async def work() -> Event:
            language = Language.parse(context.config.language)
            source = await asyncio.to_thread(context.scaffolder.read_solution, path, language)
            submission = await context.poller.submit_and_await(problem, source, language)
            return SubmissionCompleted(problem_id, submission)

        self._spawn("submission", work, lambda e: SubmissionFailed(problem_id, e))

    def _run_examples(self, problem_id: str) -> None:
        context = self.context
        problem = self.view.problem
        path = self.view.solution_path
        self.view.run_result = None
        count = len(problem.example_testcases)
        self.view.set_status(f"Running {path.name} on {count} example(s)...")

        async def work() -> Event:
            language = Language.parse(context.config.language)
            source = await asyncio.to_thread(context.scaffolder.read_solution, path, language)
            result = await context.poller.run_and_await(problem, source, language)
            return RunCompleted(problem_id, result)

        self._spawn("run", work, lambda e: RunFailed(problem_id, e))

    # Tasks

    def _spawn(
        self,
        slot: str,
        work: Callable[[], Awaitable[Event]],
        on_error: Callable[[BaseException], Event],
    ) -> None:
        self._cancel_nowait(slot)
        self._tasks[slot] = asyncio.create_task(self._run(slot, work, on_error))

    async def _run(
        self,
        slot: str,
        work: Callable[[], Awaitable[Event]],
        on_error: Callable[[BaseException], Event],
    ) -> None:
        try:
            event = await work()
        except asyncio.CancelledError:
            logger.debug(f"Task {slot} cancelled")
            raise
        except LeetTuiError as e:
            logger.error(f"Task {slot} failed: {e}")
            event = on_error(e)
        except Exception as e:
            logger.exception(f"Unexpected error in task {slot}: {e}")
            event = on_error(e)
        finally:
            if self._tasks.get(slot) is asyncio.current_task():
                del self._tasks[slot]

        self._events.put_nowait(event)

    def _cancel_nowait(self, *slots: str) -> list[asyncio.Task]:
        cancelled = []
        for slot in slots:
            task = self._tasks.pop(slot, None)
            if task is not None and not task.done():
                task.cancel()
                cancelled.append(task)
        return cancelled

    async def _cancel(self, *slots: str) -> None:
        cancelled = self._cancel_nowait(*slots)
        if cancelled:
            await asyncio.gather(*cancelled, return_exceptions=True)

    # Events

    def _apply(self, event: Event) -> None:
        if not self._is_current(event):
            logger.warning(
                f"Discarding stale {type(event).__name__} in {type(self.state).__name__}"
            )
            return

        view = self.view

        if isinstance(event, ListLoaded):
            view.list_loading = False
            view.problems = event.problems
            if view.cursor >= len(view.problems):
                view.cursor = max(0, len(view.problems) - 1)
                self.state = replace(self.state, cursor=view.cursor)
            view.set_status(f"{len(event.problems)} problems ({event.filter})")

        elif isinstance(event, ListFailed):
            view.list_loading = False
            self._fail(event.error)

        elif isinstance(event, DetailLoaded):
            view.detail_loading = False
            view.problem = event.problem
            view.clear_status()

        elif isinstance(event, DetailFailed):
            view.detail_loading = False
            self._fail(event.error)

        elif isinstance(event, Scaffolded):
            view.scaffolding = False
            view.solution_path = event.path
            view.last_opened_dir = event.directory
            view.editor_request = event.path
            view.set_status(f"Solution file: {event.path}")

        elif isinstance(event, ScaffoldFailed):
            view.scaffolding = False
            self._cancel_nowait("submission", "run")
            self.state = DetailState(problem_id=self.state.problem_id, origin=self.state.origin)
            self._fail(event.error)

        elif isinstance(event, SubmissionCompleted):
            self.state = replace(self.state, submission_in_flight=False)
            submission = event.submission
            view.submission = submission
            if submission.is_accepted:
                self._mark_solved(event.problem_id)
            view.set_status(submission.summary(), error=not submission.is_accepted)

        elif isinstance(event, SubmissionFailed):
            self.state = replace(self.state, submission_in_flight=False)
            self._fail(event.error)

        elif isinstance(event, RunCompleted):
            self.state = replace(self.state, run_in_flight=False)
            view.run_result = event.result
            view.set_status(f"Run: {event.result.summary()}", error=not event.result.is_correct)

        elif isinstance(event, RunFailed):
            self.state = replace(self.state, run_in_flight=False)
            self._fail(event.error)

    def _is_current(self, event: Event) -> bool:
        state = self.state
        if isinstance(event, (ListLoaded, ListFailed)):
            return isinstance(state, BrowseState) and state.filter == event.filter
        if isinstance(event, DetailLoaded):
            return (
                isinstance(state, (DetailState, SolveState))
                and state.problem_id == event.problem_id
            )
        if isinstance(event, DetailFailed):
            return isinstance(state, DetailState) and state.problem_id == event.problem_id
        if isinstance(event, (Scaffolded, ScaffoldFailed)):
            return isinstance(state, SolveState) and state.problem_id == event.problem_id
        if isinstance(event, (SubmissionCompleted, SubmissionFailed)):
            return (
                isinstance(state, SolveState)
                and state.submission_in_flight
                and state.problem_id == event.problem_id
            )
        if isinstance(event, (RunCompleted, RunFailed)):
            return (
                isinstance(state, SolveState)
                and state.run_in_flight
                and state.problem_id == event.problem_id
            )
        return False

    def _fail(self, error: BaseException) -> None:
        if isinstance(error, AuthError):
            self.view.auth_required = True
        self.view.set_status(describe_error(error), error=True)

    def _mark_solved(self, problem_id: str) -> None:
        self.context.cache.invalidate_status(problem_id)
        if self.view.problem is not None and self.view.problem.id == problem_id:
            self.view.problem = self.view.problem.with_status(ProblemStatus.SOLVED)
        self.view.problems = [
            replace(summary, status=ProblemStatus.SOLVED) if summary.id == problem_id else summary
            for summary in self.view.problems
        ]
        logger.info(f"Problem {problem_id} accepted, marked solved")
