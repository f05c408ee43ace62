"""Line-oriented terminal frontend: renders the view-model, reads commands."""

import asyncio
import os
import shlex
from collections.abc import Callable
from itertools import zip_longest
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from leettui.application import (
    AppState,
    AppStateMachine,
    BrowseState,
    DetailState,
    SetupState,
    SolveState,
    ViewModel,
)
from leettui.application.intents import (
    Back,
    ChangeFilter,
    CompleteSetup,
    Intent,
    MoveCursor,
    OpenEditor,
    OpenSetup,
    Quit,
    Refresh,
    Return,
    RunCode,
    Scaffold,
    SelectProblem,
    Submit,
)
from leettui.config import Config, save_config
from leettui.domain.exceptions import ConfigError
from leettui.domain.models import Difficulty, ProblemFilter
from leettui.infrastructure.parsers import URLParser, URLParsingError

PAGE_SIZE = 20

HELP = {
    BrowseState: (
        "j/k move, enter or <id> open, f <easy|medium|hard|all>, / <search|url>, "
        "r refresh, S setup, q quit"
    ),
    DetailState: "o scaffold and edit, b back, S setup, q quit",
    SolveState: "e edit, r run examples, s submit, b back, S setup, q quit",
}


class CommandError(ValueError):
    """Typed command is not understood."""

    pass


def parse_command(line: str, state: AppState) -> Intent | None:
    """
    Turn one typed line into an intent.

    Returns None for lines that do nothing in the current state.

    Raises:
        CommandError: Unknown command or bad argument
    """
    text = line.strip()
    command, _, argument = text.partition(" ")
    argument = argument.strip()

    if text == "":
        return SelectProblem() if isinstance(state, BrowseState) else None
    if text.isdigit():
        return SelectProblem(text)

    if command == "q":
        return Quit()
    if command == "S":
        return OpenSetup()
    if command in ("j", "k"):
        step = int(argument) if argument.isdigit() else 1
        return MoveCursor(step if command == "j" else -step)
    if command == "r":
        return RunCode() if isinstance(state, SolveState) else Refresh()
    if command == "b":
        return Return() if isinstance(state, SolveState) else Back()
    if command == "o":
        return OpenEditor() if isinstance(state, SolveState) else Scaffold()
    if command == "e":
        return OpenEditor()
    if command == "s":
        return Submit()

    current = state.filter if isinstance(state, BrowseState) else ProblemFilter()

    if command == "f":
        if not argument or argument.lower() == "all":
            return ChangeFilter(ProblemFilter(search=current.search, tags=current.tags))
        try:
            difficulty = Difficulty.parse(argument)
        except ValueError as e:
            raise CommandError(f"Unknown difficulty: {argument}") from e
        return ChangeFilter(ProblemFilter(difficulty, current.search, current.tags))

    if command == "/" or text.startswith("/"):
        query = text[1:].strip()
        if URLParser.looks_like_url(query):
            try:
                slug = URLParser.parse(query)
            except URLParsingError as e:
                raise CommandError(str(e)) from e
            query = slug.replace("-", " ")
        return ChangeFilter(ProblemFilter(current.difficulty, query or None, current.tags))

    raise CommandError(f"Unknown command: {text}")


def render(state: AppState, view: ViewModel) -> str:
    """Plain-text screen for the current state."""
    lines: list[str] = []

    if isinstance(state, SetupState):
        lines.append("== Setup ==")

    elif isinstance(state, BrowseState):
        title = f"== Problems: {state.filter} =="
        lines.append(title + (" (loading)" if view.list_loading else ""))
        start = max(0, min(view.cursor - PAGE_SIZE // 2, len(view.problems) - PAGE_SIZE))
        for index, summary in enumerate(view.problems[start : start + PAGE_SIZE], start=start):
            marker = ">" if index == view.cursor else " "
            mark = {"Solved": "v", "Attempted": "~"}.get(summary.status.value, " ")
            lock = " [paid]" if summary.paid_only else ""
            lines.append(
                f"{marker} {mark} {summary.id:>5}. {summary.title} "
                f"({summary.difficulty.value}, {summary.ac_rate:.1f}%){lock}"
            )
        if view.problems:
            lines.append(f"  [{view.cursor + 1}/{len(view.problems)}]")

    elif isinstance(state, (DetailState, SolveState)):
        problem = view.problem
        if problem is None:
            loading = " (loading)" if view.detail_loading else ""
            lines.append(f"== Problem {state.problem_id} =={loading}")
        else:
            lines.append(f"== {problem.id}. {problem.title} ==")
            url = URLParser.build_problem_url(problem.slug)
            lines.append(f"{problem.difficulty.value} | {problem.status.value} | {url}")
            if problem.tags:
                lines.append("Tags: " + ", ".join(problem.tags))
            if isinstance(state, DetailState):
                lines.append("")
                lines.append(problem.description)
                for number, hint in enumerate(problem.hints, start=1):
                    lines.append(f"Hint {number}: {hint}")

        if isinstance(state, SolveState):
            if view.scaffolding:
                lines.append("Scaffolding solution file...")
            if view.solution_path:
                lines.append(f"Solution: {view.solution_path}")
            if state.submission_in_flight:
                lines.append("Submission in flight...")
            if state.run_in_flight:
                lines.append("Running examples...")
            run_result = view.run_result
            if run_result is not None:
                lines.append(f"Run: {run_result.summary()}")
                cases = zip_longest(run_result.output, run_result.expected, fillvalue="?")
                for number, (output, expected) in enumerate(cases, start=1):
                    lines.append(f"  Example {number}: got {output}, expected {expected}")
                if run_result.detail:
                    lines.append(run_result.detail)
            submission = view.submission
            if submission is not None:
                lines.append(f"Verdict: {submission.summary()}")
                if submission.detail:
                    lines.append(submission.detail)

    if view.status_message:
        lines.append(("! " if view.is_error else "") + view.status_message)
    help_line = HELP.get(type(state))
    if help_line:
        lines.append(f"[{help_line}]")
    return "\n".join(lines)


class TerminalFrontend:
    """Reads commands from stdin and renders the machine's view after every change."""

    def __init__(
        self,
        machine: AppStateMachine,
        config_path: Path | None = None,
        *,
        reader: Callable[[str], str] = input,
        writer: Callable[[str], None] = print,
    ):
        self.machine = machine
        self.config_path = config_path
        self.reader = reader
        self.writer = writer

    async def run(self) -> None:
        machine = self.machine
        machine.start()
        pending_input: asyncio.Task | None = None
        pending_event: asyncio.Task | None = None

        try:
            while machine.running:
                machine.process_events()
                # The editor owns the terminal, so it only starts with no read outstanding.
                if pending_input is None:
                    await self._open_requested_editor()
                self.writer(render(machine.state, machine.view))

                if isinstance(machine.state, SetupState):
                    intent = await self._run_setup()
                    if intent is not None:
                        await machine.dispatch(intent)
                    continue

                if pending_input is None and not self._editor_pending():
                    pending_input = asyncio.ensure_future(self._read("> "))
                if pending_event is None:
                    pending_event = asyncio.ensure_future(machine.next_event())

                waiting = {task for task in (pending_input, pending_event) if task is not None}
                done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)
                if pending_event in done:
                    pending_event = None
                if pending_input is not None and pending_input in done:
                    line = pending_input.result()
                    pending_input = None
                    await self._handle_line(line)
        finally:
            if pending_event is not None:
                pending_event.cancel()
            if pending_input is not None:
                # The reader thread cannot be interrupted; stop waiting on it.
                pending_input.cancel()

    async def _handle_line(self, line: str | None) -> None:
        if line is None:
            await self.machine.dispatch(Quit())
            return

        try:
            intent = parse_command(line, self.machine.state)
        except CommandError as e:
            self.machine.view.set_status(str(e), error=True)
            return
        if intent is None:
            return

        if isinstance(intent, ChangeFilter) and intent.filter.search:
            known = self._find_by_slug(line)
            if known is not None:
                intent = SelectProblem(known)

        await self.machine.dispatch(intent)

    def _find_by_slug(self, line: str) -> str | None:
        query = line.strip()[1:].strip()
        if not URLParser.looks_like_url(query):
            return None
        slug = URLParser.parse(query)
        for summary in self.machine.view.problems:
            if summary.slug == slug:
                return summary.id
        return None

    async def _read(self, prompt: str) -> str | None:
        try:
            return await asyncio.to_thread(self.reader, prompt)
        except EOFError:
            return None

    async def _run_setup(self) -> Intent | None:
        current = self.machine.context.config if self.machine.context else None
        default_workspace = current.workspace_dir if current else str(Path.home() / "leetcode")
        default_language = current.language if current else "python3"
        default_editor = current.editor if current else os.environ.get("EDITOR", "vim")

        workspace = await self._ask("Workspace directory", default_workspace)
        if workspace is None or workspace == "q":
            return Quit()
        language = await self._ask("Language (python3, rust, cpp)", default_language)
        editor = await self._ask("Editor command", default_editor)
        session = await self._ask("LEETCODE_SESSION cookie (blank to stay signed out)", "")
        csrf = await self._ask("csrftoken cookie", "") if session else ""
        if language is None or editor is None:
            return Quit()

        try:
            config = Config(
                workspace_dir=workspace,
                language=language,
                editor=editor,
                leetcode_session=session or None,
                csrf_token=csrf or None,
            )
        except ValidationError as e:
            self.machine.view.set_status(f"Invalid setup: {e.errors()[0]['msg']}", error=True)
            return None

        try:
            save_config(config, self.config_path)
        except ConfigError as e:
            self.machine.view.set_status(str(e), error=True)
            return None
        return CompleteSetup(config)

    async def _ask(self, question: str, default: str) -> str | None:
        suffix = f" [{default}]" if default else ""
        answer = await self._read(f"{question}{suffix}: ")
        if answer is None:
            return None
        return answer.strip() or default

    def _editor_pending(self) -> bool:
        """A scaffold is running or its editor has yet to be opened."""
        view = self.machine.view
        return view.scaffolding or view.editor_request is not None

    async def _open_requested_editor(self) -> None:
        path = self.machine.view.take_editor_request()
        if path is None or self.machine.context is None:
            return

        command = shlex.split(self.machine.context.config.editor) + [str(path)]
        logger.info(f"Opening editor: {command}")
        try:
            process = await asyncio.create_subprocess_exec(*command, cwd=path.parent)
            await process.wait()
        except OSError as e:
            logger.error(f"Failed to launch editor {command[0]}: {e}")
            self.machine.view.set_status(f"Cannot launch editor {command[0]}: {e}", error=True)
            return

        if process.returncode:
            logger.warning(f"Editor exited with status {process.returncode}")

