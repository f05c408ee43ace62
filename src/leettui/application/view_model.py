"""State exposed to the frontend for rendering."""

from dataclasses import dataclass, field
from pathlib import Path

from leettui.domain.models import Problem, ProblemSummary, RunResult, Submission


@dataclass
class ViewModel:
    problems: list[ProblemSummary] = field(default_factory=list)
    cursor: int = 0
    list_loading: bool = False
    detail_loading: bool = False
    scaffolding: bool = False
    problem: Problem | None = None
    solution_path: Path | None = None
    submission: Submission | None = None
    run_result: RunResult | None = None
    status_message: str = ""
    is_error: bool = False
    auth_required: bool = False
    editor_request: Path | None = None
    last_opened_dir: Path | None = None

    @property
    def selected(self) -> ProblemSummary | None:
        if 0 <= self.cursor < len(self.problems):
            return self.problems[self.cursor]
        return None

    def set_status(self, message: str, *, error: bool = False) -> None:
        self.status_message = message
        self.is_error = error

    def clear_status(self) -> None:
        self.status_message = ""
        self.is_error = False

    def take_editor_request(self) -> Path | None:
        """Pop the pending editor request, if any."""
        path, self.editor_request = self.editor_request, None
        return path
