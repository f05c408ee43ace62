"""On-disk copy of the unfiltered problem list, shown while a fresh one loads."""

import os
from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from leettui.domain.models import ProblemSummary

_PROBLEMS = TypeAdapter(list[ProblemSummary])


class ProblemListStore:
    """
    Persists the last fetched problem list as JSON.

    Failures to read or write are logged and otherwise ignored: the store only
    speeds up startup, the remote list stays authoritative.
    """

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> list[ProblemSummary] | None:
        """Stored problems, or None when there is no usable copy."""
        if not self.path.exists():
            return None

        try:
            problems = _PROBLEMS.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable problem list cache {self.path}: {e}")
            return None

        logger.debug(f"Loaded {len(problems)} problems from {self.path}")
        return problems

    def save(self, problems: list[ProblemSummary]) -> None:
        tmp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(_PROBLEMS.dump_json(problems))
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.warning(f"Failed to save problem list cache {self.path}: {e}")
            return

        logger.debug(f"Saved {len(problems)} problems to {self.path}")
