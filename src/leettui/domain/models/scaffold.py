"""Value objects for solution scaffolding."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..exceptions import UnsupportedLanguageError


class Language(str, Enum):
    """Closed set of languages with a scaffold template. Values are judge slugs."""

    PYTHON3 = "python3"
    RUST = "rust"
    CPP = "cpp"

    @classmethod
    def parse(cls, value: str) -> "Language":
        key = value.strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise UnsupportedLanguageError(value) from None


_ALIASES = {
    "python": "python3",
    "py": "python3",
    "rs": "rust",
    "c++": "cpp",
    "cxx": "cpp",
}


@dataclass(frozen=True)
class ScaffoldSpec:
    """Where and how a problem's solution file is generated."""

    language: Language
    output_path: Path
    template: str

    @property
    def problem_dir(self) -> Path:
        """Top-level directory of the generated project."""
        path = self.output_path.parent
        while path.name == "src":
            path = path.parent
        return path
