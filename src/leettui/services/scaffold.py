"""Service for generating local solution files."""

from pathlib import Path

from loguru import logger

from leettui.domain.exceptions import FilesystemError, UnsupportedLanguageError
from leettui.domain.models import Language, Problem, ScaffoldSpec

from .templates import TEMPLATES, LanguageTemplate


class ScaffoldGenerator:
    """Materializes a ready-to-edit solution file per problem and language."""

    def __init__(self, templates: dict[Language, LanguageTemplate] | None = None):
        self.templates = templates if templates is not None else TEMPLATES

    def template_for(self, language: Language | str) -> LanguageTemplate:
        if not isinstance(language, Language):
            language = Language.parse(language)

        template = self.templates.get(language)
        if template is None:
            raise UnsupportedLanguageError(str(language.value))
        return template

    def spec_for(
        self, problem: Problem, language: Language | str, workspace_root: Path
    ) -> ScaffoldSpec:
        """Output location for a problem. Depends only on the arguments."""
        template = self.template_for(language)
        problem_dir = Path(workspace_root).expanduser() / f"{problem.id}-{problem.slug}"
        return ScaffoldSpec(
            language=template.language,
            output_path=problem_dir / template.source_path,
            template=template.name,
        )

    def scaffold(self, problem: Problem, language: Language | str, workspace_root: Path) -> Path:
        """
        Generate the solution file unless it already exists.

        Returns:
            Path of the solution file, existing or newly written

        Raises:
            UnsupportedLanguageError: No template for the language
            FilesystemError: Workspace is not writable
        """
        spec = self.spec_for(problem, language, workspace_root)
        path = spec.output_path

        if path.exists():
            logger.debug(f"Solution already exists, keeping it: {path}")
            return path

        template = self.templates[spec.language]
        content = template.render(problem)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            for relative, metadata in template.metadata(problem).items():
                metadata_path = spec.problem_dir / relative
                if not metadata_path.exists():
                    metadata_path.write_text(metadata, encoding="utf-8")
            with path.open("x", encoding="utf-8") as handle:
                handle.write(content)
        except FileExistsError:
            logger.debug(f"Solution appeared concurrently, keeping it: {path}")
            return path
        except OSError as e:
            logger.error(f"Failed to scaffold {path}: {e}")
            raise FilesystemError(f"Cannot write {path}: {e.strerror or e}") from e

        logger.info(f"Scaffolded problem {problem.id} ({spec.template}) at {path}")
        return path

    def read_solution(self, path: Path, language: Language | str) -> str:
        """Read a solution file and return only the part that gets submitted."""
        template = self.template_for(language)
        try:
            source = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise FilesystemError(
                f"Cannot read {path}: {e.strerror or e}. Scaffold the problem first."
            ) from e
        return template.extract_solution(source)
