"""Parser for converting problem description markup into plain text."""

import re

from bs4 import BeautifulSoup, ParserRejectedMarkup
from loguru import logger

from leettui.domain.models import Example

from .interfaces import ContentParserProtocol, ParsingError

BLOCK_TAGS = [
    "p",
    "div",
    "pre",
    "ul",
    "ol",
    "li",
    "h1",
    "h2",
    "h3",
    "h4",
    "blockquote",
    "table",
    "tr",
]

INPUT_PATTERN = re.compile(r"^\s*Input:\s*(.*)$")
OUTPUT_PATTERN = re.compile(r"^\s*Output:\s*(.*)$")
EXPLANATION_PATTERN = re.compile(r"^\s*Explanation:\s*(.*)$")
SECTION_PATTERN = re.compile(r"^\s*(Example\s*\d*:|Constraints:|Follow[- ]up)", re.IGNORECASE)


class ProblemContentParser(ContentParserProtocol):
    """Converts the judge's HTML problem statements into terminal-friendly text."""

    def __init__(self, features: str = "lxml"):
        """
        Initialize parser.

        Args:
            features: BeautifulSoup tree builder to use
        """
        self.features = features

    def to_text(self, html: str | None) -> str:
        """
        Convert description HTML into plain text.

        Falls back to the raw markup if it cannot be parsed.
        """
        if not html:
            return ""

        try:
            return self._render(html)
        except ParsingError:
            logger.warning("Failed to parse problem description, using raw markup", exc_info=True)
            return html.strip()

    def extract_examples(self, text: str) -> list[Example]:
        """Extract Input/Output/Explanation triples from a plain-text description."""
        examples: list[Example] = []
        current: dict[str, str | None] | None = None

        def flush() -> None:
            if current and current["output"] is not None:
                examples.append(
                    Example(
                        input=current["input"] or "",
                        output=current["output"],
                        explanation=current["explanation"],
                    )
                )

        for line in text.splitlines():
            input_match = INPUT_PATTERN.match(line)
            if input_match and input_match.group(1):
                flush()
                current = {
                    "input": input_match.group(1).strip(),
                    "output": None,
                    "explanation": None,
                }
                continue

            if current is None or not line.strip():
                continue

            output_match = OUTPUT_PATTERN.match(line)
            explanation_match = EXPLANATION_PATTERN.match(line)

            if output_match and current["output"] is None:
                current["output"] = output_match.group(1).strip()
            elif explanation_match and current["output"] is not None:
                current["explanation"] = explanation_match.group(1).strip()
            elif current["explanation"] is not None and not SECTION_PATTERN.match(line):
                current["explanation"] = f"{current['explanation']} {line.strip()}"
            else:
                flush()
                current = None

        flush()
        logger.debug(f"Extracted {len(examples)} example(s) from description")
        return examples

    def _render(self, html: str) -> str:
        try:
            soup = BeautifulSoup(html, self.features)
        except ParserRejectedMarkup as e:
            raise ParsingError(f"Failed to parse description markup: {e}") from e

        self._mark_structure(soup)
        return self._normalize(soup.get_text())

    def _mark_structure(self, soup: BeautifulSoup) -> None:
        """Insert the line breaks and markers that block elements imply."""
        for br in soup.find_all("br"):
            br.replace_with("\n")

        # 10<sup>4</sup> -> 10^4
        for sup in soup.find_all("sup"):
            sup.insert_before("^")

        for item in soup.find_all("li"):
            item.insert_before("- ")

        for block in soup.find_all(BLOCK_TAGS):
            block.insert_after("\n")

    def _normalize(self, text: str) -> str:
        lines = [line.rstrip() for line in text.replace("\xa0", " ").splitlines()]

        result: list[str] = []
        for line in lines:
            if not line.strip():
                if result and result[-1] != "":
                    result.append("")
                continue
            result.append(line)

        while result and result[-1] == "":
            result.pop()

        return "\n".join(result)
