"""Parser for LeetCode problem URLs."""

import re
from urllib.parse import urlparse

from loguru import logger

from .interfaces import URLParserProtocol

BASE_URL = "https://leetcode.com"


class URLParsingError(ValueError):
    """Invalid URL format or unable to parse URL."""

    pass


class URLParser(URLParserProtocol):
    """Parser for LeetCode problem URL formats."""

    # Matches: leetcode.com/problems/two-sum/ and leetcode.cn/problems/two-sum/description/
    PATTERN = r"leetcode\.(?:com|cn)/problems/([a-z0-9][a-z0-9-]*)"

    @classmethod
    def parse(cls, url: str) -> str:
        """
        Parse LeetCode problem URL and extract the problem slug.
        """
        logger.debug(f"Parsing URL: {url}")

        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise URLParsingError(f"Failed to parse URL: {url}") from e
        if not parsed.scheme or not parsed.netloc:
            raise URLParsingError(f"Invalid URL format: {url}")

        match = re.search(cls.PATTERN, url)
        if match:
            slug = match.group(1)
            logger.debug(f"Parsed URL to problem: {slug}")
            return slug

        # No pattern matched
        raise URLParsingError(
            f"Unrecognized LeetCode URL format: {url}. "
            "Expected format: https://leetcode.com/problems/<slug>/"
        )

    @classmethod
    def looks_like_url(cls, text: str) -> bool:
        return text.strip().startswith(("http://", "https://"))

    @classmethod
    def build_problem_url(cls, slug: str) -> str:
        """
        Build problem URL from slug.
        """
        url = f"{BASE_URL}/problems/{slug}/"

        logger.debug(f"Built problem URL: {url}")
        return url

    @classmethod
    def build_problemset_url(cls) -> str:
        return f"{BASE_URL}/problemset/"


def parse_problem_url(url: str) -> str:
    """Convenience function returning the slug of a problem URL."""
    return URLParser.parse(url)
