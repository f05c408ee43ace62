"""Parsers for extracting data from judge content."""

from .problem_content_parser import ProblemContentParser
from .url_parser import URLParser, URLParsingError, parse_problem_url
from .interfaces import (
    ContentParserProtocol,
    HTTPClientProtocol,
    ParsingError,
    RemoteClientProtocol,
    URLParserProtocol,
)

__all__ = [
    "ContentParserProtocol",
    "HTTPClientProtocol",
    "ParsingError",
    "ProblemContentParser",
    "RemoteClientProtocol",
    "URLParser",
    "URLParserProtocol",
    "URLParsingError",
    "parse_problem_url",
]
