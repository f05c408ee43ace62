from .credentials import (
    ChainedCredentialProvider,
    CredentialProvider,
    EnvironmentCredentialProvider,
    StaticCredentialProvider,
)
from .http_client import AsyncHTTPClient, HTTPResponse
from .leetcode_client import LeetCodeClient

__all__ = [
    "AsyncHTTPClient",
    "ChainedCredentialProvider",
    "CredentialProvider",
    "EnvironmentCredentialProvider",
    "HTTPResponse",
    "LeetCodeClient",
    "StaticCredentialProvider",
]
