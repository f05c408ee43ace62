"""Credential providers resolving the optional judge session."""

import os
from typing import Protocol

from dotenv import load_dotenv
from loguru import logger

from leettui.domain.models import Session

SESSION_ENV = "LEETCODE_SESSION"
CSRF_ENV = "LEETCODE_CSRF_TOKEN"


class CredentialProvider(Protocol):
    """Supplies session tokens; where they come from is up to the provider."""

    def resolve(self) -> Session | None:
        """Return the current session, or None when signed out."""
        ...


class StaticCredentialProvider:
    """Tokens known up front, e.g. entered during setup or stored in config."""

    def __init__(self, session_id: str | None, csrf_token: str | None):
        self.session_id = session_id
        self.csrf_token = csrf_token

    def resolve(self) -> Session | None:
        return Session.from_tokens(self.session_id, self.csrf_token)


class EnvironmentCredentialProvider:
    """Tokens from environment variables, with a ``.env`` file loaded first."""

    def __init__(self, load_env_file: bool = True):
        self.load_env_file = load_env_file

    def resolve(self) -> Session | None:
        if self.load_env_file:
            load_dotenv()

        session = Session.from_tokens(os.getenv(SESSION_ENV), os.getenv(CSRF_ENV))
        if session:
            logger.debug(f"Using session from {SESSION_ENV}/{CSRF_ENV}")
        return session


class ChainedCredentialProvider:
    """First provider that yields a session wins."""

    def __init__(self, *providers: CredentialProvider):
        self.providers = providers

    def resolve(self) -> Session | None:
        for provider in self.providers:
            session = provider.resolve()
            if session:
                return session
        logger.info("No session configured, running signed out")
        return None
