"""Owned application context, built after configuration is loaded."""

from dataclasses import dataclass

from loguru import logger

from leettui.config import CONFIG_DIR, Config
from leettui.domain.models import Session
from leettui.infrastructure import (
    AsyncHTTPClient,
    ChainedCredentialProvider,
    CredentialProvider,
    EnvironmentCredentialProvider,
    LeetCodeClient,
    StaticCredentialProvider,
)
from leettui.services import ProblemCache, ProblemListStore, ScaffoldGenerator, SubmissionPoller

LIST_CACHE_FILENAME = "problems_cache.json"


@dataclass
class AppContext:
    """Everything a running session needs, threaded through the state machine."""

    config: Config
    session: Session | None
    client: LeetCodeClient
    cache: ProblemCache
    scaffolder: ScaffoldGenerator
    poller: SubmissionPoller
    http_client: AsyncHTTPClient | None = None
    list_store: ProblemListStore | None = None

    @classmethod
    def create(
        cls, config: Config, credential_provider: CredentialProvider | None = None
    ) -> "AppContext":
        if credential_provider is None:
            credential_provider = ChainedCredentialProvider(
                EnvironmentCredentialProvider(),
                StaticCredentialProvider(config.leetcode_session, config.csrf_token),
            )
        session = credential_provider.resolve()

        http_client = AsyncHTTPClient(timeout=config.request_timeout)
        client = LeetCodeClient(http_client, session=session, max_retries=config.max_retries)
        poller = SubmissionPoller(
            client,
            max_attempts=config.poll_max_attempts,
            initial_delay=config.poll_initial_delay,
            max_delay=config.poll_max_delay,
        )

        logger.debug(
            f"Created context (workspace={config.workspace_root}, language={config.language}, "
            f"signed_in={session is not None})"
        )
        return cls(
            config=config,
            session=session,
            client=client,
            cache=ProblemCache(client),
            scaffolder=ScaffoldGenerator(),
            poller=poller,
            http_client=http_client,
            list_store=ProblemListStore(CONFIG_DIR / LIST_CACHE_FILENAME),
        )

    async def close(self) -> None:
        if self.http_client is not None:
            await self.http_client.close()
