"""User configuration stored as a dotenv-style file."""

from pathlib import Path

from dotenv import dotenv_values, set_key, unset_key
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from leettui.domain.exceptions import ConfigError, UnsupportedLanguageError
from leettui.domain.models import Language, Session

CONFIG_DIR = Path.home() / ".leettui"
CONFIG_FILENAME = "config.env"


class Config(BaseModel):
    """Settings read at startup and written by the setup screen."""

    workspace_dir: str
    language: str = "python3"
    editor: str = "vim"
    leetcode_session: str | None = None
    csrf_token: str | None = None
    request_timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=0)
    poll_max_attempts: int = Field(default=20, ge=1)
    poll_initial_delay: float = Field(default=0.5, ge=0)
    poll_max_delay: float = Field(default=4.0, ge=0)

    @field_validator("workspace_dir", "language", "editor")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("language")
    @classmethod
    def _known_language(cls, value: str) -> str:
        try:
            return Language.parse(value).value
        except UnsupportedLanguageError as e:
            raise ValueError(str(e)) from e

    @field_validator("leetcode_session", "csrf_token")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @model_validator(mode="after")
    def _credentials_complete(self) -> "Config":
        if bool(self.leetcode_session) != bool(self.csrf_token):
            raise ValueError("leetcode_session and csrf_token must be set together")
        return self

    @property
    def workspace_root(self) -> Path:
        return Path(self.workspace_dir).expanduser()

    @property
    def is_authenticated(self) -> bool:
        return self.leetcode_session is not None

    def session(self) -> Session | None:
        return Session.from_tokens(self.leetcode_session, self.csrf_token)

    def to_env(self) -> dict[str, str | None]:
        """Values keyed the way they are stored in the config file."""
        return {
            name.upper(): None if value is None else str(value)
            for name, value in self.model_dump().items()
        }


def default_config_path() -> Path:
    return CONFIG_DIR / CONFIG_FILENAME


def load_config(path: Path | None = None) -> Config | None:
    """
    Load configuration from disk.

    Returns:
        Config, or None if the file does not exist yet (first run)

    Raises:
        ConfigError: If the file is unreadable or its values are invalid
    """
    path = path or default_config_path()
    if not path.exists():
        logger.info(f"No config at {path}, setup required")
        return None

    try:
        values = dotenv_values(path)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read config from {path}: {e}") from e

    data = {
        name: values[name.upper()]
        for name in Config.model_fields
        if values.get(name.upper()) is not None
    }

    try:
        config = Config(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {path}: {e}") from e

    logger.debug(f"Loaded config from {path}")
    return config


def save_config(config: Config, path: Path | None = None) -> Path:
    """Write configuration to disk, creating the directory if needed."""
    path = path or default_config_path()

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(mode=0o600, exist_ok=True)
        existing = dotenv_values(path)
        for key, value in config.to_env().items():
            if value is not None:
                set_key(path, key, value)
            elif key in existing:
                unset_key(path, key)
    except OSError as e:
        raise ConfigError(f"Failed to write config to {path}: {e}") from e

    logger.info(f"Saved config to {path}")
    return path
