"""Exception hierarchy shared by every layer."""


class LeetTuiError(Exception):
    """Base class for all expected application errors."""

    pass


class ConfigError(LeetTuiError):
    """Configuration is missing, unreadable or invalid."""

    pass


class IncompleteCredentialsError(ConfigError):
    """Only one of the two session tokens was supplied."""

    pass


class RemoteError(LeetTuiError):
    """Base class for errors talking to the judge service."""

    pass


class TransportError(RemoteError):
    """Network failure: timeout, connection reset, or server-side 5xx."""

    pass


class AuthError(RemoteError):
    """Session is missing or was rejected by the judge service."""

    pass


class RemoteRejectedError(RemoteError):
    """Request was understood but refused (malformed query, rate limit, ...)."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ProblemNotFoundError(LeetTuiError):
    """Problem id or slug is unknown."""

    def __init__(self, problem: str):
        super().__init__(f"Problem not found: {problem}")
        self.problem = problem


class ScaffoldError(LeetTuiError):
    """Base class for scaffold generation failures."""

    pass


class FilesystemError(ScaffoldError):
    """Solution file could not be written or read."""

    pass


class UnsupportedLanguageError(ScaffoldError):
    """No template strategy exists for the requested language."""

    def __init__(self, language: str):
        super().__init__(f"Unsupported language for scaffolding: {language}")
        self.language = language


class SubmissionInProgressError(LeetTuiError):
    """A submission for the same problem is still awaiting its verdict."""

    def __init__(self, problem_id: str):
        super().__init__(f"A submission for problem {problem_id} is already in flight")
        self.problem_id = problem_id
