"""Session credentials for authenticated judge operations."""

from dataclasses import dataclass, field

from ..exceptions import IncompleteCredentialsError


@dataclass(frozen=True)
class Session:
    """The two opaque cookies the judge uses to identify a signed-in user."""

    session_id: str = field(repr=False)
    csrf_token: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.session_id or not self.csrf_token:
            raise IncompleteCredentialsError("Session requires both a session id and a CSRF token")

    @classmethod
    def from_tokens(cls, session_id: str | None, csrf_token: str | None) -> "Session | None":
        """
        Build a session from optional tokens.

        Returns None when both tokens are absent. Raises
        IncompleteCredentialsError when only one of them is present.
        """
        session_id = (session_id or "").strip()
        csrf_token = (csrf_token or "").strip()

        if not session_id and not csrf_token:
            return None
        if not session_id or not csrf_token:
            missing = "session id" if not session_id else "CSRF token"
            raise IncompleteCredentialsError(f"Incomplete credentials: {missing} is missing")

        return cls(session_id=session_id, csrf_token=csrf_token)

    @property
    def cookies(self) -> dict[str, str]:
        return {"LEETCODE_SESSION": self.session_id, "csrftoken": self.csrf_token}
