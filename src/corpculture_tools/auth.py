"""Login and session checks against the CorpCulture auth endpoints."""

from typing import Any, Optional

from .api.client import CorpCultureClient
from .config import Config, Session
from .exceptions import APIResponseError, AuthenticationError

LOGIN_ERRORS = {
    "invalidPassword": "Incorrect password.",
    "invalidUser": "No account is registered with that email.",
}


def _session_from_response(data: dict[str, Any]) -> Session:
    user = data.get("user")
    token = data.get("token")
    if not user or not token:
        raise APIResponseError("Login response did not include a user and token")
    return Session(user=user, token=token)


def login(config: Config, email: str, password: str) -> Session:
    """Exchange credentials for a session.

    Nothing is persisted here; the caller decides where the session goes.
    """
    with CorpCultureClient(config, token="") as client:
        try:
            data = client.post("auth/login", {"email": email, "password": password})
        except AuthenticationError as e:
            message = LOGIN_ERRORS.get(e.error_type or "", e.message)
            raise AuthenticationError(message, error_type=e.error_type, server_message=e.server_message) from e

    return _session_from_response(data)


def register(config: Config, details: dict[str, Any]) -> Session:
    """Create an account and return its session."""
    with CorpCultureClient(config, token="") as client:
        data = client.post("auth/register", details)
    return _session_from_response(data)


def verify_session(config: Config, admin: bool = False) -> bool:
    """Ask the server whether the stored token is still accepted.

    With ``admin`` the admin-only check is used instead.
    """
    session = ensure_session(config)
    path = "auth/admin-auth" if admin else "auth/user-auth"
    with CorpCultureClient(config, token=session.token) as client:
        data = client.get(path, check_success=False)
    return bool(data.get("ok"))


def ensure_session(config: Config) -> Session:
    """Return the stored session or fail with a login hint."""
    session: Optional[Session] = config.session
    if not session or not session.is_authenticated:
        raise AuthenticationError("Not authenticated.")
    return session
