"""Custom exception hierarchy for CorpCulture CLI."""

from typing import Optional

import click
from rich.console import Console


class CorpCultureError(click.ClickException):
    """Base exception for all CorpCulture CLI errors.

    ``server_message`` holds the ``message`` from the server's error
    envelope, when the server sent one.
    """

    exit_code = 1

    def __init__(self, message: str, server_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.server_message = server_message

    def show(self, file=None) -> None:
        """Display error with Rich formatting."""
        console = Console(stderr=True)
        console.print(f"[red]Error:[/red] {self.format_message()}")

    def format_message(self) -> str:
        """Override in subclasses for custom formatting."""
        return self.message


class AuthenticationError(CorpCultureError):
    """Login failed or the session token was rejected."""

    def __init__(self, message: str, error_type: Optional[str] = None, server_message: Optional[str] = None):
        super().__init__(message, server_message=server_message)
        self.error_type = error_type

    def format_message(self) -> str:
        return f"{self.message}\n\nRun 'corp auth login' to sign in again."


class PermissionDeniedError(CorpCultureError):
    """The current user lacks the permission an action requires."""

    def __init__(self, key: str, action: str = "view", message: Optional[str] = None,
                 server_message: Optional[str] = None):
        super().__init__(message or f"You do not have '{action}' permission on '{key}'.", server_message=server_message)
        self.key = key
        self.action = action


class NotFoundError(CorpCultureError):
    """Requested record does not exist on the server."""

    def __init__(self, message: str = "Record not found.", error_type: Optional[str] = None,
                 server_message: Optional[str] = None):
        super().__init__(message, server_message=server_message)
        self.error_type = error_type


class NetworkError(CorpCultureError):
    """Network connectivity issue."""

    def format_message(self) -> str:
        return f"{self.message}\n\nCheck that the server is reachable and try again."


class APIResponseError(CorpCultureError):
    """API returned an error status or an unexpected response."""

    def __init__(self, message: str, status_code: Optional[int] = None, server_message: Optional[str] = None):
        super().__init__(message, server_message=server_message)
        self.status_code = status_code
