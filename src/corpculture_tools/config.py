"""Configuration and persisted session state for CorpCulture CLI tools."""

import json
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from platformdirs import user_config_dir

APP_NAME = "corpculture-tools"
CONFIG_DIR = Path(user_config_dir(APP_NAME))
SESSION_FILE = CONFIG_DIR / "session.json"
PREFERENCES_FILE = CONFIG_DIR / "preferences.yaml"

DEFAULT_SERVER_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 10.0
DEFAULT_ROWS_PER_PAGE = 10

ROLE_CUSTOMER = 0
ROLE_ADMIN = 1
ROLE_EMPLOYEE = 3


@dataclass
class Session:
    """Authenticated user and the opaque token the server issued for it."""

    user: Optional[dict[str, Any]] = None
    token: str = ""
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def user_id(self) -> Optional[str]:
        """Server id of the signed-in user."""
        if not self.user:
            return None
        return self.user.get("_id")

    @property
    def role(self) -> Optional[int]:
        if not self.user:
            return None
        return self.user.get("role")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user and self.token)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "user": self.user,
            "token": self.token,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        """Create from dictionary."""
        created_at = datetime.now()
        if data.get("created_at"):
            created_at = datetime.fromisoformat(data["created_at"])
        return cls(
            user=data.get("user"),
            token=data.get("token") or "",
            created_at=created_at,
        )


@dataclass
class Preferences:
    """Company-mode toggles kept between runs."""

    company_enabled: bool = False
    selected_company: Optional[str] = None
    rows_per_page: int = DEFAULT_ROWS_PER_PAGE


@dataclass
class Config:
    """Application configuration."""

    server_url: str = DEFAULT_SERVER_URL
    timeout: float = DEFAULT_TIMEOUT
    session: Optional[Session] = None
    preferences: Preferences = field(default_factory=Preferences)

    @property
    def api_url(self) -> str:
        """Base URL of the versioned REST API."""
        return f"{self.server_url.rstrip('/')}/api/v1"


def ensure_config_dir() -> None:
    """Ensure the configuration directory exists."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)


def load_env_config() -> tuple[str, float]:
    """Load server URL and request timeout from the environment or .env file."""
    load_dotenv()

    server_url = os.getenv("CORPCULTURE_SERVER_URL", DEFAULT_SERVER_URL)
    raw_timeout = os.getenv("CORPCULTURE_TIMEOUT")

    timeout = DEFAULT_TIMEOUT
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"CORPCULTURE_TIMEOUT must be a number of seconds, got {raw_timeout!r}")

    return server_url, timeout


def load_session() -> Optional[Session]:
    """Load the stored session, if any."""
    if not SESSION_FILE.exists():
        return None

    try:
        with open(SESSION_FILE) as f:
            data = json.load(f)
        session = Session.from_dict(data)
    except (json.JSONDecodeError, KeyError, ValueError, AttributeError):
        return None

    if not session.is_authenticated:
        return None
    return session


def save_session(session: Session) -> None:
    """Save the session to the config directory."""
    ensure_config_dir()
    with open(SESSION_FILE, "w") as f:
        json.dump(session.to_dict(), f, indent=2)


def delete_session() -> None:
    """Remove the stored session."""
    if SESSION_FILE.exists():
        SESSION_FILE.unlink()


def load_preferences() -> Preferences:
    """Load company-mode preferences from YAML.

    The file looks like:
    ```yaml
    company_enabled: true
    selected_company: 64f1c0ffee
    rows_per_page: 25
    ```
    """
    if not PREFERENCES_FILE.exists():
        return Preferences()

    try:
        with open(PREFERENCES_FILE) as f:
            data = yaml.safe_load(f) or {}

        selected = data.get("selected_company")
        if selected in ("", "null"):
            selected = None

        return Preferences(
            company_enabled=bool(data.get("company_enabled", False)),
            selected_company=str(selected) if selected is not None else None,
            rows_per_page=int(data.get("rows_per_page", DEFAULT_ROWS_PER_PAGE)),
        )
    except (yaml.YAMLError, AttributeError, TypeError, ValueError):
        return Preferences()


def save_preferences(preferences: Preferences) -> None:
    """Write preferences, dropping an empty company selection."""
    ensure_config_dir()
    data: dict[str, Any] = {
        "company_enabled": preferences.company_enabled,
        "rows_per_page": preferences.rows_per_page,
    }
    if preferences.selected_company:
        data["selected_company"] = preferences.selected_company

    with open(PREFERENCES_FILE, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False)


def load_config() -> Config:
    """Load complete application configuration."""
    server_url, timeout = load_env_config()

    return Config(
        server_url=server_url,
        timeout=timeout,
        session=load_session(),
        preferences=load_preferences(),
    )
