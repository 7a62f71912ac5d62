"""Shared pytest fixtures for CorpCulture tools tests."""

import json
from pathlib import Path

import pytest

from corpculture_tools import config as config_module
from corpculture_tools.config import Config, Preferences, Session

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SERVER_URL = "http://corpculture.test"
API_URL = f"{SERVER_URL}/api/v1"


def load_fixture(name: str) -> dict:
    """Load a JSON fixture file."""
    return json.loads((FIXTURES_DIR / name).read_text())


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    """Keep session and preference files out of the real config directory."""
    monkeypatch.setattr(config_module, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(config_module, "SESSION_FILE", tmp_path / "session.json")
    monkeypatch.setattr(config_module, "PREFERENCES_FILE", tmp_path / "preferences.yaml")
    return tmp_path


@pytest.fixture
def admin_user():
    return {
        "_id": "u-admin",
        "name": "Asha Raman",
        "email": "asha@corpculture.test",
        "phone": "9840012345",
        "role": 1,
    }


@pytest.fixture
def employee_user():
    return {
        "_id": "u-employee",
        "name": "Karthik S",
        "email": "karthik@corpculture.test",
        "phone": "9500011122",
        "role": 3,
    }


@pytest.fixture
def customer_user():
    return {
        "_id": "u-customer",
        "name": "Ravi Kumar",
        "email": "ravi@acme.test",
        "phone": "9840012345",
        "role": 0,
    }


def make_config(user=None, token="test-token", **preferences) -> Config:
    session = Session(user=user, token=token) if user else None
    return Config(
        server_url=SERVER_URL,
        timeout=5.0,
        session=session,
        preferences=Preferences(**preferences),
    )


@pytest.fixture
def mock_config(admin_user):
    """Config signed in as an admin."""
    return make_config(admin_user)


@pytest.fixture
def employee_config(employee_user):
    """Config signed in as an employee."""
    return make_config(employee_user)


@pytest.fixture
def customer_config(customer_user):
    """Config signed in as a customer."""
    return make_config(customer_user)


@pytest.fixture
def anonymous_config():
    """Config with no session."""
    return make_config()


@pytest.fixture
def login_response():
    return load_fixture("login_response.json")


@pytest.fixture
def permissions_response():
    return load_fixture("permissions_response.json")


@pytest.fixture
def companies_response():
    return load_fixture("companies_response.json")


@pytest.fixture
def credits_response():
    return load_fixture("credits_response.json")


@pytest.fixture
def company_credits_response():
    return load_fixture("company_credits_response.json")


@pytest.fixture
def rentals_response():
    return load_fixture("rentals_response.json")


@pytest.fixture
def activity_logs_response():
    return load_fixture("activity_logs_response.json")


@pytest.fixture
def leaves_response():
    return load_fixture("leaves_response.json")


@pytest.fixture
def orders_response():
    return load_fixture("orders_response.json")
