"""Session, company mode and permission state shared by every command."""

import logging
from collections.abc import Iterable
from typing import Any, Optional

from .api.client import CorpCultureClient
from .api.companies import CompaniesAPI
from .api.permissions import PermissionsAPI
from .auth import login as auth_login
from .config import (
    ROLE_ADMIN,
    ROLE_CUSTOMER,
    ROLE_EMPLOYEE,
    Config,
    Session,
    delete_session,
    save_preferences,
    save_session,
)
from .exceptions import AuthenticationError, CorpCultureError, PermissionDeniedError
from .models import Company, Permission
from .permissions import (
    DEFAULT_ACTION,
    PermissionStore,
    has_all_permissions,
    has_any_permission,
    has_permission,
)

logger = logging.getLogger(__name__)


class AuthContext:
    """Signed-in user, token, company selection and permission list.

    The session file stands in for the browser cookie and the preferences
    file for local storage. Background fetches (permissions, company
    details) never raise; they log and leave empty state behind.
    """

    def __init__(self, config: Config):
        self.config = config
        self.client = CorpCultureClient(config)
        self.permission_store = PermissionStore(PermissionsAPI(self.client))
        self.company_details: Optional[list[Company]] = None

    @classmethod
    def restore(cls, config: Config) -> "AuthContext":
        """Build a context from persisted state and load what depends on it."""
        context = cls(config)
        if context.user_id:
            context.refresh_permissions()
        if context.company_enabled:
            context.refresh_company_details()
        return context

    @property
    def session(self) -> Session:
        """Current session; an empty one (no user, blank token) when signed out."""
        return self.config.session or Session()

    @property
    def user(self) -> Optional[dict[str, Any]]:
        return self.session.user

    @property
    def token(self) -> str:
        return self.session.token

    @property
    def user_id(self) -> Optional[str]:
        return self.session.user_id

    @property
    def role(self) -> Optional[int]:
        return self.session.role

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    @property
    def is_admin(self) -> bool:
        """Admin panel access: admins and employees both get it."""
        return self.role in (ROLE_ADMIN, ROLE_EMPLOYEE)

    @property
    def is_employee(self) -> bool:
        return self.role == ROLE_EMPLOYEE

    @property
    def assigned_scope(self) -> Optional[str]:
        """User id to scope assignment-based listings to, for employees only."""
        return self.user_id if self.is_employee else None

    @property
    def permissions(self) -> list[Permission]:
        return self.permission_store.permissions

    @property
    def permission_error(self) -> Optional[str]:
        return self.permission_store.error

    @property
    def company_enabled(self) -> bool:
        return self.config.preferences.company_enabled

    @company_enabled.setter
    def company_enabled(self, value: bool) -> None:
        self.config.preferences.company_enabled = bool(value)
        save_preferences(self.config.preferences)
        if value:
            self.refresh_company_details()

    @property
    def selected_company(self) -> Optional[str]:
        return self.config.preferences.selected_company

    @selected_company.setter
    def selected_company(self, value: Optional[str]) -> None:
        self.config.preferences.selected_company = value or None
        save_preferences(self.config.preferences)

    def set_session(self, session: Optional[Session]) -> None:
        """Replace the current session and persist it.

        Permissions are refetched only when the user id changes.
        """
        previous_user_id = self.user_id

        if session is None or not session.is_authenticated:
            self.config.session = None
            delete_session()
        else:
            self.config.session = session
            save_session(session)

        if self.user_id != previous_user_id:
            self.refresh_permissions()
        if self.company_enabled:
            self.refresh_company_details()

    def login(self, email: str, password: str) -> Session:
        """Sign in and make the new session current."""
        session = auth_login(self.config, email, password)
        self.set_session(session)
        return session

    def logout(self) -> None:
        """Forget the session, its permissions and any company details."""
        self.config.session = None
        delete_session()
        self.permission_store.clear()
        self.company_details = None

    def refresh_permissions(self) -> list[Permission]:
        """Reload the permission list for the current user."""
        if not self.user_id:
            self.permission_store.clear()
            return []
        return self.permission_store.fetch(self.user_id)

    def refresh_company_details(self) -> Optional[list[Company]]:
        """Reload the companies visible in company mode.

        Customers see the companies registered to their phone number;
        everyone else sees all companies.
        """
        if not self.user or not self.token or not self.company_enabled:
            return self.company_details

        companies_api = CompaniesAPI(self.client)
        phone = self.user.get("phone")
        try:
            if self.role == ROLE_CUSTOMER and phone:
                self.company_details = companies_api.for_phone(str(phone))
            else:
                self.company_details = companies_api.list()
        except CorpCultureError as e:
            logger.warning("Could not load company details: %s", e.message)
            self.company_details = None

        return self.company_details

    def visible_companies(self, companies_api: Optional[CompaniesAPI] = None) -> list[Company]:
        """Companies the user may see: their own as a customer, else all.

        Loaded company-mode details are used as they are. Customers never
        reach the admin-only company listing.
        """
        if self.company_details is not None:
            return self.company_details

        companies_api = companies_api or CompaniesAPI(self.client)
        if self.role == ROLE_CUSTOMER:
            phone = (self.user or {}).get("phone")
            return companies_api.for_phone(str(phone)) if phone else []
        return companies_api.list()

    def has_permission(self, key: str, action: str = DEFAULT_ACTION) -> bool:
        return has_permission(self.permissions, key, action, self.role)

    def has_any_permission(self, keys: Iterable[str], action: str = DEFAULT_ACTION) -> bool:
        return has_any_permission(self.permissions, keys, action, self.role)

    def has_all_permissions(self, keys: Iterable[str], action: str = DEFAULT_ACTION) -> bool:
        return has_all_permissions(self.permissions, keys, action, self.role)

    def require_session(self) -> Session:
        """Return the session or fail with a login hint."""
        if not self.is_authenticated:
            raise AuthenticationError("Not authenticated.")
        return self.session

    def require_permission(self, key: str, action: str = DEFAULT_ACTION) -> None:
        """Refuse before any request is made when a permission is missing."""
        if not self.has_permission(key, action):
            logger.debug("Denied %s on %s for user %s", action, key, self.user_id)
            raise PermissionDeniedError(key, action)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "AuthContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
