"""Permission list state and the checks that gate commands on it."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

from .config import ROLE_ADMIN
from .exceptions import CorpCultureError
from .models import Permission

logger = logging.getLogger(__name__)

DEFAULT_ACTION = "view"
FETCH_FAILED = "Failed to fetch permissions"

ACTIONS = ("view", "add", "edit", "delete")

# Section keys, as configured in the admin menu settings
COMPANY_LIST = "reportsCompanyList"
CREDITS = "otherSettingsCredit"
EMPLOYEES = "otherSettingsEmployee"
EMPLOYEE_REPORTS = "reportsEmployeeList"
SERVICE_ENQUIRIES = "serviceEnquiries"
SERVICE_REPORTS = "serviceReport"
RENTAL_INVOICES = "rentalInvoice"
RENTAL_QUOTATIONS = "rentalQuotation"
SALES_ORDERS = "salesOrders"
MENU_SETTINGS = "otherSettingsMenuSetting"


def has_permission(
    permissions: Iterable[Permission],
    key: str,
    action: str = DEFAULT_ACTION,
    role: Optional[int] = None,
) -> bool:
    """Whether the permission list grants ``action`` on ``key``.

    Admins are allowed everything regardless of the list.
    """
    if role == ROLE_ADMIN:
        return True
    return any(p.key == key and action in p.actions for p in permissions)


def has_any_permission(
    permissions: Iterable[Permission],
    keys: Iterable[str],
    action: str = DEFAULT_ACTION,
    role: Optional[int] = None,
) -> bool:
    permissions = list(permissions)
    return any(has_permission(permissions, key, action, role) for key in keys)


def has_all_permissions(
    permissions: Iterable[Permission],
    keys: Iterable[str],
    action: str = DEFAULT_ACTION,
    role: Optional[int] = None,
) -> bool:
    permissions = list(permissions)
    return all(has_permission(permissions, key, action, role) for key in keys)


@dataclass
class PermissionState:
    """Snapshot of the permission list and its fetch status."""

    permissions: list[Permission] = field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None


class PermissionStore:
    """Holds the signed-in user's permission list.

    ``fetch`` never raises: a failure leaves the list empty and records the
    error, so every check for a non-admin comes back denied.
    """

    def __init__(self, permissions_api):
        self.api = permissions_api
        self.state = PermissionState()

    @property
    def permissions(self) -> list[Permission]:
        return self.state.permissions

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    def fetch(self, user_id: str) -> list[Permission]:
        """Load permissions for a user."""
        self.state.loading = True
        self.state.error = None

        try:
            permissions = self.api.for_user(user_id)
        except CorpCultureError as e:
            logger.warning("Could not load permissions for user %s: %s", user_id, e.message)
            self.state.loading = False
            self.state.error = e.server_message or FETCH_FAILED
            self.state.permissions = []
            return []

        self.state.loading = False
        self.state.permissions = permissions
        self.state.error = None
        return permissions

    def clear(self) -> None:
        """Forget loaded permissions."""
        self.state.permissions = []
        self.state.error = None
