"""CorpCulture API modules."""

from .client import CorpCultureClient
from .activity_logs import ActivityLogsAPI
from .companies import CompaniesAPI
from .credits import CreditSummary, CreditsAPI
from .employees import EmployeesAPI
from .leaves import LeavesAPI
from .orders import AssignmentResult, OrdersAPI
from .permissions import BatchUpdateResult, PermissionsAPI
from .rentals import RentalsAPI
from .reports import ReportsAPI
from .services import ServicesAPI

__all__ = [
    "CorpCultureClient",
    "ActivityLogsAPI",
    "AssignmentResult",
    "BatchUpdateResult",
    "CompaniesAPI",
    "CreditSummary",
    "CreditsAPI",
    "EmployeesAPI",
    "LeavesAPI",
    "OrdersAPI",
    "PermissionsAPI",
    "RentalsAPI",
    "ReportsAPI",
    "ServicesAPI",
]
