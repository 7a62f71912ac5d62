"""UI components for terminal output."""

from .tables import (
    ActivityLogTable,
    CompanyTable,
    CreditTable,
    EmployeeTable,
    LeaveTable,
    PermissionTable,
    RentalTable,
    ReportTable,
    ServiceTable,
)
from .company_browser import CompanyBrowserApp

__all__ = [
    "ActivityLogTable",
    "CompanyTable",
    "CreditTable",
    "EmployeeTable",
    "LeaveTable",
    "PermissionTable",
    "RentalTable",
    "ReportTable",
    "ServiceTable",
    "CompanyBrowserApp",
]
