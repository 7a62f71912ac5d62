"""Data models for CorpCulture API records."""

from .schemas import (
    ActivityLog,
    Company,
    Credit,
    Employee,
    LeaveApplication,
    Order,
    Permission,
    Record,
    RentalInvoice,
    ServiceEnquiry,
    ServiceReport,
    User,
    reference_field,
    reference_id,
)

__all__ = [
    "ActivityLog",
    "Company",
    "Credit",
    "Employee",
    "LeaveApplication",
    "Order",
    "Permission",
    "Record",
    "RentalInvoice",
    "ServiceEnquiry",
    "ServiceReport",
    "User",
    "reference_field",
    "reference_id",
]
