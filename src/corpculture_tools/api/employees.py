"""Employees API module."""

from __future__ import annotations

from typing import Any, Optional

from ..models import Employee
from .client import CorpCultureClient

EMPLOYEE_TYPES = ("Service", "Sales", "Rentals")


class EmployeesAPI:
    """API for employee profiles."""

    def __init__(self, client: CorpCultureClient):
        self.client = client
        self._employees_cache: Optional[list[Employee]] = None

    def list(self) -> list[Employee]:
        """List all employees, cached."""
        if self._employees_cache is None:
            response = self.client.get("employee/all")
            self._employees_cache = Employee.parse_many(response.get("employees"))
        return self._employees_cache

    def get(self, employee_id: str) -> Employee:
        """Fetch a single employee."""
        response = self.client.get(f"employee/get/{employee_id}")
        return Employee.from_api(response["employee"])

    def for_user(self, user_id: str) -> Employee:
        """Employee profile linked to a user account."""
        response = self.client.get(f"employee/user/{user_id}")
        return Employee.from_api(response["employee"])

    def find_by_name(self, fragment: str) -> list[Employee]:
        """Employees whose name or email contains ``fragment``."""
        fragment_lower = fragment.lower()
        return [
            e for e in self.list()
            if fragment_lower in (e.name or "").lower() or fragment_lower in (e.email or "").lower()
        ]

    def create(self, details: dict[str, Any]) -> Employee:
        """Create an employee (and its user account on the server)."""
        response = self.client.post("employee/create", details)
        self.clear_cache()
        return Employee.from_api(response["employee"])

    def update(self, employee_id: str, details: dict[str, Any]) -> Employee:
        """Update employee fields."""
        response = self.client.put(f"employee/update/{employee_id}", details)
        self.clear_cache()
        return Employee.from_api(response["employee"])

    def delete(self, employee_id: str) -> None:
        """Delete an employee."""
        self.client.delete(f"employee/delete/{employee_id}")
        self.clear_cache()

    def clear_cache(self) -> None:
        """Clear cached employee data."""
        self._employees_cache = None
