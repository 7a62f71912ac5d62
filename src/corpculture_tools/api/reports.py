"""Service reports API module."""

from __future__ import annotations

from typing import Any, Optional

from ..models import ServiceReport
from .client import CorpCultureClient


class ReportsAPI:
    """API for field service reports and gate passes."""

    def __init__(self, client: CorpCultureClient):
        self.client = client

    def list(self, report_type: Optional[str] = None, assigned_to: Optional[str] = None) -> list[ServiceReport]:
        """
        List service reports.

        Args:
            report_type: Report type to filter on (e.g. 'service', 'gatepass')
            assigned_to: Only reports assigned to this user id. Employees only
                ever see their own assignments.

        Returns:
            List of ServiceReport records
        """
        if assigned_to:
            path = f"report/getByassigned/{assigned_to}"
            if report_type:
                path += f"/{report_type}"
        else:
            path = f"report/{report_type}" if report_type else "report"

        response = self.client.get(path)
        return ServiceReport.parse_many(response.get("reports"))

    def get(self, report_id: str) -> ServiceReport:
        """Fetch a single report."""
        response = self.client.get(f"report/getById/{report_id}")
        return ServiceReport.from_api(response["report"])

    def create(self, details: dict[str, Any]) -> ServiceReport:
        """File a new report."""
        response = self.client.post("report", details)
        return ServiceReport.from_api(response["report"])

    def update(self, report_id: str, details: dict[str, Any]) -> ServiceReport:
        """Update report fields."""
        response = self.client.put(f"report/{report_id}", details)
        return ServiceReport.from_api(response["report"])

    def delete(self, report_id: str) -> None:
        """Delete a report."""
        self.client.delete(f"report/{report_id}")
