"""Employee activity logs API module."""

from __future__ import annotations

from typing import Any, Optional

from ..models import ActivityLog
from .client import CorpCultureClient

PAYMENT_STATUSES = ("PAID", "UNPAID")
CALL_TYPES = (
    "NEW SERVICE CALLS",
    "PENDING CALLS",
    "REWORK CALLS",
    "DELIVERY CALLS",
    "CHEQUE COLLATION",
    "BILL SIGNATURE",
)

BASE = "employee-activity-log"


class ActivityLogsAPI:
    """API for employees' daily activity logs."""

    def __init__(self, client: CorpCultureClient):
        self.client = client

    def list_mine(self, page: int = 1, limit: int = 10) -> tuple[list[ActivityLog], int]:
        """Activity logs of the signed-in employee."""
        response = self.client.get(f"{BASE}/my-logs", params={"page": page, "limit": limit})
        logs = ActivityLog.parse_many(response.get("activityLogs"))
        return logs, response.get("totalCount", len(logs))

    def list(
        self,
        employee_id: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[ActivityLog], int]:
        """
        List activity logs of all employees (admin view).

        Args:
            employee_id: Only logs for this employee
            from_date: Logs dated on or after (YYYY-MM-DD)
            to_date: Logs dated on or before (YYYY-MM-DD)
            status: PAID or UNPAID
            page: Page number (1-indexed)
            limit: Results per page

        Returns:
            Tuple of (activity logs, total count)
        """
        params = {
            "page": page,
            "limit": limit,
            "employeeId": employee_id,
            "fromDate": from_date,
            "toDate": to_date,
            "status": status,
        }
        response = self.client.get(f"{BASE}/admin/all", params=params)
        logs = ActivityLog.parse_many(response.get("activityLogs"))
        return logs, response.get("totalCount", len(logs))

    def list_all(
        self,
        employee_id: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 100,
    ) -> list[ActivityLog]:
        """Every activity log matching the filters, across all pages."""
        all_logs: list[ActivityLog] = []
        page = 1

        while True:
            logs, total = self.list(
                employee_id=employee_id,
                from_date=from_date,
                to_date=to_date,
                status=status,
                page=page,
                limit=limit,
            )
            all_logs.extend(logs)

            if not logs or len(all_logs) >= total:
                break
            page += 1

        return all_logs

    def list_all_mine(self, limit: int = 100) -> list[ActivityLog]:
        """Every activity log of the signed-in employee."""
        all_logs: list[ActivityLog] = []
        page = 1

        while True:
            logs, total = self.list_mine(page=page, limit=limit)
            all_logs.extend(logs)

            if not logs or len(all_logs) >= total:
                break
            page += 1

        return all_logs

    def get(self, log_id: str) -> ActivityLog:
        """Fetch a single activity log."""
        response = self.client.get(f"{BASE}/{log_id}")
        return ActivityLog.from_api(response["activityLog"])

    def create(self, details: dict[str, Any]) -> ActivityLog:
        """Log a day's activity for the signed-in employee."""
        response = self.client.post(f"{BASE}/create", details)
        return ActivityLog.from_api(response["activityLog"])

    def update(self, log_id: str, details: dict[str, Any]) -> ActivityLog:
        """Edit an activity log."""
        response = self.client.put(f"{BASE}/update/{log_id}", details)
        return ActivityLog.from_api(response["activityLog"])

    def delete(self, log_id: str) -> None:
        """Delete an activity log."""
        self.client.delete(f"{BASE}/delete/{log_id}")

    def set_status(self, log_id: str, status: str) -> ActivityLog:
        """Mark a log PAID or UNPAID (admin)."""
        if status not in PAYMENT_STATUSES:
            raise ValueError(f"Status must be one of {', '.join(PAYMENT_STATUSES)}")
        response = self.client.put(f"{BASE}/admin/status/{log_id}", {"status": status})
        return ActivityLog.from_api(response["activityLog"])
