"""Employee leave applications API module."""

from __future__ import annotations

from typing import Any, Optional

from ..models import LeaveApplication
from .client import CorpCultureClient

LEAVE_TYPES = ("Casual Leave", "Sick Leave", "Earned Leave", "Other")
APPROVAL_STATES = ("Pending", "Approved", "Rejected")

BASE = "employee-leave"


class LeavesAPI:
    """API for leave applications."""

    def __init__(self, client: CorpCultureClient):
        self.client = client

    def list_mine(
        self,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[LeaveApplication], int]:
        """Leave applications of the signed-in employee."""
        params = {"page": page, "limit": limit, "status": status}
        response = self.client.get(f"{BASE}/my-leaves", params=params)
        leaves = LeaveApplication.parse_many(response.get("leaves"))
        return leaves, response.get("totalCount", len(leaves))

    def list(
        self,
        employee_id: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[LeaveApplication], int]:
        """Leave applications of all employees (admin view)."""
        params = {
            "page": page,
            "limit": limit,
            "employeeId": employee_id,
            "fromDate": from_date,
            "toDate": to_date,
            "status": status,
        }
        response = self.client.get(f"{BASE}/admin/all", params=params)
        leaves = LeaveApplication.parse_many(response.get("leaves"))
        return leaves, response.get("totalCount", len(leaves))

    def list_all(self, mine: bool = False, limit: int = 100, **filters) -> list[LeaveApplication]:
        """Walk every page of either listing; ``filters`` go to that listing."""
        fetch = self.list_mine if mine else self.list
        all_leaves: list[LeaveApplication] = []
        page = 1

        while True:
            leaves, total = fetch(page=page, limit=limit, **filters)
            all_leaves.extend(leaves)

            if not leaves or len(all_leaves) >= total:
                break
            page += 1

        return all_leaves

    def get(self, leave_id: str) -> LeaveApplication:
        """Fetch a single leave application."""
        response = self.client.get(f"{BASE}/{leave_id}")
        return LeaveApplication.from_api(response["leave"])

    def apply(
        self,
        leave_type: str,
        leave_from: str,
        leave_to: str,
        total_days: float,
        reason: str,
        leave_type_other: Optional[str] = None,
        contact_during_leave: Optional[str] = None,
    ) -> LeaveApplication:
        """Submit a leave application for the signed-in employee."""
        if leave_type not in LEAVE_TYPES:
            raise ValueError(f"Leave type must be one of {', '.join(LEAVE_TYPES)}")

        payload: dict[str, Any] = {
            "leaveType": leave_type,
            "leaveFrom": leave_from,
            "leaveTo": leave_to,
            "totalDays": total_days,
            "reason": reason,
        }
        if leave_type_other:
            payload["leaveTypeOther"] = leave_type_other
        if contact_during_leave:
            payload["contactDuringLeave"] = contact_during_leave

        response = self.client.post(f"{BASE}/create", payload)
        return LeaveApplication.from_api(response["leave"])

    def update(self, leave_id: str, details: dict[str, Any]) -> LeaveApplication:
        """Edit a pending leave application."""
        response = self.client.put(f"{BASE}/update/{leave_id}", details)
        return LeaveApplication.from_api(response["leave"])

    def delete(self, leave_id: str) -> None:
        """Withdraw a leave application."""
        self.client.delete(f"{BASE}/delete/{leave_id}")

    def set_status(
        self,
        leave_id: str,
        status: Optional[str] = None,
        manager_approval: Optional[str] = None,
        hr_approval: Optional[str] = None,
        manager_remarks: Optional[str] = None,
        hr_remarks: Optional[str] = None,
    ) -> LeaveApplication:
        """Record approval decisions on a leave application (admin)."""
        for value in (status, manager_approval, hr_approval):
            if value is not None and value not in APPROVAL_STATES:
                raise ValueError(f"Approval state must be one of {', '.join(APPROVAL_STATES)}")

        payload = {
            "status": status,
            "managerApproval": manager_approval,
            "hrApproval": hr_approval,
            "managerRemarks": manager_remarks,
            "hrRemarks": hr_remarks,
        }
        payload = {k: v for k, v in payload.items() if v is not None}
        response = self.client.put(f"{BASE}/admin/status/{leave_id}", payload)
        return LeaveApplication.from_api(response["leave"])
