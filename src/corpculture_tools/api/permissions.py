"""Permissions API module."""

from dataclasses import dataclass, field
from typing import Any, Optional

from ..models import Permission
from .client import CorpCultureClient


@dataclass
class BatchUpdateResult:
    """Outcome of a batch permission update, which may partially fail."""

    success: bool
    message: Optional[str] = None
    results: dict[str, dict[str, Any]] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def failed_keys(self) -> list[str]:
        return [key for key, result in self.results.items() if not result.get("success")]


class PermissionsAPI:
    """API for per-user permission grants."""

    def __init__(self, client: CorpCultureClient):
        self.client = client

    def for_user(self, user_id: str) -> list[Permission]:
        """Permissions granted to one user, sorted by key on the server."""
        response = self.client.get(f"permissions/user/{user_id}")
        return Permission.parse_many(response.get("permissions"))

    def list_all(self) -> list[Permission]:
        """Every permission record across all users."""
        response = self.client.get("permissions")
        return Permission.parse_many(response.get("permissions"))

    def create(
        self,
        name: str,
        key: str,
        actions: list[str],
        parent_key: Optional[str] = None,
        section_type: Optional[str] = None,
    ) -> Permission:
        """Create a permission entry."""
        payload = {
            "name": name,
            "key": key,
            "actions": actions,
            "parentKey": parent_key,
            "sectionType": section_type,
        }
        response = self.client.post("permissions", payload)
        return Permission.from_api(response["permission"])

    def delete(self, key: str) -> None:
        """Delete a permission entry by key."""
        self.client.delete(f"permissions/{key}")

    def batch_update(self, user_id: str, grants: dict[str, dict[str, bool]]) -> BatchUpdateResult:
        """Set the actions for several keys at once.

        ``grants`` maps each key to ``{action: enabled}``; only enabled
        actions are kept. Keys without an existing record are created.
        """
        response = self.client.put(
            "permissions/batch-update",
            {"userId": user_id, "permissions": grants},
            check_success=False,
        )
        return BatchUpdateResult(
            success=bool(response.get("success")),
            message=response.get("message"),
            results=response.get("results") or {},
            errors=response.get("errors") or [],
        )
