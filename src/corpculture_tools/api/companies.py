"""Companies API module."""

from __future__ import annotations

from typing import Any, Optional

from ..models import Company
from .client import CorpCultureClient

ALL_COMPANIES_LIMIT = 1000


class CompaniesAPI:
    """API for customer companies."""

    def __init__(self, client: CorpCultureClient):
        self.client = client
        self._companies_cache: Optional[list[Company]] = None

    def list(self, limit: int = ALL_COMPANIES_LIMIT) -> list[Company]:
        """List companies (admin and employee view), cached per instance."""
        if self._companies_cache is None:
            response = self.client.get("company/all", params={"limit": limit})
            self._companies_cache = Company.parse_many(response.get("companies"))
        return self._companies_cache

    def for_phone(self, phone: str) -> list[Company]:
        """Companies registered by the customer with this phone number.

        The server answers with either one company or a list.
        """
        response = self.client.get(f"company/user-company/{phone}")
        company = response.get("company")
        if company is None:
            return []
        if not isinstance(company, list):
            company = [company]
        return Company.parse_many(company)

    def get(self, company_id: str) -> Company:
        """Fetch a single company."""
        response = self.client.get(f"company/get/{company_id}")
        return Company.from_api(response["company"])

    def find_by_name(self, fragment: str) -> list[Company]:
        """Companies whose name contains ``fragment`` (case-insensitive)."""
        fragment_lower = fragment.lower()
        return [c for c in self.list() if fragment_lower in c.display_name.lower()]

    def create(self, details: dict[str, Any]) -> Company:
        """Submit a company registration."""
        response = self.client.post("company/create", details)
        self.clear_cache()
        return Company.from_api(response["company"])

    def update(self, company_id: str, details: dict[str, Any]) -> Company:
        """Update company fields."""
        response = self.client.put(f"company/update/{company_id}", details)
        self.clear_cache()
        return Company.from_api(response["company"])

    def delete(self, company_id: str) -> None:
        """Delete a company."""
        self.client.delete(f"company/delete/{company_id}")
        self.clear_cache()

    def clear_cache(self) -> None:
        """Clear cached company data."""
        self._companies_cache = None
