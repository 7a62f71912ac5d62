"""Service enquiries (tickets) API module."""

from __future__ import annotations

from typing import Any

from ..models import ServiceEnquiry
from .client import CorpCultureClient


class ServicesAPI:
    """API for service enquiries."""

    def __init__(self, client: CorpCultureClient):
        self.client = client

    def list(self) -> list[ServiceEnquiry]:
        """List all service enquiries."""
        response = self.client.get("service/all")
        return ServiceEnquiry.parse_many(response.get("services"))

    def get(self, service_id: str) -> ServiceEnquiry:
        """Fetch a single enquiry."""
        response = self.client.get(f"service/get/{service_id}")
        return ServiceEnquiry.from_api(response["service"])

    def create(self, details: dict[str, Any]) -> ServiceEnquiry:
        """Raise a new service enquiry."""
        response = self.client.post("service/create", details)
        return ServiceEnquiry.from_api(response["service"])

    def update(self, service_id: str, details: dict[str, Any]) -> ServiceEnquiry:
        """Update an enquiry, typically its status."""
        response = self.client.put(f"service/update/{service_id}", details)
        return ServiceEnquiry.from_api(response["service"])

    def delete(self, service_id: str) -> None:
        """Delete an enquiry."""
        self.client.delete(f"service/delete/{service_id}")
