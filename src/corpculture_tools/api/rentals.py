"""Rental invoices (payment entries) API module."""

from __future__ import annotations

from typing import Any, Optional

from ..exceptions import NotFoundError
from ..models import RentalInvoice
from .client import CorpCultureClient

INVOICE_TYPES = ("quotation", "invoice")
ENTRY_STATUSES = ("Pending", "Unpaid", "Paid", "InvoiceSent", "Cancelled")

# Entries still awaiting payment: no TDS recorded and not yet paid
OPEN_ENTRY_FILTERS = {"tdsAmount": {"$eq": None}, "status": {"$ne": "Paid"}}


class RentalsAPI:
    """API for rental payment entries and the invoices raised from them."""

    def __init__(self, client: CorpCultureClient):
        self.client = client

    def list(
        self,
        invoice_type: str = "invoice",
        assigned_to: Optional[str] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[RentalInvoice]:
        """
        List rental entries of one invoice type.

        Args:
            invoice_type: 'invoice' or 'quotation'
            assigned_to: Only entries assigned to this user id (employee view).
                An employee with no assignments gets an empty list.
            filters: Extra server-side query fields for the admin view,
                sent in the request body

        Returns:
            List of RentalInvoice records
        """
        if assigned_to:
            try:
                response = self.client.get(f"rental-payment/assignedTo/{assigned_to}/{invoice_type}")
            except NotFoundError:
                return []
        else:
            body = {"invoiceType": invoice_type, **(filters or {})}
            response = self.client.post("rental-payment/all", body)

        return RentalInvoice.parse_many(response.get("entries"))

    def get(self, entry_id: str) -> RentalInvoice:
        """Fetch a single rental entry."""
        response = self.client.get(f"rental-payment/{entry_id}")
        return RentalInvoice.from_api(response["entry"])

    def create(self, details: dict[str, Any]) -> RentalInvoice:
        """Record a rental payment entry."""
        response = self.client.post("rental-payment/create-rental-entry", details)
        return RentalInvoice.from_api(response["entry"])

    def update(self, entry_id: str, details: dict[str, Any]) -> RentalInvoice:
        """Update entry fields such as status or invoice links."""
        response = self.client.put(f"rental-payment/{entry_id}", details)
        return RentalInvoice.from_api(response["entry"])

    def set_status(self, entry_id: str, status: str) -> RentalInvoice:
        """Move an entry to a new status."""
        return self.update(entry_id, {"status": status})

    def move_to_invoice(self, entry_id: str) -> RentalInvoice:
        """Turn a quotation into an invoice; the server assigns the number."""
        return self.update(entry_id, {"invoiceType": "invoice"})

    def remove_invoice_link(self, entry: RentalInvoice, link: str) -> RentalInvoice:
        """Drop one uploaded invoice link from an entry."""
        remaining = [existing for existing in entry.invoice_link if existing != link]
        return self.update(entry.id, {"invoiceLink": remaining})
