"""Company credits API module."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from ..models import Credit
from .client import CorpCultureClient

CREDIT_TYPES = ("Given", "Used", "Adjusted")


@dataclass
class CreditSummary:
    """Per-type totals for one company; available = given - used + adjusted."""

    total_given: Decimal = Decimal("0")
    total_used: Decimal = Decimal("0")
    total_adjusted: Decimal = Decimal("0")
    available_credit: Decimal = Decimal("0")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CreditSummary":
        def amount(key: str) -> Decimal:
            return Decimal(str(data.get(key) or 0))

        return cls(
            total_given=amount("totalGiven"),
            total_used=amount("totalUsed"),
            total_adjusted=amount("totalAdjusted"),
            available_credit=amount("availableCredit"),
        )


class CreditsAPI:
    """API for credit movements on company accounts."""

    def __init__(self, client: CorpCultureClient):
        self.client = client

    def list(
        self,
        company_id: Optional[str] = None,
        credit_type: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Credit], int]:
        """
        List credits, newest first.

        Args:
            company_id: Only credits for this company
            credit_type: Given, Used or Adjusted
            from_date: Created on or after (YYYY-MM-DD)
            to_date: Created on or before (YYYY-MM-DD), inclusive of the whole day
            page: Page number (1-indexed)
            limit: Results per page

        Returns:
            Tuple of (credits list, total count)
        """
        params = {
            "page": page,
            "limit": limit,
            "companyId": company_id,
            "creditType": credit_type,
            "fromDate": from_date,
            "toDate": to_date,
        }
        response = self.client.get("credit/all", params=params)

        credits = Credit.parse_many(response.get("credits"))
        total = response.get("totalCount", len(credits))
        return credits, total

    def list_all(
        self,
        company_id: Optional[str] = None,
        credit_type: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        limit: int = 100,
    ) -> list[Credit]:
        """List all credits matching the filters across every page."""
        all_credits: list[Credit] = []
        page = 1

        while True:
            credits, total = self.list(
                company_id=company_id,
                credit_type=credit_type,
                from_date=from_date,
                to_date=to_date,
                page=page,
                limit=limit,
            )
            all_credits.extend(credits)

            if not credits or len(all_credits) >= total:
                break
            page += 1

        return all_credits

    def for_company(self, company_id: str, page: int = 1, limit: int = 100) -> tuple[list[Credit], int, CreditSummary]:
        """
        Credits recorded against one company, with the server's balance summary.

        Returns:
            Tuple of (credits list, total count, summary)
        """
        response = self.client.get(f"credit/company/{company_id}", params={"page": page, "limit": limit})
        credits = Credit.parse_many(response.get("credits"))
        summary = CreditSummary.from_api(response.get("summary") or {})
        return credits, response.get("totalCount", len(credits)), summary

    def get(self, credit_id: str) -> Credit:
        """Fetch a single credit."""
        response = self.client.get(f"credit/get/{credit_id}")
        return Credit.from_api(response["credit"])

    def create(
        self,
        company_id: str,
        amount: Decimal,
        credit_type: str,
        description: Optional[str] = None,
    ) -> Credit:
        """Record a credit movement."""
        if credit_type not in CREDIT_TYPES:
            raise ValueError(f"Credit type must be one of {', '.join(CREDIT_TYPES)}")

        payload = {
            "companyId": company_id,
            "amount": float(amount),
            "creditType": credit_type,
            "description": description or "",
        }
        response = self.client.post("credit/create", payload)
        return Credit.from_api(response["credit"])

    def update(
        self,
        credit_id: str,
        amount: Optional[Decimal] = None,
        credit_type: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Credit:
        """Change fields of an existing credit."""
        payload: dict = {}
        if amount is not None:
            payload["amount"] = float(amount)
        if credit_type is not None:
            if credit_type not in CREDIT_TYPES:
                raise ValueError(f"Credit type must be one of {', '.join(CREDIT_TYPES)}")
            payload["creditType"] = credit_type
        if description is not None:
            payload["description"] = description

        response = self.client.put(f"credit/update/{credit_id}", payload)
        return Credit.from_api(response["credit"])

    def delete(self, credit_id: str) -> None:
        """Delete a credit."""
        self.client.delete(f"credit/delete/{credit_id}")


def credit_balance(credits: list[Credit]) -> Decimal:
    """Net balance: given and adjusted credits minus used ones."""
    return sum((c.signed_amount for c in credits), Decimal("0"))
