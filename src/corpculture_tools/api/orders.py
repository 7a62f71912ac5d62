"""Product sales orders API module."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from ..exceptions import NotFoundError
from ..models import Order
from .client import CorpCultureClient

ORDER_STATUSES = ("Processing", "Shipped", "Out For Delivery", "Delivered", "Cancelled")


@dataclass
class AssignmentResult:
    """Outcome of assigning orders to an employee, which may partially fail."""

    success: bool
    message: Optional[str] = None
    updated: list[Order] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class OrdersAPI:
    """API for shop orders, as seen by buyers and by the admin panel."""

    def __init__(self, client: CorpCultureClient):
        self.client = client

    def list_mine(self) -> list[Order]:
        """Orders placed by the signed-in user."""
        response = self.client.get("user/orders")
        return Order.parse_many(response.get("orders"))

    def list(
        self,
        search: Optional[str] = None,
        buyer_name: Optional[str] = None,
        employee_id: Optional[str] = None,
        order_status: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        page: int = 1,
        limit: int = 100,
    ) -> tuple[list[Order], int]:
        """
        List every order (admin view).

        Args:
            search: Free-text search on the server
            buyer_name: Only orders from buyers with this name
            employee_id: Only orders assigned to this employee
            order_status: Only orders in this status
            from_date: Placed on or after (YYYY-MM-DD)
            to_date: Placed on or before (YYYY-MM-DD)
            page: Page number (1-indexed)
            limit: Results per page

        Returns:
            Tuple of (orders list, total count)
        """
        params = {
            "search": search,
            "buyerName": buyer_name,
            "employeeId": employee_id,
            "orderStatus": order_status,
            "fromDate": from_date,
            "toDate": to_date,
            "page": page,
            "limit": limit,
        }
        response = self.client.get("user/admin-orders", params=params)

        orders = Order.parse_many(response.get("orders"))
        total = response.get("totalCount", len(orders))
        return orders, total

    def list_all(
        self,
        buyer_name: Optional[str] = None,
        employee_id: Optional[str] = None,
        order_status: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        limit: int = 100,
    ) -> list[Order]:
        """List all orders matching the filters across every page."""
        all_orders: list[Order] = []
        page = 1

        while True:
            orders, total = self.list(
                buyer_name=buyer_name,
                employee_id=employee_id,
                order_status=order_status,
                from_date=from_date,
                to_date=to_date,
                page=page,
                limit=limit,
            )
            all_orders.extend(orders)

            if not orders or len(all_orders) >= total:
                break
            page += 1

        return all_orders

    def list_assigned(self, employee_id: str) -> list[Order]:
        """Orders assigned to one employee; none assigned is an empty list."""
        try:
            response = self.client.get(f"user/ordersByEmpId/{employee_id}")
        except NotFoundError:
            return []
        return Order.parse_many(response.get("orders"))

    def get(self, order_id: str, admin: bool = False) -> Order:
        """Fetch one order.

        Buyers may only read their own orders; the admin route reads any.
        """
        path = "user/admin-order-detail" if admin else "user/order-detail"
        response = self.client.get(path, params={"orderId": order_id})
        details = Order.parse_many(response.get("orderDetails"))
        if not details:
            raise NotFoundError(f"Order {order_id} not found.")
        return details[0]

    def set_status(self, order_id: str, status: str) -> None:
        """Move an order to a new delivery status."""
        self.client.patch("user/update/order-status", {"status": status, "orderId": order_id})

    def assign(self, order_ids: Sequence[str], employee_id: str) -> AssignmentResult:
        """Assign several orders to one employee.

        The server answers 207 when only some orders were assigned; that is
        reported in the result rather than raised.
        """
        if not order_ids:
            raise ValueError("At least one order id is required")

        response = self.client.patch(
            "user/update/aassign-orders",
            {"orderId": list(order_ids), "employeeId": employee_id},
            check_success=False,
        )
        return AssignmentResult(
            success=bool(response.get("success")),
            message=response.get("message"),
            updated=Order.parse_many(response.get("updatedOrders")),
            failed=[str(order_id) for order_id in response.get("failedOrders") or []],
        )
