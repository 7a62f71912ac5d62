"""Unit tests for the resource API modules."""

import json
import re
from decimal import Decimal

import pytest

from corpculture_tools.api import (
    ActivityLogsAPI,
    CompaniesAPI,
    CorpCultureClient,
    CreditsAPI,
    LeavesAPI,
    OrdersAPI,
    PermissionsAPI,
    RentalsAPI,
    ReportsAPI,
)
from corpculture_tools.api.credits import credit_balance
from corpculture_tools.api.rentals import OPEN_ENTRY_FILTERS
from corpculture_tools.exceptions import APIResponseError, NotFoundError
from corpculture_tools.models import Credit, LeaveApplication, Order, RentalInvoice


class TestCompaniesAPI:
    """Tests for CompaniesAPI."""

    def test_list_is_cached(self, httpx_mock, mock_config, companies_response):
        httpx_mock.add_response(url=re.compile(r".*/company/all\?limit=1000$"), json=companies_response)

        with CorpCultureClient(mock_config) as client:
            api = CompaniesAPI(client)
            first = api.list()
            second = api.list()

        assert first is second
        assert len(httpx_mock.get_requests()) == 1

    def test_for_phone_single_company_becomes_list(self, httpx_mock, mock_config, companies_response):
        httpx_mock.add_response(
            url=re.compile(r".*/company/user-company/9840012345$"),
            json={"success": True, "company": companies_response["companies"][0]},
        )

        with CorpCultureClient(mock_config) as client:
            companies = CompaniesAPI(client).for_phone("9840012345")

        assert [c.display_name for c in companies] == ["Acme Textiles"]

    def test_for_phone_no_company(self, httpx_mock, mock_config):
        httpx_mock.add_response(url=re.compile(r".*/company/user-company/.*"), json={"success": True})

        with CorpCultureClient(mock_config) as client:
            assert CompaniesAPI(client).for_phone("9000000000") == []

    def test_find_by_name(self, httpx_mock, mock_config, companies_response):
        httpx_mock.add_response(url=re.compile(r".*/company/all.*"), json=companies_response)

        with CorpCultureClient(mock_config) as client:
            matching = CompaniesAPI(client).find_by_name("acme")

        assert [c.id for c in matching] == ["c-1", "c-3"]

    def test_delete_clears_cache(self, httpx_mock, mock_config, companies_response):
        httpx_mock.add_response(url=re.compile(r".*/company/all.*"), json=companies_response)
        httpx_mock.add_response(url=re.compile(r".*/company/delete/c-2$"), json={"success": True})
        httpx_mock.add_response(url=re.compile(r".*/company/all.*"), json=companies_response)

        with CorpCultureClient(mock_config) as client:
            api = CompaniesAPI(client)
            api.list()
            api.delete("c-2")
            api.list()

        assert [r.method for r in httpx_mock.get_requests()] == ["GET", "DELETE", "GET"]


class TestCreditsAPI:
    """Tests for CreditsAPI."""

    def test_list_returns_credits_and_total(self, httpx_mock, mock_config, credits_response):
        httpx_mock.add_response(url=re.compile(r".*/credit/all.*"), json=credits_response)

        with CorpCultureClient(mock_config) as client:
            credits, total = CreditsAPI(client).list(company_id="c-1", credit_type="Given")

        assert total == 3
        assert credits[0].amount == Decimal("5000")
        assert credits[0].company_name == "Acme Textiles"
        url = str(httpx_mock.get_request().url)
        assert "companyId=c-1" in url
        assert "creditType=Given" in url

    def test_list_all_walks_pages(self, httpx_mock, mock_config, credits_response):
        first_page = dict(credits_response, credits=credits_response["credits"][:2])
        second_page = dict(credits_response, credits=credits_response["credits"][2:])
        httpx_mock.add_response(url=re.compile(r".*/credit/all\?page=1.*"), json=first_page)
        httpx_mock.add_response(url=re.compile(r".*/credit/all\?page=2.*"), json=second_page)

        with CorpCultureClient(mock_config) as client:
            credits = CreditsAPI(client).list_all(limit=2)

        assert [c.id for c in credits] == ["cr-1", "cr-2", "cr-3"]

    def test_for_company_summary(self, httpx_mock, mock_config, company_credits_response):
        httpx_mock.add_response(url=re.compile(r".*/credit/company/c-1\?.*"), json=company_credits_response)

        with CorpCultureClient(mock_config) as client:
            credits, total, summary = CreditsAPI(client).for_company("c-1")

        assert total == 2
        assert summary.total_given == Decimal("5000")
        assert summary.total_used == Decimal("1200.5")
        assert summary.available_credit == Decimal("3799.5")
        assert credit_balance(credits) == summary.available_credit

    def test_for_company_without_summary(self, httpx_mock, mock_config):
        httpx_mock.add_response(url=re.compile(r".*/credit/company/c-9\?.*"), json={"success": True, "credits": []})

        with CorpCultureClient(mock_config) as client:
            credits, total, summary = CreditsAPI(client).for_company("c-9")

        assert credits == []
        assert total == 0
        assert summary.available_credit == Decimal("0")

    def test_create_sends_payload(self, httpx_mock, mock_config, credits_response):
        httpx_mock.add_response(
            url=re.compile(r".*/credit/create$"),
            json={"success": True, "credit": credits_response["credits"][0]},
        )

        with CorpCultureClient(mock_config) as client:
            credit = CreditsAPI(client).create("c-1", Decimal("5000"), "Given", "Advance")

        assert credit.id == "cr-1"
        body = json.loads(httpx_mock.get_request().content)
        assert body == {"companyId": "c-1", "amount": 5000.0, "creditType": "Given", "description": "Advance"}

    def test_create_rejects_unknown_type(self, mock_config):
        with CorpCultureClient(mock_config) as client:
            with pytest.raises(ValueError):
                CreditsAPI(client).create("c-1", Decimal("10"), "Refund")

    def test_signed_amount(self):
        used = Credit(amount=Decimal("25"), creditType="Used")
        given = Credit(amount=Decimal("100"), creditType="Given")
        assert credit_balance([given, used]) == Decimal("75")


class TestRentalsAPI:
    """Tests for RentalsAPI."""

    def test_admin_list_posts_filters(self, httpx_mock, mock_config, rentals_response):
        httpx_mock.add_response(url=re.compile(r".*/rental-payment/all$"), method="POST", json=rentals_response)

        with CorpCultureClient(mock_config) as client:
            entries = RentalsAPI(client).list("invoice", filters=OPEN_ENTRY_FILTERS)

        assert len(entries) == 3
        body = json.loads(httpx_mock.get_request().content)
        assert body == {
            "invoiceType": "invoice",
            "tdsAmount": {"$eq": None},
            "status": {"$ne": "Paid"},
        }

    def test_employee_list_uses_assignments(self, httpx_mock, mock_config, rentals_response):
        httpx_mock.add_response(
            url=re.compile(r".*/rental-payment/assignedTo/u-employee/quotation$"),
            json=rentals_response,
        )

        with CorpCultureClient(mock_config) as client:
            entries = RentalsAPI(client).list("quotation", assigned_to="u-employee")

        assert entries[0].assignee_name == "Karthik S"

    def test_employee_without_assignments_gets_empty_list(self, httpx_mock, mock_config):
        httpx_mock.add_response(
            url=re.compile(r".*/rental-payment/assignedTo/.*"),
            status_code=404,
            json={"success": False, "message": "No entries found"},
        )

        with CorpCultureClient(mock_config) as client:
            assert RentalsAPI(client).list("invoice", assigned_to="u-employee") == []

    def test_move_to_invoice(self, httpx_mock, mock_config, rentals_response):
        httpx_mock.add_response(
            url=re.compile(r".*/rental-payment/r-2$"),
            method="PUT",
            json={"success": True, "entry": rentals_response["entries"][1]},
        )

        with CorpCultureClient(mock_config) as client:
            RentalsAPI(client).move_to_invoice("r-2")

        assert json.loads(httpx_mock.get_request().content) == {"invoiceType": "invoice"}

    def test_remove_invoice_link(self, httpx_mock, mock_config, rentals_response):
        entry = RentalInvoice.from_api(rentals_response["entries"][0])
        httpx_mock.add_response(
            url=re.compile(r".*/rental-payment/r-1$"),
            method="PUT",
            json={"success": True, "entry": rentals_response["entries"][0]},
        )

        with CorpCultureClient(mock_config) as client:
            RentalsAPI(client).remove_invoice_link(entry, entry.invoice_link[0])

        assert json.loads(httpx_mock.get_request().content) == {"invoiceLink": []}

    def test_display_date_fallbacks(self, rentals_response):
        entries = RentalInvoice.parse_many(rentals_response["entries"])
        assert [e.display_date for e in entries] == ["2026-04-02", "2026-04-05", "2026-04-09"]


class TestReportsAPI:
    """Tests for ReportsAPI path selection."""

    @pytest.mark.parametrize(
        "report_type,assigned_to,path",
        [
            (None, None, "/report"),
            ("service", None, "/report/service"),
            (None, "u-employee", "/report/getByassigned/u-employee"),
            ("gatepass", "u-employee", "/report/getByassigned/u-employee/gatepass"),
        ],
    )
    def test_list_path(self, httpx_mock, mock_config, report_type, assigned_to, path):
        httpx_mock.add_response(url=re.compile(r".*"), json={"success": True, "reports": []})

        with CorpCultureClient(mock_config) as client:
            ReportsAPI(client).list(report_type, assigned_to=assigned_to)

        assert httpx_mock.get_request().url.path == f"/api/v1{path}"


class TestActivityAndLeaves:
    """Tests for ActivityLogsAPI and LeavesAPI."""

    def test_activity_admin_filters(self, httpx_mock, mock_config, activity_logs_response):
        httpx_mock.add_response(url=re.compile(r".*/employee-activity-log/admin/all.*"), json=activity_logs_response)

        with CorpCultureClient(mock_config) as client:
            logs = ActivityLogsAPI(client).list_all(employee_id="e-1", status="UNPAID")

        assert [log.employee_name for log in logs] == ["Karthik S", "Divya R"]
        url = str(httpx_mock.get_request().url)
        assert "employeeId=e-1" in url
        assert "status=UNPAID" in url

    def test_activity_status_validated(self, mock_config):
        with CorpCultureClient(mock_config) as client:
            with pytest.raises(ValueError):
                ActivityLogsAPI(client).set_status("a-1", "SETTLED")

    def test_leave_status_drops_unset_fields(self, httpx_mock, mock_config, leaves_response):
        httpx_mock.add_response(
            url=re.compile(r".*/employee-leave/admin/status/l-1$"),
            method="PUT",
            json={"success": True, "leave": leaves_response["leaves"][0]},
        )

        with CorpCultureClient(mock_config) as client:
            LeavesAPI(client).set_status("l-1", hr_approval="Approved", hr_remarks="Get well soon")

        body = json.loads(httpx_mock.get_request().content)
        assert body == {"hrApproval": "Approved", "hrRemarks": "Get well soon"}

    def test_leave_display_type(self, leaves_response):
        leaves = LeaveApplication.parse_many(leaves_response["leaves"])
        assert [leave.display_type for leave in leaves] == ["Sick Leave", "Other (Family function)"]


class TestPermissionsAPI:
    """Tests for PermissionsAPI."""

    def test_for_user(self, httpx_mock, mock_config, permissions_response):
        httpx_mock.add_response(url=re.compile(r".*/permissions/user/u-employee$"), json=permissions_response)

        with CorpCultureClient(mock_config) as client:
            permissions = PermissionsAPI(client).for_user("u-employee")

        assert [p.key for p in permissions][:2] == ["otherSettingsCredit", "reportsCompanyList"]
        assert permissions[0].allows("add")

    def test_batch_update_partial_failure(self, httpx_mock, mock_config):
        httpx_mock.add_response(
            url=re.compile(r".*/permissions/batch-update$"),
            method="PUT",
            json={
                "success": False,
                "message": "Some permissions failed to update",
                "results": {
                    "otherSettingsCredit": {"success": True},
                    "rentalInvoice": {"success": False, "error": "Invalid action"},
                },
                "errors": ["rentalInvoice: Invalid action"],
            },
        )

        with CorpCultureClient(mock_config) as client:
            result = PermissionsAPI(client).batch_update(
                "u-employee",
                {"otherSettingsCredit": {"view": True, "add": False}, "rentalInvoice": {"view": True}},
            )

        assert not result.success
        assert result.failed_keys == ["rentalInvoice"]
        body = json.loads(httpx_mock.get_request().content)
        assert body["userId"] == "u-employee"
        assert body["permissions"]["otherSettingsCredit"] == {"view": True, "add": False}


class TestOrdersAPI:
    """Tests for OrdersAPI."""

    def test_admin_list_sends_filters(self, httpx_mock, mock_config, orders_response):
        httpx_mock.add_response(url=re.compile(r".*/user/admin-orders\?.*"), json=orders_response)

        with CorpCultureClient(mock_config) as client:
            orders, total = OrdersAPI(client).list(order_status="Shipped", buyer_name="Ravi Kumar")

        assert total == 3
        assert [o.id for o in orders] == ["o-1", "o-2", "o-3"]
        params = httpx_mock.get_request().url.params
        assert params["orderStatus"] == "Shipped"
        assert params["buyerName"] == "Ravi Kumar"
        assert params["page"] == "1"
        assert "employeeId" not in params

    def test_list_all_stops_when_server_returns_everything(self, httpx_mock, mock_config, orders_response):
        del orders_response["totalCount"]
        httpx_mock.add_response(url=re.compile(r".*/user/admin-orders\?.*"), json=orders_response)

        with CorpCultureClient(mock_config) as client:
            orders = OrdersAPI(client).list_all()

        assert len(orders) == 3
        assert len(httpx_mock.get_requests()) == 1

    def test_employee_without_orders_gets_empty_list(self, httpx_mock, mock_config):
        httpx_mock.add_response(
            url=re.compile(r".*/user/ordersByEmpId/u-employee$"),
            status_code=404,
            json={"success": False, "message": "No orders found for this employee"},
        )

        with CorpCultureClient(mock_config) as client:
            assert OrdersAPI(client).list_assigned("u-employee") == []

    def test_get_takes_first_detail(self, httpx_mock, mock_config, orders_response):
        httpx_mock.add_response(
            url=re.compile(r".*/user/admin-order-detail\?orderId=o-1$"),
            json={"success": True, "orderDetails": [orders_response["orders"][0]]},
        )

        with CorpCultureClient(mock_config) as client:
            order = OrdersAPI(client).get("o-1", admin=True)

        assert order.buyer_name == "Ravi Kumar"
        assert order.item_count == 3
        assert order.shipping_address == "12 Mount Road, Chennai, Tamil Nadu, 600002"

    def test_get_empty_details_is_not_found(self, httpx_mock, mock_config):
        httpx_mock.add_response(url=re.compile(r".*/user/order-detail\?orderId=o-9$"), json={"orderDetails": []})

        with CorpCultureClient(mock_config) as client:
            with pytest.raises(NotFoundError):
                OrdersAPI(client).get("o-9")

    def test_set_status_patches(self, httpx_mock, mock_config):
        httpx_mock.add_response(url=re.compile(r".*/user/update/order-status$"), method="PATCH", json={"success": True})

        with CorpCultureClient(mock_config) as client:
            OrdersAPI(client).set_status("o-2", "Out For Delivery")

        assert json.loads(httpx_mock.get_request().content) == {"status": "Out For Delivery", "orderId": "o-2"}

    def test_assign_partial_failure(self, httpx_mock, mock_config, orders_response):
        httpx_mock.add_response(
            url=re.compile(r".*/user/update/aassign-orders$"),
            method="PATCH",
            status_code=207,
            json={
                "success": False,
                "message": "Some orders failed to update",
                "updatedOrders": [orders_response["orders"][1]],
                "failedOrders": ["o-9"],
            },
        )

        with CorpCultureClient(mock_config) as client:
            result = OrdersAPI(client).assign(["o-2", "o-9"], "u-employee")

        assert not result.success
        assert [o.id for o in result.updated] == ["o-2"]
        assert result.failed == ["o-9"]
        assert json.loads(httpx_mock.get_request().content) == {"orderId": ["o-2", "o-9"], "employeeId": "u-employee"}

    def test_assign_all_failed_raises(self, httpx_mock, mock_config):
        httpx_mock.add_response(
            url=re.compile(r".*/user/update/aassign-orders$"),
            method="PATCH",
            status_code=500,
            json={"success": False, "message": "Failed to update any orders", "failedOrders": ["o-9"]},
        )

        with CorpCultureClient(mock_config) as client:
            with pytest.raises(APIResponseError) as exc_info:
                OrdersAPI(client).assign(["o-9"], "u-employee")

        assert exc_info.value.server_message == "Failed to update any orders"

    def test_assign_requires_orders(self, mock_config):
        with CorpCultureClient(mock_config) as client:
            with pytest.raises(ValueError):
                OrdersAPI(client).assign([], "u-employee")

    def test_unset_status_shows_pending(self, orders_response):
        order = Order.from_api(orders_response["orders"][1])

        assert order.display_status == "Pending"
        assert order.assignee_name == "-"
