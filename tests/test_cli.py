"""CLI integration tests using CliRunner."""

import csv
import json
import re

import pytest
from click.testing import CliRunner

from corpculture_tools import config as config_module
from corpculture_tools.cli import cli
from corpculture_tools.config import load_preferences, load_session


@pytest.fixture
def runner():
    """Create CliRunner instance."""
    return CliRunner()


@pytest.fixture
def use_config(monkeypatch):
    """Make every command load the given config."""

    def _use(config):
        monkeypatch.setattr("corpculture_tools.cli.load_config", lambda: config)
        return config

    return _use


def mock_permissions(httpx_mock, user_id, response):
    httpx_mock.add_response(url=re.compile(rf".*/permissions/user/{user_id}$"), json=response)


class TestAuthCommands:
    """Tests for the auth command group."""

    def test_login_stores_session(self, runner, httpx_mock, use_config, anonymous_config, login_response,
                                  permissions_response):
        use_config(anonymous_config)
        httpx_mock.add_response(url=re.compile(r".*/auth/login$"), json=login_response)
        mock_permissions(httpx_mock, "u-admin", permissions_response)

        result = runner.invoke(cli, ["auth", "login", "--email", "asha@corpculture.test", "--password", "secret"])

        assert result.exit_code == 0
        assert "Signed in as Asha Raman" in result.output
        assert "admin" in result.output
        assert load_session().user_id == "u-admin"

    def test_login_failure_shows_message(self, runner, httpx_mock, use_config, anonymous_config):
        use_config(anonymous_config)
        httpx_mock.add_response(
            url=re.compile(r".*/auth/login$"),
            status_code=401,
            json={"success": False, "errorType": "invalidUser"},
        )

        result = runner.invoke(cli, ["auth", "login", "--email", "nobody@test", "--password", "x"])

        assert result.exit_code == 1
        assert "No account is registered" in result.output

    def test_status_signed_out(self, runner, use_config, anonymous_config):
        use_config(anonymous_config)

        result = runner.invoke(cli, ["auth", "status"])

        assert "Not authenticated" in result.output

    def test_logout_removes_session(self, runner, use_config, mock_config):
        use_config(mock_config)
        config_module.save_session(mock_config.session)

        result = runner.invoke(cli, ["auth", "logout"])

        assert result.exit_code == 0
        assert not config_module.SESSION_FILE.exists()


class TestCompanyCommands:
    """Tests for the company command group."""

    def test_list_requires_auth(self, runner, use_config, anonymous_config):
        """Verify listing fails when not authenticated."""
        use_config(anonymous_config)

        result = runner.invoke(cli, ["company", "list"])

        assert result.exit_code != 0
        assert "not authenticated" in result.output.lower()

    def test_list_json_search(self, runner, httpx_mock, use_config, mock_config, permissions_response,
                              companies_response):
        use_config(mock_config)
        mock_permissions(httpx_mock, "u-admin", permissions_response)
        httpx_mock.add_response(url=re.compile(r".*/company/all.*"), json=companies_response)

        result = runner.invoke(cli, ["company", "list", "--search", "ACME", "--json"])

        assert result.exit_code == 0
        output = json.loads(result.output)
        assert [c["_id"] for c in output["companies"]] == ["c-1", "c-3"]
        assert output["total"] == 2

    def test_page_past_the_end_is_clamped(self, runner, httpx_mock, use_config, mock_config,
                                          permissions_response, companies_response):
        use_config(mock_config)
        mock_permissions(httpx_mock, "u-admin", permissions_response)
        httpx_mock.add_response(url=re.compile(r".*/company/all.*"), json=companies_response)

        result = runner.invoke(cli, ["company", "list", "--per-page", "2", "--page", "9", "--json"])

        output = json.loads(result.output)
        assert output["page"] == 2
        assert output["total_pages"] == 2
        assert [c["_id"] for c in output["companies"]] == ["c-3"]

    def test_select_by_name_persists(self, runner, httpx_mock, use_config, mock_config, permissions_response,
                                     companies_response):
        use_config(mock_config)
        mock_permissions(httpx_mock, "u-admin", permissions_response)
        httpx_mock.add_response(url=re.compile(r".*/company/all.*"), json=companies_response)

        result = runner.invoke(cli, ["company", "select", "bluewave"])

        assert result.exit_code == 0
        assert load_preferences().selected_company == "c-2"

    def test_ambiguous_name_lists_candidates(self, runner, httpx_mock, use_config, mock_config,
                                             permissions_response, companies_response):
        use_config(mock_config)
        mock_permissions(httpx_mock, "u-admin", permissions_response)
        httpx_mock.add_response(url=re.compile(r".*/company/all.*"), json=companies_response)

        result = runner.invoke(cli, ["company", "show", "acme"])

        assert result.exit_code == 1
        assert "Acme Textiles" in result.output
        assert "Acme Foods" in result.output


class TestCreditCommands:
    """Tests for the credits command group."""

    def test_employee_lists_credits(self, runner, httpx_mock, use_config, employee_config, permissions_response,
                                    credits_response):
        use_config(employee_config)
        mock_permissions(httpx_mock, "u-employee", permissions_response)
        httpx_mock.add_response(url=re.compile(r".*/credit/all.*"), json=credits_response)

        result = runner.invoke(cli, ["credits", "list", "--search", "toner", "--json"])

        assert result.exit_code == 0
        output = json.loads(result.output)
        assert [c["_id"] for c in output["credits"]] == ["cr-2"]

    def test_delete_denied_without_permission(self, runner, httpx_mock, use_config, employee_config,
                                              permissions_response):
        """Verify the gate refuses before any delete request is sent."""
        use_config(employee_config)
        mock_permissions(httpx_mock, "u-employee", permissions_response)

        result = runner.invoke(cli, ["credits", "delete", "cr-1", "--yes"])

        assert result.exit_code == 1
        assert "permission" in result.output
        assert len(httpx_mock.get_requests()) == 1

    def test_add_rejects_bad_amount(self, runner, use_config, anonymous_config):
        use_config(anonymous_config)

        result = runner.invoke(cli, ["credits", "add", "--company", "c-1", "--amount", "-5"])

        assert result.exit_code == 1
        assert "Amount must be positive" in result.output

    def test_export_csv(self, runner, httpx_mock, use_config, mock_config, permissions_response,
                        credits_response, tmp_path):
        use_config(mock_config)
        mock_permissions(httpx_mock, "u-admin", permissions_response)
        httpx_mock.add_response(url=re.compile(r".*/credit/all.*"), json=credits_response)
        output_file = tmp_path / "credits.csv"

        result = runner.invoke(cli, ["credits", "list", "--export", "csv", "--output", str(output_file)])

        assert result.exit_code == 0
        with open(output_file, newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["Date", "Company", "Type", "Amount", "Description"]
        assert rows[2][1:4] == ["Acme Textiles", "Used", "1200.5"]


class TestRentalCommands:
    """Tests for the rentals command group."""

    def test_admin_list_filters_by_company(self, runner, httpx_mock, use_config, mock_config,
                                           permissions_response, rentals_response):
        use_config(mock_config)
        mock_permissions(httpx_mock, "u-admin", permissions_response)
        httpx_mock.add_response(url=re.compile(r".*/rental-payment/all$"), method="POST", json=rentals_response)

        result = runner.invoke(cli, ["rentals", "list", "--company", "Acme Textiles", "--json"])

        assert result.exit_code == 0
        assert [e["_id"] for e in json.loads(result.output)["entries"]] == ["r-1"]
        body = json.loads(httpx_mock.get_requests()[-1].content)
        assert body["status"] == {"$ne": "Paid"}

    def test_all_flag_drops_open_filters(self, runner, httpx_mock, use_config, mock_config,
                                         permissions_response, rentals_response):
        use_config(mock_config)
        mock_permissions(httpx_mock, "u-admin", permissions_response)
        httpx_mock.add_response(url=re.compile(r".*/rental-payment/all$"), method="POST", json=rentals_response)

        result = runner.invoke(cli, ["rentals", "list", "--type", "quotation", "--all", "--json"])

        assert result.exit_code == 0
        body = json.loads(httpx_mock.get_requests()[-1].content)
        assert body == {"invoiceType": "quotation"}

    def test_employee_sees_assigned_entries(self, runner, httpx_mock, use_config, employee_config,
                                            permissions_response, rentals_response):
        use_config(employee_config)
        mock_permissions(httpx_mock, "u-employee", permissions_response)
        httpx_mock.add_response(
            url=re.compile(r".*/rental-payment/assignedTo/u-employee/invoice$"),
            json=rentals_response,
        )

        result = runner.invoke(cli, ["rentals", "list", "--search", "inv-1003", "--json"])

        assert result.exit_code == 0
        assert [e["_id"] for e in json.loads(result.output)["entries"]] == ["r-3"]

    def test_quotations_need_their_own_permission(self, runner, httpx_mock, use_config, employee_config,
                                                  permissions_response):
        use_config(employee_config)
        mock_permissions(httpx_mock, "u-employee", permissions_response)

        result = runner.invoke(cli, ["rentals", "list", "--type", "quotation"])

        assert result.exit_code == 1
        assert "rentalQuotation" in result.output

    def test_show_refused_before_fetching_entry(self, runner, httpx_mock, use_config, employee_config):
        use_config(employee_config)
        mock_permissions(httpx_mock, "u-employee", {"permissions": [{"key": "serviceReport", "actions": ["view"]}]})

        result = runner.invoke(cli, ["rentals", "show", "r-1"])

        assert result.exit_code == 1
        assert "permission" in result.output
        assert not any("rental-payment" in str(r.url) for r in httpx_mock.get_requests())

    def test_status_refused_before_fetching_entry(self, runner, httpx_mock, use_config, employee_config):
        use_config(employee_config)
        mock_permissions(httpx_mock, "u-employee", {"permissions": [{"key": "rentalInvoice", "actions": ["view"]}]})

        result = runner.invoke(cli, ["rentals", "status", "r-1", "Paid"])

        assert result.exit_code == 1
        assert "'edit' permission" in result.output
        assert not any("rental-payment" in str(r.url) for r in httpx_mock.get_requests())


ORDER_GRANTS = {"permissions": [{"key": "salesOrders", "actions": ["view"]}]}


class TestOrderCommands:
    """Tests for the orders command group."""

    def test_customer_lists_own_orders(self, runner, httpx_mock, use_config, customer_config, orders_response):
        use_config(customer_config)
        mock_permissions(httpx_mock, "u-customer", {"permissions": []})
        httpx_mock.add_response(url=re.compile(r".*/user/orders$"), json=orders_response)

        result = runner.invoke(cli, ["orders", "list", "--search", "chennai", "--json"])

        assert result.exit_code == 0
        assert [o["_id"] for o in json.loads(result.output)["orders"]] == ["o-1", "o-3"]

    def test_employee_lists_assigned_orders(self, runner, httpx_mock, use_config, employee_config, orders_response):
        use_config(employee_config)
        mock_permissions(httpx_mock, "u-employee", ORDER_GRANTS)
        httpx_mock.add_response(url=re.compile(r".*/user/ordersByEmpId/u-employee$"), json=orders_response)

        result = runner.invoke(cli, ["orders", "list", "--status", "Delivered", "--json"])

        assert result.exit_code == 0
        assert [o["_id"] for o in json.loads(result.output)["orders"]] == ["o-3"]

    def test_employee_needs_order_permission(self, runner, httpx_mock, use_config, employee_config,
                                             permissions_response):
        use_config(employee_config)
        mock_permissions(httpx_mock, "u-employee", permissions_response)

        result = runner.invoke(cli, ["orders", "list"])

        assert result.exit_code == 1
        assert "salesOrders" in result.output

    def test_admin_pending_filter_matches_unset_status(self, runner, httpx_mock, use_config, mock_config,
                                                       permissions_response, orders_response):
        use_config(mock_config)
        mock_permissions(httpx_mock, "u-admin", permissions_response)
        httpx_mock.add_response(url=re.compile(r".*/user/admin-orders\?.*"), json=orders_response)

        result = runner.invoke(cli, ["orders", "list", "--status", "Pending", "--json"])

        assert result.exit_code == 0
        assert [o["_id"] for o in json.loads(result.output)["orders"]] == ["o-2"]
        assert "orderStatus" not in httpx_mock.get_requests()[-1].url.params

    def test_status_change_needs_edit(self, runner, httpx_mock, use_config, employee_config):
        use_config(employee_config)
        mock_permissions(httpx_mock, "u-employee", ORDER_GRANTS)

        result = runner.invoke(cli, ["orders", "status", "o-2", "Shipped"])

        assert result.exit_code == 1
        assert "'edit' permission" in result.output

    def test_assign_by_employee_name(self, runner, httpx_mock, use_config, mock_config, permissions_response,
                                     orders_response):
        use_config(mock_config)
        mock_permissions(httpx_mock, "u-admin", permissions_response)
        httpx_mock.add_response(
            url=re.compile(r".*/employee/all$"),
            json={"employees": [{"_id": "e-1", "name": "Karthik S", "employeeType": "Service"}]},
        )
        httpx_mock.add_response(
            url=re.compile(r".*/user/update/aassign-orders$"),
            method="PATCH",
            json={"success": True, "updatedOrders": [orders_response["orders"][1]]},
        )
        httpx_mock.add_response(url=re.compile(r".*/user/admin-orders\?.*employeeId=e-1.*"), json=orders_response)

        result = runner.invoke(cli, ["orders", "assign", "karthik", "o-2"])

        assert result.exit_code == 0
        assert "Assigned 1 order(s) to Karthik S" in result.output
        assign_request = next(r for r in httpx_mock.get_requests() if r.method == "PATCH")
        assert json.loads(assign_request.content) == {"orderId": ["o-2"], "employeeId": "e-1"}


class TestStaffCommands:
    """Tests for activity and leave commands."""

    def test_activity_log_requires_call_type(self, runner, use_config, employee_config):
        use_config(employee_config)

        result = runner.invoke(cli, ["activity", "log"])

        assert result.exit_code == 1
        assert "--call-type" in result.output

    def test_apply_for_leave_counts_days(self, runner, httpx_mock, use_config, employee_config,
                                         permissions_response, leaves_response):
        use_config(employee_config)
        mock_permissions(httpx_mock, "u-employee", permissions_response)
        httpx_mock.add_response(
            url=re.compile(r".*/employee-leave/create$"),
            json={"success": True, "leave": leaves_response["leaves"][0]},
        )

        result = runner.invoke(cli, [
            "leaves", "apply",
            "--type", "Sick Leave",
            "--from", "2026-04-14",
            "--to", "2026-04-15",
            "--reason", "Fever",
        ])

        assert result.exit_code == 0
        body = json.loads(httpx_mock.get_requests()[-1].content)
        assert body["totalDays"] == 2
        assert body["leaveType"] == "Sick Leave"

    def test_leave_dates_out_of_order(self, runner, use_config, employee_config):
        use_config(employee_config)

        result = runner.invoke(cli, [
            "leaves", "apply",
            "--type", "Casual Leave",
            "--from", "2026-04-15",
            "--to", "2026-04-14",
            "--reason", "Trip",
        ])

        assert result.exit_code == 1
        assert "before the first day" in result.output


class TestPermissionCommands:
    """Tests for the permissions command group."""

    def test_check_denied(self, runner, httpx_mock, use_config, employee_config, permissions_response):
        use_config(employee_config)
        mock_permissions(httpx_mock, "u-employee", permissions_response)

        result = runner.invoke(cli, ["permissions", "check", "otherSettingsCredit", "--action", "delete"])

        assert result.exit_code == 1
        assert "Denied" in result.output

    def test_check_allowed(self, runner, httpx_mock, use_config, employee_config, permissions_response):
        use_config(employee_config)
        mock_permissions(httpx_mock, "u-employee", permissions_response)

        result = runner.invoke(cli, ["permissions", "check", "otherSettingsCredit", "--action", "add"])

        assert result.exit_code == 0
        assert "Allowed" in result.output

    def test_grant_sends_every_action(self, runner, httpx_mock, use_config, mock_config, permissions_response):
        use_config(mock_config)
        mock_permissions(httpx_mock, "u-admin", permissions_response)
        httpx_mock.add_response(
            url=re.compile(r".*/permissions/batch-update$"),
            method="PUT",
            json={"success": True, "results": {"rentalInvoice": {"success": True}}},
        )
        mock_permissions(httpx_mock, "u-employee", permissions_response)

        result = runner.invoke(cli, [
            "permissions", "grant", "u-employee", "rentalInvoice", "--action", "view", "--action", "edit",
        ])

        assert result.exit_code == 0
        put = next(r for r in httpx_mock.get_requests() if r.method == "PUT")
        assert json.loads(put.content)["permissions"] == {
            "rentalInvoice": {"view": True, "add": False, "edit": True, "delete": False},
        }

    def test_grant_requires_menu_settings_edit(self, runner, httpx_mock, use_config, employee_config,
                                               permissions_response):
        use_config(employee_config)
        mock_permissions(httpx_mock, "u-employee", permissions_response)

        result = runner.invoke(cli, ["permissions", "grant", "u-other", "rentalInvoice", "--action", "view"])

        assert result.exit_code == 1
        assert "otherSettingsMenuSetting" in result.output
