"""CLI entry point for CorpCulture tools."""

import json
import logging
import sys
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import NoReturn, Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from .api.activity_logs import CALL_TYPES, PAYMENT_STATUSES, ActivityLogsAPI
from .api.companies import CompaniesAPI
from .api.credits import CREDIT_TYPES, CreditsAPI
from .api.employees import EMPLOYEE_TYPES, EmployeesAPI
from .api.leaves import APPROVAL_STATES, LEAVE_TYPES, LeavesAPI
from .api.orders import ORDER_STATUSES, OrdersAPI
from .api.permissions import PermissionsAPI
from .api.rentals import ENTRY_STATUSES, INVOICE_TYPES, OPEN_ENTRY_FILTERS, RentalsAPI
from .api.reports import ReportsAPI
from .api.services import ServicesAPI
from .auth import verify_session
from .config import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_EMPLOYEE, load_config
from .context import AuthContext
from .exceptions import PermissionDeniedError
from .filters import Paginator, filter_records
from .models import Company, Employee, Record, reference_id
from .permissions import (
    ACTIONS,
    COMPANY_LIST,
    CREDITS,
    EMPLOYEE_REPORTS,
    EMPLOYEES,
    MENU_SETTINGS,
    RENTAL_INVOICES,
    RENTAL_QUOTATIONS,
    SALES_ORDERS,
    SERVICE_ENQUIRIES,
    SERVICE_REPORTS,
)
from .ui.company_browser import run_company_browser
from .ui.exporters import (
    ACTIVITY_COLUMNS,
    CREDIT_COLUMNS,
    LEAVE_COLUMNS,
    ORDER_COLUMNS,
    RENTAL_COLUMNS,
    export_records_csv,
)
from .ui.tables import (
    ActivityLogTable,
    CompanyTable,
    CreditTable,
    EmployeeTable,
    LeaveTable,
    OrderTable,
    PermissionTable,
    RentalTable,
    ReportTable,
    ServiceTable,
    print_page_footer,
)

console = Console()
logger = logging.getLogger(__name__)

ROLE_NAMES = {ROLE_CUSTOMER: "customer", ROLE_ADMIN: "admin", ROLE_EMPLOYEE: "employee"}

COMPANY_SEARCH = ("companyName", "contactPerson", "phone", "email", "city")
CREDIT_SEARCH = ("company_name", "creditType", "description", "createdAt")
EMPLOYEE_SEARCH = ("name", "email", "phone", "designation", "department")
SERVICE_SEARCH = ("companyName", "contactPerson", "phone", "complaint", "status")
REPORT_SEARCH = ("company_name", "modelNo", "serialNo", "problemReport", "branch")
ACTIVITY_SEARCH = ("employee_name", "fromCompanyName", "toCompanyName", "callType", "remarks", "date")
LEAVE_SEARCH = ("employee_name", "leaveType", "reason", "status")
ORDER_SEARCH = ("_id", "buyer_name", "shippingInfo.address", "shippingInfo.city", "display_status")


def rental_search_fields(invoice_type: str) -> tuple[str, ...]:
    """Company, payment type and date; invoice numbers only once invoiced."""
    fields = ("company_name", "paymentAmountType", "display_date")
    if invoice_type == "invoice":
        fields = ("invoiceNumber",) + fields
    return fields


def configure_logging(verbose: bool) -> None:
    """Send diagnostics through Rich on stderr; DEBUG with -v, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def fail(error: Exception) -> NoReturn:
    """Print an error the way every command does and exit non-zero."""
    message = error.format_message() if isinstance(error, click.ClickException) else str(error)
    console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


def open_context(require_auth: bool = True) -> AuthContext:
    """Restore the session, its permissions and company details from disk."""
    config = load_config()
    context = AuthContext.restore(config)
    logger.debug("Using %s as user %s", config.api_url, context.user_id)

    if require_auth and not context.is_authenticated:
        console.print("[red]Not authenticated. Run 'corp auth login' first.[/red]")
        sys.exit(1)

    return context


def parse_date(value: Optional[str], option: str) -> Optional[str]:
    """Validate a YYYY-MM-DD option value."""
    if not value:
        return None
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise click.BadParameter(f"Invalid date '{value}'. Use YYYY-MM-DD.", param_hint=option)
    return value


def parse_amount(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise click.BadParameter(f"Invalid amount '{value}'", param_hint="--amount")
    if amount <= 0:
        raise click.BadParameter("Amount must be positive", param_hint="--amount")
    return amount


def paginate(rows: Sequence, page: int, per_page: Optional[int], context: AuthContext) -> tuple[list, Paginator]:
    """Slice one page out of already-filtered rows; ``page`` counts from 1."""
    paginator = Paginator(
        total=len(rows),
        rows_per_page=per_page or context.config.preferences.rows_per_page,
    )
    paginator.set_page(page - 1)
    return paginator.slice(rows), paginator


def print_records_json(key: str, records: Sequence[Record], paginator: Optional[Paginator] = None) -> None:
    output: dict = {key: [record.to_api() for record in records]}
    if paginator is not None:
        output["total"] = paginator.total
        output["page"] = paginator.page + 1
        output["total_pages"] = paginator.total_pages
    print(json.dumps(output, indent=2, default=str))


def listing_options(func):
    """Search, paging and JSON options shared by every listing."""
    func = click.option("--json", "as_json", is_flag=True, help="Output as JSON")(func)
    func = click.option("--per-page", type=click.IntRange(min=1), help="Rows per page (10, 25, 50, 100)")(func)
    func = click.option("--page", type=click.IntRange(min=1), default=1, show_default=True, help="Page number")(func)
    func = click.option("--search", "-q", help="Case-insensitive text search")(func)
    return func


def visible_companies(context: AuthContext, companies_api: CompaniesAPI) -> list[Company]:
    """Companies the signed-in user may see: their own as a customer, else all."""
    if context.role != ROLE_CUSTOMER:
        context.require_permission(COMPANY_LIST)
    return context.visible_companies(companies_api)


def resolve_company(context: AuthContext, companies_api: CompaniesAPI, value: str) -> Company:
    """Find a company by exact id or by name fragment."""
    companies = visible_companies(context, companies_api)

    for company in companies:
        if company.id == value:
            return company

    value_lower = value.lower()
    matching = [c for c in companies if value_lower in c.display_name.lower()]
    if not matching:
        raise click.ClickException(f"No company found matching '{value}'")
    if len(matching) > 1:
        names = "\n".join(f"  - {c.display_name} ({c.id})" for c in matching[:10])
        raise click.ClickException(f"Multiple companies match '{value}':\n{names}")
    return matching[0]


def resolve_employee(employees_api: EmployeesAPI, value: str) -> Employee:
    """Find an employee by exact id or by name fragment."""
    found = next((e for e in employees_api.list() if e.id == value), None)
    if found is not None:
        return found

    matching = employees_api.find_by_name(value)
    if not matching:
        raise click.ClickException(f"No employee found matching '{value}'")
    if len(matching) > 1:
        names = "\n".join(f"  - {e.name} ({e.id})" for e in matching[:10])
        raise click.ClickException(f"Multiple employees match '{value}':\n{names}")
    return matching[0]


def default_company(context: AuthContext, companies_api: CompaniesAPI, value: Optional[str]) -> Optional[Company]:
    """Company from an option, else the selected one in company mode."""
    if value:
        return resolve_company(context, companies_api, value)
    if context.company_enabled and context.selected_company:
        return resolve_company(context, companies_api, context.selected_company)
    return None


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.version_option(package_name="corpculture-tools")
def cli(verbose: bool):
    """CorpCulture CLI tools for companies, credits, rentals and staff."""
    configure_logging(verbose)


@cli.group()
def auth():
    """Authentication commands."""
    pass


@auth.command("login")
@click.option("--email", "-e", prompt=True, help="Account email")
@click.option("--password", "-p", prompt=True, hide_input=True, help="Account password")
def auth_login(email: str, password: str):
    """Sign in and store the session."""
    try:
        config = load_config()
        with AuthContext(config) as context:
            session = context.login(email, password)

            name = (session.user or {}).get("name") or email
            role = ROLE_NAMES.get(session.role, str(session.role))
            console.print(f"[green]Signed in as {name}[/green] [dim]({role})[/dim]")

            if context.permission_error:
                console.print(f"[yellow]Permissions could not be loaded: {context.permission_error}[/yellow]")
            elif context.is_admin:
                console.print(f"[dim]{len(context.permissions)} permission grants loaded[/dim]")

    except Exception as e:
        fail(e)


@auth.command("status")
def auth_status():
    """Show current authentication status."""
    config = load_config()
    session = config.session

    if session:
        user = session.user or {}
        console.print("[green]Authenticated[/green]")
        console.print(f"  User: {user.get('name') or '-'} <{user.get('email') or '-'}>")
        console.print(f"  Role: {ROLE_NAMES.get(session.role, session.role)}")
        console.print(f"  Signed in: {session.created_at:%Y-%m-%d %H:%M}")
        console.print(f"  Server: {config.server_url}")
        mode = "on" if config.preferences.company_enabled else "off"
        console.print(f"  Company mode: {mode}")
        if config.preferences.selected_company:
            console.print(f"  Selected company: {config.preferences.selected_company}")
    else:
        console.print("[red]Not authenticated[/red]")
        console.print("Run 'corp auth login' to sign in.")


@auth.command("check")
@click.option("--admin", is_flag=True, help="Check admin panel access instead")
def auth_check(admin: bool):
    """Ask the server whether the stored session is still valid."""
    try:
        config = load_config()
        if verify_session(config, admin=admin):
            console.print("[green]Session is valid.[/green]")
        else:
            console.print("[yellow]Session was not accepted.[/yellow]")
            sys.exit(1)
    except Exception as e:
        fail(e)


@auth.command("logout")
def auth_logout():
    """Forget the stored session."""
    config = load_config()
    with AuthContext(config) as context:
        context.logout()
    console.print("[green]Logged out successfully.[/green]")


@cli.group()
def company():
    """Company and company-mode commands."""
    pass


@company.command("list")
@listing_options
def company_list(search: Optional[str], page: int, per_page: Optional[int], as_json: bool):
    """List companies visible to you."""
    try:
        with open_context() as context:
            companies = visible_companies(context, CompaniesAPI(context.client))
            companies = filter_records(companies, search, COMPANY_SEARCH)
            rows, paginator = paginate(companies, page, per_page, context)

            if as_json:
                print_records_json("companies", rows, paginator)
                return

            if not companies:
                console.print("[yellow]No companies found.[/yellow]")
                return

            CompanyTable(console).print_table(rows, title="Companies", selected=context.selected_company)
            print_page_footer(console, paginator)

    except Exception as e:
        fail(e)


@company.command("show")
@click.argument("company")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def company_show(company: str, as_json: bool):
    """Show one company by id or name."""
    try:
        with open_context() as context:
            found = resolve_company(context, CompaniesAPI(context.client), company)

            if as_json:
                print(json.dumps({"company": found.to_api()}, indent=2, default=str))
                return

            CompanyTable(console).print_detail(found)

    except Exception as e:
        fail(e)


@company.command("create")
@click.option("--name", required=True, help="Company name")
@click.option("--contact", help="Contact person")
@click.option("--phone", required=True, help="Contact phone")
@click.option("--email", help="Contact email")
@click.option("--city", help="City")
@click.option("--state", help="State")
@click.option("--address", help="Street address")
def company_create(name: str, contact: Optional[str], phone: str, email: Optional[str],
                   city: Optional[str], state: Optional[str], address: Optional[str]):
    """Register a company."""
    try:
        with open_context() as context:
            if context.role != ROLE_CUSTOMER:
                context.require_permission(COMPANY_LIST, "add")

            details = {
                "companyName": name,
                "contactPerson": contact,
                "phone": phone,
                "email": email,
                "city": city,
                "state": state,
                "addressDetail": address,
            }
            companies_api = CompaniesAPI(context.client)
            created = companies_api.create({k: v for k, v in details.items() if v is not None})
            console.print(f"[green]Created company \"{created.display_name}\"[/green] [dim]({created.id})[/dim]")

            context.refresh_company_details()

    except Exception as e:
        fail(e)


@company.command("delete")
@click.argument("company")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def company_delete(company: str, yes: bool):
    """Delete a company by id or name."""
    try:
        with open_context() as context:
            context.require_permission(COMPANY_LIST, "delete")
            companies_api = CompaniesAPI(context.client)
            found = resolve_company(context, companies_api, company)

            if not yes:
                click.confirm(f"Delete company \"{found.display_name}\"?", abort=True)

            companies_api.delete(found.id)
            console.print(f"[green]Deleted company \"{found.display_name}\"[/green]")

            if context.selected_company == found.id:
                context.selected_company = None

            context.refresh_company_details()
            remaining = visible_companies(context, companies_api)
            console.print(f"[dim]{len(remaining)} companies remaining[/dim]")

    except click.Abort:
        console.print("\n[yellow]Cancelled.[/yellow]")
        sys.exit(1)
    except Exception as e:
        fail(e)


@company.command("enable")
def company_enable():
    """Turn company mode on and load company details."""
    try:
        with open_context() as context:
            context.company_enabled = True
            details = context.company_details
            if details is None:
                console.print("[yellow]Company mode on, but company details could not be loaded.[/yellow]")
            else:
                console.print(f"[green]Company mode on.[/green] [dim]{len(details)} companies available[/dim]")
    except Exception as e:
        fail(e)


@company.command("disable")
def company_disable():
    """Turn company mode off."""
    try:
        with open_context(require_auth=False) as context:
            context.company_enabled = False
            console.print("[green]Company mode off.[/green]")
    except Exception as e:
        fail(e)


@company.command("select")
@click.argument("company", required=False)
@click.option("--clear", is_flag=True, help="Clear the selected company")
def company_select(company: Optional[str], clear: bool):
    """Choose the company used as the default in company mode."""
    try:
        with open_context() as context:
            if clear or not company:
                context.selected_company = None
                console.print("[green]Company selection cleared.[/green]")
                return

            found = resolve_company(context, CompaniesAPI(context.client), company)
            context.selected_company = found.id
            console.print(f"[green]Selected \"{found.display_name}\"[/green] [dim]({found.id})[/dim]")
            if not context.company_enabled:
                console.print("[dim]Company mode is off; run 'corp company enable' to use it.[/dim]")

    except Exception as e:
        fail(e)


@company.command("browse")
def company_browse():
    """Launch the interactive company and credit browser."""
    try:
        with open_context() as context:
            if context.role != ROLE_CUSTOMER:
                context.require_permission(COMPANY_LIST)
            run_company_browser(context)
    except Exception as e:
        fail(e)


@cli.group()
def credits():
    """Company credit commands."""
    pass


def _print_credits(credits_list: list, title: str, search: Optional[str], page: int,
                   per_page: Optional[int], as_json: bool, context: AuthContext) -> None:
    rows = filter_records(credits_list, search, CREDIT_SEARCH)
    page_rows, paginator = paginate(rows, page, per_page, context)

    if as_json:
        print_records_json("credits", page_rows, paginator)
        return

    if not rows:
        console.print("[yellow]No credits found.[/yellow]")
        return

    CreditTable(console).print_table(page_rows, title=title)
    print_page_footer(console, paginator)


@credits.command("list")
@click.option("--company", "-c", help="Company id or name (defaults to the selected company)")
@click.option("--type", "credit_type", type=click.Choice(CREDIT_TYPES), help="Filter by credit type")
@click.option("--from", "from_date", help="Created on or after (YYYY-MM-DD)")
@click.option("--to", "to_date", help="Created on or before (YYYY-MM-DD)")
@listing_options
@click.option("--export", type=click.Choice(["csv"]), help="Export format")
@click.option("--output", "-o", help="Output file path (default: auto-generated)")
def credits_list(company: Optional[str], credit_type: Optional[str], from_date: Optional[str],
                 to_date: Optional[str], search: Optional[str], page: int, per_page: Optional[int],
                 as_json: bool, export: Optional[str], output: Optional[str]):
    """List credit movements."""
    try:
        from_date = parse_date(from_date, "--from")
        to_date = parse_date(to_date, "--to")

        with open_context() as context:
            context.require_permission(CREDITS)
            target = default_company(context, CompaniesAPI(context.client), company)

            credits_list = CreditsAPI(context.client).list_all(
                company_id=target.id if target else None,
                credit_type=credit_type,
                from_date=from_date,
                to_date=to_date,
            )

            if export == "csv":
                rows = filter_records(credits_list, search, CREDIT_SEARCH)
                filepath = export_records_csv(rows, CREDIT_COLUMNS, "credits", output)
                console.print(f"[green]Exported {len(rows)} credits to {filepath}[/green]")
                return

            title = "Credits"
            if target:
                title += f" - {target.display_name}"
            if credit_type:
                title += f" ({credit_type})"
            _print_credits(credits_list, title, search, page, per_page, as_json, context)

    except Exception as e:
        fail(e)


@credits.command("add")
@click.option("--company", "-c", help="Company id or name (defaults to the selected company)")
@click.option("--amount", "-a", required=True, help="Credit amount")
@click.option("--type", "credit_type", type=click.Choice(CREDIT_TYPES), default="Given", show_default=True)
@click.option("--description", "-d", help="Description")
def credits_add(company: Optional[str], amount: str, credit_type: str, description: Optional[str]):
    """Record a credit movement for a company."""
    try:
        value = parse_amount(amount)

        with open_context() as context:
            context.require_permission(CREDITS, "add")
            target = default_company(context, CompaniesAPI(context.client), company)
            if target is None:
                raise click.UsageError("Pass --company or select a company in company mode.")

            credits_api = CreditsAPI(context.client)
            credit = credits_api.create(target.id, value, credit_type, description)
            console.print(
                f"[green]Recorded {credit_type} credit of {value:.2f} for \"{target.display_name}\"[/green]"
                f" [dim]({credit.id})[/dim]"
            )

            credits_list, _, summary = credits_api.for_company(target.id)
            _print_credits(credits_list, f"Credits - {target.display_name}", None, 1, None, False, context)
            console.print(f"[bold]Available credit:[/bold] {summary.available_credit:.2f}")

    except Exception as e:
        fail(e)


@credits.command("update")
@click.argument("credit_id")
@click.option("--amount", "-a", help="New amount")
@click.option("--type", "credit_type", type=click.Choice(CREDIT_TYPES), help="New credit type")
@click.option("--description", "-d", help="New description")
def credits_update(credit_id: str, amount: Optional[str], credit_type: Optional[str], description: Optional[str]):
    """Change an existing credit."""
    try:
        value = parse_amount(amount) if amount else None
        if value is None and credit_type is None and description is None:
            raise click.UsageError("Nothing to update; pass --amount, --type or --description.")

        with open_context() as context:
            context.require_permission(CREDITS, "edit")
            credits_api = CreditsAPI(context.client)
            credit = credits_api.update(credit_id, amount=value, credit_type=credit_type, description=description)
            console.print(f"[green]Updated credit {credit.id}[/green]")

            CreditTable(console).print_table([credits_api.get(credit_id)], title="Credit")

    except Exception as e:
        fail(e)


@credits.command("delete")
@click.argument("credit_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def credits_delete(credit_id: str, yes: bool):
    """Delete a credit."""
    try:
        with open_context() as context:
            context.require_permission(CREDITS, "delete")
            credits_api = CreditsAPI(context.client)
            credit = credits_api.get(credit_id)

            if not yes:
                click.confirm(
                    f"Delete {credit.credit_type} credit of {credit.amount:.2f} for \"{credit.company_name}\"?",
                    abort=True,
                )

            credits_api.delete(credit_id)
            console.print(f"[green]Deleted credit {credit_id}[/green]")

            company_id = reference_id(credit.company_id)
            if company_id:
                _, _, summary = credits_api.for_company(company_id)
                console.print(f"[bold]Available credit:[/bold] {summary.available_credit:.2f}")

    except click.Abort:
        console.print("\n[yellow]Cancelled.[/yellow]")
        sys.exit(1)
    except Exception as e:
        fail(e)


@cli.group()
def employees():
    """Employee commands."""
    pass


@employees.command("list")
@click.option("--type", "employee_type", type=click.Choice(EMPLOYEE_TYPES), help="Filter by employee type")
@listing_options
def employees_list(employee_type: Optional[str], search: Optional[str], page: int,
                   per_page: Optional[int], as_json: bool):
    """List employees."""
    try:
        with open_context() as context:
            context.require_permission(EMPLOYEES)
            employees_list = EmployeesAPI(context.client).list()
            rows = filter_records(employees_list, search, EMPLOYEE_SEARCH, employeeType=employee_type)
            page_rows, paginator = paginate(rows, page, per_page, context)

            if as_json:
                print_records_json("employees", page_rows, paginator)
                return

            if not rows:
                console.print("[yellow]No employees found.[/yellow]")
                return

            EmployeeTable(console).print_table(page_rows, title="Employees")
            print_page_footer(console, paginator)

    except Exception as e:
        fail(e)


@employees.command("show")
@click.argument("employee")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def employees_show(employee: str, as_json: bool):
    """Show one employee by id or name."""
    try:
        with open_context() as context:
            context.require_permission(EMPLOYEES)
            found = resolve_employee(EmployeesAPI(context.client), employee)

            if as_json:
                print(json.dumps({"employee": found.to_api()}, indent=2, default=str))
                return

            EmployeeTable(console).print_detail(found)

    except Exception as e:
        fail(e)


@cli.group()
def services():
    """Service enquiry commands."""
    pass


@services.command("list")
@click.option("--status", "-s", help="Filter by status (e.g. Pending, Completed)")
@listing_options
def services_list(status: Optional[str], search: Optional[str], page: int,
                  per_page: Optional[int], as_json: bool):
    """List service enquiries."""
    try:
        with open_context() as context:
            context.require_permission(SERVICE_ENQUIRIES)
            enquiries = ServicesAPI(context.client).list()
            rows = filter_records(enquiries, search, SERVICE_SEARCH, status=status)
            page_rows, paginator = paginate(rows, page, per_page, context)

            if as_json:
                print_records_json("services", page_rows, paginator)
                return

            if not rows:
                console.print("[yellow]No service enquiries found.[/yellow]")
                return

            ServiceTable(console).print_table(page_rows, title="Service Enquiries")
            print_page_footer(console, paginator)

    except Exception as e:
        fail(e)


@services.command("show")
@click.argument("service_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def services_show(service_id: str, as_json: bool):
    """Show one service enquiry."""
    try:
        with open_context() as context:
            context.require_permission(SERVICE_ENQUIRIES)
            enquiry = ServicesAPI(context.client).get(service_id)

            if as_json:
                print(json.dumps({"service": enquiry.to_api()}, indent=2, default=str))
                return

            ServiceTable(console).print_table([enquiry], title=f"Service Enquiry {enquiry.id}")

    except Exception as e:
        fail(e)


@cli.group()
def reports():
    """Service report commands."""
    pass


@reports.command("list")
@click.option("--type", "report_type", help="Report type (e.g. service, gatepass)")
@listing_options
def reports_list(report_type: Optional[str], search: Optional[str], page: int,
                 per_page: Optional[int], as_json: bool):
    """List service reports; employees see only their assignments."""
    try:
        with open_context() as context:
            context.require_permission(SERVICE_REPORTS)
            reports_list = ReportsAPI(context.client).list(report_type, assigned_to=context.assigned_scope)
            rows = filter_records(reports_list, search, REPORT_SEARCH)
            page_rows, paginator = paginate(rows, page, per_page, context)

            if as_json:
                print_records_json("reports", page_rows, paginator)
                return

            if not rows:
                console.print("[yellow]No reports found.[/yellow]")
                return

            ReportTable(console).print_table(page_rows, title="Service Reports")
            print_page_footer(console, paginator)

    except Exception as e:
        fail(e)


@reports.command("show")
@click.argument("report_id")
def reports_show(report_id: str):
    """Show one report as JSON."""
    try:
        with open_context() as context:
            context.require_permission(SERVICE_REPORTS)
            report = ReportsAPI(context.client).get(report_id)
            print(json.dumps({"report": report.to_api()}, indent=2, default=str))
    except Exception as e:
        fail(e)


@cli.group()
def rentals():
    """Rental invoice and quotation commands."""
    pass


def _rental_key(invoice_type: str) -> str:
    return RENTAL_INVOICES if invoice_type == "invoice" else RENTAL_QUOTATIONS


def _require_rental_access(context: AuthContext, action: str = "view") -> None:
    """Refuse up front unless invoices or quotations allow the action."""
    if not context.has_any_permission((RENTAL_INVOICES, RENTAL_QUOTATIONS), action):
        raise PermissionDeniedError(f"{RENTAL_INVOICES}/{RENTAL_QUOTATIONS}", action)


@rentals.command("list")
@click.option("--type", "invoice_type", type=click.Choice(INVOICE_TYPES), default="invoice", show_default=True)
@click.option("--status", "-s", help="Filter by entry status")
@click.option("--company", "-c", help="Filter by company name")
@click.option("--employee", "-e", help="Filter by assigned employee name")
@click.option("--all", "include_paid", is_flag=True, help="Include paid entries")
@listing_options
@click.option("--export", type=click.Choice(["csv"]), help="Export format")
@click.option("--output", "-o", help="Output file path (default: auto-generated)")
def rentals_list(invoice_type: str, status: Optional[str], company: Optional[str], employee: Optional[str],
                 include_paid: bool, search: Optional[str], page: int, per_page: Optional[int],
                 as_json: bool, export: Optional[str], output: Optional[str]):
    """List rental entries; employees see only their assignments."""
    try:
        with open_context() as context:
            context.require_permission(_rental_key(invoice_type))

            entries = RentalsAPI(context.client).list(
                invoice_type,
                assigned_to=context.assigned_scope,
                filters=None if include_paid else OPEN_ENTRY_FILTERS,
            )
            rows = filter_records(
                entries,
                search,
                rental_search_fields(invoice_type),
                status=status,
                **{"companyId.companyName": company, "assignedTo.name": employee},
            )

            if export == "csv":
                filepath = export_records_csv(rows, RENTAL_COLUMNS, f"rental_{invoice_type}s", output)
                console.print(f"[green]Exported {len(rows)} entries to {filepath}[/green]")
                return

            page_rows, paginator = paginate(rows, page, per_page, context)

            if as_json:
                print_records_json("entries", page_rows, paginator)
                return

            if not rows:
                console.print(f"[yellow]No rental {invoice_type}s found.[/yellow]")
                return

            RentalTable(console).print_table(page_rows, title=f"Rental {invoice_type.title()}s")
            print_page_footer(console, paginator)

    except Exception as e:
        fail(e)


@rentals.command("show")
@click.argument("entry_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def rentals_show(entry_id: str, as_json: bool):
    """Show one rental entry."""
    try:
        with open_context() as context:
            _require_rental_access(context)
            entry = RentalsAPI(context.client).get(entry_id)
            context.require_permission(_rental_key(entry.invoice_type or "invoice"))

            if as_json:
                print(json.dumps({"entry": entry.to_api()}, indent=2, default=str))
                return

            RentalTable(console).print_detail(entry)

    except Exception as e:
        fail(e)


@rentals.command("status")
@click.argument("entry_id")
@click.argument("status", type=click.Choice(ENTRY_STATUSES))
def rentals_status(entry_id: str, status: str):
    """Move a rental entry to a new status."""
    try:
        with open_context() as context:
            _require_rental_access(context, "edit")
            rentals_api = RentalsAPI(context.client)
            entry = rentals_api.get(entry_id)
            context.require_permission(_rental_key(entry.invoice_type or "invoice"), "edit")

            updated = rentals_api.set_status(entry_id, status)
            console.print(f"[green]Entry {updated.invoice_number or updated.id} is now {updated.status}[/green]")

            RentalTable(console).print_detail(rentals_api.get(entry_id))

    except Exception as e:
        fail(e)


@rentals.command("invoice")
@click.argument("entry_id")
def rentals_invoice(entry_id: str):
    """Move a quotation to invoices."""
    try:
        with open_context() as context:
            context.require_permission(RENTAL_QUOTATIONS, "edit")
            updated = RentalsAPI(context.client).move_to_invoice(entry_id)
            console.print(f"[green]Moved to invoice {updated.invoice_number or updated.id}[/green]")
    except Exception as e:
        fail(e)


@cli.group()
def activity():
    """Employee activity log commands."""
    pass


@activity.command("list")
@click.option("--employee", "-e", help="Employee id")
@click.option("--from", "from_date", help="Logs on or after (YYYY-MM-DD)")
@click.option("--to", "to_date", help="Logs on or before (YYYY-MM-DD)")
@click.option("--status", type=click.Choice(PAYMENT_STATUSES), help="Payment status")
@listing_options
@click.option("--export", type=click.Choice(["csv"]), help="Export format")
@click.option("--output", "-o", help="Output file path (default: auto-generated)")
def activity_list(employee: Optional[str], from_date: Optional[str], to_date: Optional[str], status: Optional[str],
                  search: Optional[str], page: int, per_page: Optional[int], as_json: bool,
                  export: Optional[str], output: Optional[str]):
    """List every employee's activity logs."""
    try:
        from_date = parse_date(from_date, "--from")
        to_date = parse_date(to_date, "--to")

        with open_context() as context:
            context.require_permission(EMPLOYEE_REPORTS)
            logs = ActivityLogsAPI(context.client).list_all(
                employee_id=employee,
                from_date=from_date,
                to_date=to_date,
                status=status,
            )
            rows = filter_records(logs, search, ACTIVITY_SEARCH)

            if export == "csv":
                filepath = export_records_csv(rows, ACTIVITY_COLUMNS, "activity_logs", output)
                console.print(f"[green]Exported {len(rows)} logs to {filepath}[/green]")
                return

            page_rows, paginator = paginate(rows, page, per_page, context)

            if as_json:
                print_records_json("activityLogs", page_rows, paginator)
                return

            if not rows:
                console.print("[yellow]No activity logs found.[/yellow]")
                return

            ActivityLogTable(console).print_table(page_rows, title="Activity Logs")
            print_page_footer(console, paginator)

    except Exception as e:
        fail(e)


@activity.command("mine")
@listing_options
def activity_mine(search: Optional[str], page: int, per_page: Optional[int], as_json: bool):
    """List your own activity logs."""
    try:
        with open_context() as context:
            logs = ActivityLogsAPI(context.client).list_all_mine()
            rows = filter_records(logs, search, ACTIVITY_SEARCH)
            page_rows, paginator = paginate(rows, page, per_page, context)

            if as_json:
                print_records_json("activityLogs", page_rows, paginator)
                return

            if not rows:
                console.print("[yellow]No activity logs yet.[/yellow]")
                return

            ActivityLogTable(console).print_table(page_rows, title="My Activity", show_employee=False)
            print_page_footer(console, paginator)

    except Exception as e:
        fail(e)


@activity.command("log")
@click.option("--date", "-d", "log_date", default=None, help="Date (YYYY-MM-DD), defaults to today")
@click.option("--leave", is_flag=True, help="Record a leave day instead of a work day")
@click.option("--call-type", type=click.Choice(CALL_TYPES), help="Kind of call")
@click.option("--from-company", help="Starting company")
@click.option("--to-company", help="Destination company")
@click.option("--km", type=float, help="Distance travelled")
@click.option("--in-time", help="Check-in time (HH:MM)")
@click.option("--out-time", help="Check-out time (HH:MM)")
@click.option("--remarks", "-r", help="Remarks")
def activity_log(log_date: Optional[str], leave: bool, call_type: Optional[str],
                 from_company: Optional[str], to_company: Optional[str], km: Optional[float],
                 in_time: Optional[str], out_time: Optional[str], remarks: Optional[str]):
    """Log a day's activity."""
    try:
        log_date = parse_date(log_date, "--date") or datetime.now().strftime("%Y-%m-%d")
        leave_or_work = "LEAVE" if leave else "WORK"
        if leave_or_work == "WORK" and not call_type:
            raise click.UsageError("--call-type is required for a work day.")

        details = {
            "date": log_date,
            "leaveOrWork": leave_or_work,
            "callType": call_type,
            "fromCompanyName": from_company,
            "toCompanyName": to_company,
            "km": km,
            "inTime": in_time,
            "outTime": out_time,
            "remarks": remarks,
        }

        with open_context() as context:
            logs_api = ActivityLogsAPI(context.client)
            log = logs_api.create({k: v for k, v in details.items() if v is not None})
            console.print(f"[green]Logged {leave_or_work.lower()} day {log_date}[/green] [dim]({log.id})[/dim]")

            recent = logs_api.list_mine(page=1, limit=5)[0]
            ActivityLogTable(console).print_table(recent, title="Recent Activity", show_employee=False)

    except Exception as e:
        fail(e)


@activity.command("status")
@click.argument("log_id")
@click.argument("status", type=click.Choice(PAYMENT_STATUSES))
def activity_status(log_id: str, status: str):
    """Mark an activity log PAID or UNPAID."""
    try:
        with open_context() as context:
            context.require_permission(EMPLOYEE_REPORTS, "edit")
            log = ActivityLogsAPI(context.client).set_status(log_id, status)
            console.print(f"[green]Activity log {log.id} marked {log.status}[/green]")
    except Exception as e:
        fail(e)


@activity.command("delete")
@click.argument("log_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def activity_delete(log_id: str, yes: bool):
    """Delete one of your activity logs."""
    try:
        with open_context() as context:
            if not yes:
                click.confirm(f"Delete activity log {log_id}?", abort=True)
            logs_api = ActivityLogsAPI(context.client)
            logs_api.delete(log_id)
            console.print(f"[green]Deleted activity log {log_id}[/green]")

            recent = logs_api.list_mine(page=1, limit=5)[0]
            if recent:
                ActivityLogTable(console).print_table(recent, title="Recent Activity", show_employee=False)
    except click.Abort:
        console.print("\n[yellow]Cancelled.[/yellow]")
        sys.exit(1)
    except Exception as e:
        fail(e)


@cli.group()
def leaves():
    """Leave application commands."""
    pass


@leaves.command("list")
@click.option("--employee", "-e", help="Employee id")
@click.option("--from", "from_date", help="Leaves from (YYYY-MM-DD)")
@click.option("--to", "to_date", help="Leaves to (YYYY-MM-DD)")
@click.option("--status", type=click.Choice(APPROVAL_STATES), help="Approval status")
@listing_options
@click.option("--export", type=click.Choice(["csv"]), help="Export format")
@click.option("--output", "-o", help="Output file path (default: auto-generated)")
def leaves_list(employee: Optional[str], from_date: Optional[str], to_date: Optional[str], status: Optional[str],
                search: Optional[str], page: int, per_page: Optional[int], as_json: bool,
                export: Optional[str], output: Optional[str]):
    """List every employee's leave applications."""
    try:
        from_date = parse_date(from_date, "--from")
        to_date = parse_date(to_date, "--to")

        with open_context() as context:
            context.require_permission(EMPLOYEE_REPORTS)
            applications = LeavesAPI(context.client).list_all(
                employee_id=employee,
                from_date=from_date,
                to_date=to_date,
                status=status,
            )
            rows = filter_records(applications, search, LEAVE_SEARCH)

            if export == "csv":
                filepath = export_records_csv(rows, LEAVE_COLUMNS, "leaves", output)
                console.print(f"[green]Exported {len(rows)} leave applications to {filepath}[/green]")
                return

            page_rows, paginator = paginate(rows, page, per_page, context)

            if as_json:
                print_records_json("leaves", page_rows, paginator)
                return

            if not rows:
                console.print("[yellow]No leave applications found.[/yellow]")
                return

            LeaveTable(console).print_table(page_rows, title="Leave Applications")
            print_page_footer(console, paginator)

    except Exception as e:
        fail(e)


@leaves.command("mine")
@click.option("--status", type=click.Choice(APPROVAL_STATES), help="Approval status")
@listing_options
def leaves_mine(status: Optional[str], search: Optional[str], page: int, per_page: Optional[int], as_json: bool):
    """List your own leave applications."""
    try:
        with open_context() as context:
            applications = LeavesAPI(context.client).list_all(mine=True, status=status)
            rows = filter_records(applications, search, LEAVE_SEARCH)
            page_rows, paginator = paginate(rows, page, per_page, context)

            if as_json:
                print_records_json("leaves", page_rows, paginator)
                return

            if not rows:
                console.print("[yellow]No leave applications yet.[/yellow]")
                return

            LeaveTable(console).print_table(page_rows, title="My Leaves", show_employee=False)
            print_page_footer(console, paginator)

    except Exception as e:
        fail(e)


@leaves.command("apply")
@click.option("--type", "leave_type", type=click.Choice(LEAVE_TYPES), required=True, help="Leave type")
@click.option("--other", "leave_type_other", help="Description when the type is Other")
@click.option("--from", "leave_from", required=True, help="First day (YYYY-MM-DD)")
@click.option("--to", "leave_to", required=True, help="Last day (YYYY-MM-DD)")
@click.option("--reason", "-r", required=True, help="Reason for leave")
@click.option("--contact", help="Contact number during leave")
def leaves_apply(leave_type: str, leave_type_other: Optional[str], leave_from: str, leave_to: str,
                 reason: str, contact: Optional[str]):
    """Apply for leave."""
    try:
        start = datetime.strptime(parse_date(leave_from, "--from"), "%Y-%m-%d")
        end = datetime.strptime(parse_date(leave_to, "--to"), "%Y-%m-%d")
        if end < start:
            raise click.BadParameter("Last day is before the first day", param_hint="--to")
        if leave_type == "Other" and not leave_type_other:
            raise click.UsageError("--other is required when the leave type is Other.")

        total_days = (end - start).days + 1

        with open_context() as context:
            application = LeavesAPI(context.client).apply(
                leave_type=leave_type,
                leave_from=leave_from,
                leave_to=leave_to,
                total_days=total_days,
                reason=reason,
                leave_type_other=leave_type_other,
                contact_during_leave=contact,
            )
            console.print(
                f"[green]Applied for {total_days} day(s) of {application.display_type}[/green]"
                f" [dim]({application.id})[/dim]"
            )

    except Exception as e:
        fail(e)


@leaves.command("status")
@click.argument("leave_id")
@click.option("--status", type=click.Choice(APPROVAL_STATES), help="Overall status")
@click.option("--manager", type=click.Choice(APPROVAL_STATES), help="Manager approval")
@click.option("--hr", type=click.Choice(APPROVAL_STATES), help="HR approval")
@click.option("--manager-remarks", help="Manager remarks")
@click.option("--hr-remarks", help="HR remarks")
def leaves_status(leave_id: str, status: Optional[str], manager: Optional[str], hr: Optional[str],
                  manager_remarks: Optional[str], hr_remarks: Optional[str]):
    """Record approval decisions on a leave application."""
    try:
        if not any((status, manager, hr, manager_remarks, hr_remarks)):
            raise click.UsageError("Nothing to update; pass --status, --manager or --hr.")

        with open_context() as context:
            context.require_permission(EMPLOYEE_REPORTS, "edit")
            application = LeavesAPI(context.client).set_status(
                leave_id,
                status=status,
                manager_approval=manager,
                hr_approval=hr,
                manager_remarks=manager_remarks,
                hr_remarks=hr_remarks,
            )
            console.print(
                f"[green]Leave {application.id}: {application.status}[/green]"
                f" [dim](manager {application.manager_approval}, HR {application.hr_approval})[/dim]"
            )

    except Exception as e:
        fail(e)


@leaves.command("delete")
@click.argument("leave_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def leaves_delete(leave_id: str, yes: bool):
    """Withdraw a leave application."""
    try:
        with open_context() as context:
            if not yes:
                click.confirm(f"Withdraw leave application {leave_id}?", abort=True)
            leaves_api = LeavesAPI(context.client)
            leaves_api.delete(leave_id)
            console.print(f"[green]Withdrew leave application {leave_id}[/green]")

            remaining = leaves_api.list_mine(page=1, limit=5)[0]
            if remaining:
                LeaveTable(console).print_table(remaining, title="My Leaves", show_employee=False)
    except click.Abort:
        console.print("\n[yellow]Cancelled.[/yellow]")
        sys.exit(1)
    except Exception as e:
        fail(e)


@cli.group()
def orders():
    """Product sales order commands."""
    pass


@orders.command("list")
@click.option("--status", "-s", type=click.Choice(("Pending",) + ORDER_STATUSES), help="Filter by order status")
@click.option("--buyer", "-b", help="Filter by buyer name")
@click.option("--employee", "-e", help="Assigned employee id (admin view)")
@click.option("--from", "from_date", help="Placed on or after (YYYY-MM-DD)")
@click.option("--to", "to_date", help="Placed on or before (YYYY-MM-DD)")
@listing_options
@click.option("--export", type=click.Choice(["csv"]), help="Export format")
@click.option("--output", "-o", help="Output file path (default: auto-generated)")
def orders_list(status: Optional[str], buyer: Optional[str], employee: Optional[str], from_date: Optional[str],
                to_date: Optional[str], search: Optional[str], page: int, per_page: Optional[int], as_json: bool,
                export: Optional[str], output: Optional[str]):
    """List orders: your own as a customer, assigned ones as an employee, else all."""
    try:
        from_date = parse_date(from_date, "--from")
        to_date = parse_date(to_date, "--to")

        with open_context() as context:
            orders_api = OrdersAPI(context.client)

            if context.role == ROLE_CUSTOMER:
                order_list = orders_api.list_mine()
                title = "My Orders"
            else:
                context.require_permission(SALES_ORDERS)
                if context.assigned_scope:
                    order_list = orders_api.list_assigned(context.assigned_scope)
                    title = "Assigned Orders"
                else:
                    order_list = orders_api.list_all(
                        buyer_name=buyer,
                        employee_id=employee,
                        order_status=status if status != "Pending" else None,
                        from_date=from_date,
                        to_date=to_date,
                    )
                    title = "Orders"

            rows = filter_records(order_list, search, ORDER_SEARCH, display_status=status, buyer_name=buyer)

            if export == "csv":
                filepath = export_records_csv(rows, ORDER_COLUMNS, "orders", output)
                console.print(f"[green]Exported {len(rows)} orders to {filepath}[/green]")
                return

            page_rows, paginator = paginate(rows, page, per_page, context)

            if as_json:
                print_records_json("orders", page_rows, paginator)
                return

            if not rows:
                console.print("[yellow]No orders found.[/yellow]")
                return

            OrderTable(console).print_table(page_rows, title=title, show_assignee=context.role == ROLE_ADMIN)
            print_page_footer(console, paginator)

    except Exception as e:
        fail(e)


@orders.command("show")
@click.argument("order_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def orders_show(order_id: str, as_json: bool):
    """Show one order with its items."""
    try:
        with open_context() as context:
            staff = context.role != ROLE_CUSTOMER
            if staff:
                context.require_permission(SALES_ORDERS)
            order = OrdersAPI(context.client).get(order_id, admin=staff)

            if as_json:
                print(json.dumps({"order": order.to_api()}, indent=2, default=str))
                return

            OrderTable(console).print_detail(order)

    except Exception as e:
        fail(e)


@orders.command("status")
@click.argument("order_id")
@click.argument("status", type=click.Choice(ORDER_STATUSES))
def orders_status(order_id: str, status: str):
    """Move an order to a new delivery status."""
    try:
        with open_context() as context:
            context.require_permission(SALES_ORDERS, "edit")
            orders_api = OrdersAPI(context.client)
            orders_api.set_status(order_id, status)
            console.print(f"[green]Order {order_id} is now {status}[/green]")

            OrderTable(console).print_detail(orders_api.get(order_id, admin=True))

    except Exception as e:
        fail(e)


@orders.command("assign")
@click.argument("employee")
@click.argument("order_ids", nargs=-1, required=True)
def orders_assign(employee: str, order_ids: tuple[str, ...]):
    """Assign one or more orders to an employee (id or name)."""
    try:
        with open_context() as context:
            context.require_permission(SALES_ORDERS, "edit")
            assignee = resolve_employee(EmployeesAPI(context.client), employee)

            orders_api = OrdersAPI(context.client)
            result = orders_api.assign(order_ids, assignee.id)

            if result.success:
                console.print(f"[green]Assigned {len(result.updated)} order(s) to {assignee.name}[/green]")
            else:
                console.print(f"[yellow]{result.message or 'Some orders were not assigned.'}[/yellow]")
                for order_id in result.failed:
                    console.print(f"  - {order_id}")

            assigned = orders_api.list_all(employee_id=assignee.id)
            if assigned:
                OrderTable(console).print_table(assigned, title=f"Orders assigned to {assignee.name}", show_assignee=False)

            if not result.success:
                sys.exit(1)

    except Exception as e:
        fail(e)


@cli.group()
def permissions():
    """Permission commands."""
    pass


@permissions.command("show")
@click.option("--user", "user_id", help="User id (defaults to you)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def permissions_show(user_id: Optional[str], as_json: bool):
    """Show permission grants."""
    try:
        with open_context() as context:
            if user_id and user_id != context.user_id:
                context.require_permission(MENU_SETTINGS)
                grants = PermissionsAPI(context.client).for_user(user_id)
            else:
                if context.permission_error:
                    console.print(f"[yellow]Permissions could not be loaded: {context.permission_error}[/yellow]")
                grants = context.permissions

            if as_json:
                print_records_json("permissions", grants)
                return

            if context.role == ROLE_ADMIN and not user_id:
                console.print("[dim]Admins are allowed every action regardless of grants.[/dim]")

            if not grants:
                console.print("[yellow]No permissions granted.[/yellow]")
                return

            PermissionTable(console).print_table(grants, title="Permissions")

    except Exception as e:
        fail(e)


@permissions.command("check")
@click.argument("key")
@click.option("--action", "-a", type=click.Choice(ACTIONS), default="view", show_default=True)
def permissions_check(key: str, action: str):
    """Check whether you may perform an action on a section."""
    try:
        with open_context() as context:
            if context.has_permission(key, action):
                console.print(f"[green]Allowed:[/green] {action} on {key}")
            else:
                console.print(f"[red]Denied:[/red] {action} on {key}")
                sys.exit(1)
    except Exception as e:
        fail(e)


@permissions.command("grant")
@click.argument("user_id")
@click.argument("key")
@click.option("--action", "-a", "actions", multiple=True, type=click.Choice(ACTIONS),
              help="Action to allow (repeatable); none revokes the key")
def permissions_grant(user_id: str, key: str, actions: tuple[str, ...]):
    """Set the allowed actions on one section for a user."""
    try:
        with open_context() as context:
            context.require_permission(MENU_SETTINGS, "edit")

            permissions_api = PermissionsAPI(context.client)
            grants = {key: {action: action in actions for action in ACTIONS}}
            result = permissions_api.batch_update(user_id, grants)

            if result.success:
                allowed = ", ".join(actions) or "nothing"
                console.print(f"[green]{key}: {allowed}[/green]")
            else:
                console.print(f"[yellow]{result.message or 'Some permissions were not updated.'}[/yellow]")
                for error in result.errors:
                    console.print(f"  - {error}")
                sys.exit(1)

            if user_id == context.user_id:
                context.refresh_permissions()
                updated = context.permissions
            else:
                updated = permissions_api.for_user(user_id)
            PermissionTable(console).print_table(updated, title="Permissions")

    except Exception as e:
        fail(e)


if __name__ == "__main__":
    cli()
