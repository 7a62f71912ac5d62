"""Rich table formatters for CLI output."""

from decimal import Decimal
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..filters import Paginator
from ..models import (
    ActivityLog,
    Company,
    Credit,
    Employee,
    LeaveApplication,
    Order,
    Permission,
    RentalInvoice,
    ServiceEnquiry,
    ServiceReport,
    reference_field,
)

STATUS_COLORS = {
    "paid": "green",
    "approved": "green",
    "completed": "green",
    "delivered": "green",
    "shipped": "blue",
    "out for delivery": "cyan",
    "processing": "cyan",
    "sent": "blue",
    "in progress": "cyan",
    "pending": "yellow",
    "unpaid": "yellow",
    "open": "yellow",
    "rejected": "red",
    "cancelled": "red",
}


def status_text(status: Optional[str]) -> Text:
    """Status cell colored by its value."""
    value = status or "-"
    return Text(value, style=STATUS_COLORS.get(value.lower(), "white"))


def short_date(value: Optional[str]) -> str:
    """First ten characters of an ISO timestamp (YYYY-MM-DD)."""
    return value[:10] if value else "-"


def truncate(value: Optional[str], width: int = 40) -> str:
    if not value:
        return "-"
    return value[: width - 3] + "..." if len(value) > width else value


def print_page_footer(console: Console, paginator: Paginator) -> None:
    """Rows shown and the page position, below a paged table."""
    console.print(
        f"[dim]Rows {paginator.describe()} | page {paginator.page + 1} of {paginator.total_pages}"
        f" | {paginator.rows_per_page} per page[/dim]"
    )


class CompanyTable:
    """Rich table formatter for companies."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def create_table(self, companies: list[Company], title: Optional[str] = None, selected: Optional[str] = None) -> Table:
        table = Table(title=title)

        table.add_column("", width=1)
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Company", style="green")
        table.add_column("Contact", style="yellow")
        table.add_column("Phone", style="cyan")
        table.add_column("City")
        table.add_column("Type", style="blue")

        for company in companies:
            marker = "[bold green]*[/bold green]" if selected and company.id == selected else ""
            table.add_row(
                marker,
                company.id or "-",
                company.display_name,
                company.contact_person or "-",
                company.phone or "-",
                company.city or "-",
                company.customer_type or "-",
            )

        return table

    def print_table(self, companies: list[Company], title: Optional[str] = None, selected: Optional[str] = None) -> None:
        self.console.print(self.create_table(companies, title, selected))

    def print_detail(self, company: Company) -> None:
        """Print one company's fields."""
        self.console.print()
        self.console.print(f"[bold]{company.display_name}[/bold]")
        self.console.print(f"  ID: [dim]{company.id}[/dim]")
        self.console.print(f"  Contact: {company.contact_person or '-'}")
        self.console.print(f"  Phone: {company.phone or '-'}")
        self.console.print(f"  Email: {company.email or '-'}")
        self.console.print(f"  Address: {company.address_detail or '-'}")
        self.console.print(f"  City/State: {company.city or '-'} / {company.state or '-'}")
        self.console.print(f"  Customer type: {company.customer_type or '-'}")


class CreditTable:
    """Rich table formatter for company credits, with a running balance footer."""

    TYPE_COLORS = {"Given": "green", "Used": "red", "Adjusted": "yellow"}

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def create_table(self, credits: list[Credit], title: Optional[str] = None) -> Table:
        table = Table(title=title, show_footer=True)

        table.add_column("Date", style="cyan", no_wrap=True)
        table.add_column("Company", style="green")
        table.add_column("Type", justify="center")
        table.add_column("Amount", justify="right")
        table.add_column("Description", max_width=40)

        balance = Decimal("0")
        for credit in credits:
            balance += credit.signed_amount
            style = self.TYPE_COLORS.get(credit.credit_type or "", "white")
            table.add_row(
                short_date(credit.created_at),
                credit.company_name,
                Text(credit.credit_type or "-", style=style),
                f"{credit.signed_amount:.2f}",
                truncate(credit.description),
            )

        table.columns[2].footer = Text("BALANCE", style="bold")
        table.columns[3].footer = Text(f"{balance:.2f}", style="bold green" if balance >= 0 else "bold red")

        return table

    def print_table(self, credits: list[Credit], title: Optional[str] = None) -> None:
        self.console.print(self.create_table(credits, title))


class EmployeeTable:
    """Rich table formatter for employees."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def create_table(self, employees: list[Employee], title: Optional[str] = None) -> Table:
        table = Table(title=title)

        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Name", style="green")
        table.add_column("Designation", style="yellow")
        table.add_column("Type", style="blue")
        table.add_column("Phone", style="cyan")
        table.add_column("Email")

        for employee in employees:
            table.add_row(
                employee.id or "-",
                employee.name or "-",
                employee.designation or "-",
                employee.employee_type or "-",
                employee.phone or "-",
                employee.email or "-",
            )

        return table

    def print_table(self, employees: list[Employee], title: Optional[str] = None) -> None:
        self.console.print(self.create_table(employees, title))

    def print_detail(self, employee: Employee) -> None:
        self.console.print()
        self.console.print(f"[bold]{employee.name or employee.id}[/bold]")
        self.console.print(f"  Designation: {employee.designation or '-'}")
        self.console.print(f"  Department: {employee.department or '-'}")
        self.console.print(f"  Type: {employee.employee_type or '-'}")
        self.console.print(f"  Phone: {employee.phone or '-'}")
        self.console.print(f"  Email: {employee.email or '-'}")
        self.console.print(f"  Hired: {short_date(employee.hire_date)}")


class ServiceTable:
    """Rich table formatter for service enquiries."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def create_table(self, services: list[ServiceEnquiry], title: Optional[str] = None) -> Table:
        table = Table(title=title)

        table.add_column("Date", style="cyan", no_wrap=True)
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Company", style="green")
        table.add_column("Contact", style="yellow")
        table.add_column("Phone")
        table.add_column("Complaint", max_width=40)
        table.add_column("Status", justify="center")

        for service in services:
            table.add_row(
                short_date(service.created_at),
                service.id or "-",
                service.company_name or "-",
                service.contact_person or "-",
                service.phone or "-",
                truncate(service.complaint),
                status_text(service.status),
            )

        return table

    def print_table(self, services: list[ServiceEnquiry], title: Optional[str] = None) -> None:
        self.console.print(self.create_table(services, title))


class ReportTable:
    """Rich table formatter for service reports."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def create_table(self, reports: list[ServiceReport], title: Optional[str] = None) -> Table:
        table = Table(title=title)

        table.add_column("Date", style="cyan", no_wrap=True)
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Type", style="blue")
        table.add_column("Company", style="green")
        table.add_column("Model")
        table.add_column("Serial")
        table.add_column("Assigned To", style="yellow")

        for report in reports:
            table.add_row(
                short_date(report.created_at),
                report.id or "-",
                report.report_type or report.report_for or "-",
                report.company_name,
                report.model_number or "-",
                report.serial_no or "-",
                reference_field(report.assigned_to, "name") or "-",
            )

        return table

    def print_table(self, reports: list[ServiceReport], title: Optional[str] = None) -> None:
        self.console.print(self.create_table(reports, title))


class RentalTable:
    """Rich table formatter for rental invoices."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def create_table(self, entries: list[RentalInvoice], title: Optional[str] = None) -> Table:
        table = Table(title=title)

        table.add_column("Date", style="cyan", no_wrap=True)
        table.add_column("Invoice #", no_wrap=True)
        table.add_column("Company", style="green")
        table.add_column("Payment", style="blue")
        table.add_column("Assigned To", style="yellow")
        table.add_column("Status", justify="center")
        table.add_column("Links", justify="right", style="dim")

        for entry in entries:
            table.add_row(
                entry.display_date,
                str(entry.invoice_number) if entry.invoice_number is not None else "-",
                entry.company_name,
                entry.payment_amount_type or "-",
                entry.assignee_name,
                status_text(entry.status),
                str(len(entry.invoice_link)),
            )

        return table

    def print_table(self, entries: list[RentalInvoice], title: Optional[str] = None) -> None:
        self.console.print(self.create_table(entries, title))

    def print_detail(self, entry: RentalInvoice) -> None:
        """Print one rental entry with its invoice links."""
        self.console.print()
        self.console.print(f"[bold]Rental entry {entry.invoice_number or entry.id}[/bold]")
        self.console.print(f"  Company: [green]{entry.company_name}[/green]")
        self.console.print("  Status: ", status_text(entry.status))
        self.console.print(f"  Type: {entry.invoice_type or '-'}")
        self.console.print(f"  Date: {entry.display_date}")
        self.console.print(f"  Payment: {entry.payment_amount_type or '-'} ({entry.mode_of_payment or '-'})")
        self.console.print(f"  Assigned to: {entry.assignee_name}")
        if entry.remarks:
            self.console.print(f"  Remarks: {entry.remarks}")

        if entry.invoice_link:
            self.console.print()
            self.console.print("[bold]Invoice links:[/bold]")
            for link in entry.invoice_link:
                self.console.print(f"  - {link}")


class OrderTable:
    """Rich table formatter for shop orders, totalling order value."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def create_table(self, orders: list[Order], title: Optional[str] = None, show_assignee: bool = True) -> Table:
        table = Table(title=title, show_footer=True)

        table.add_column("Date", style="cyan", no_wrap=True)
        table.add_column("Order", style="dim", no_wrap=True)
        table.add_column("Buyer", style="green")
        table.add_column("Items", justify="right")
        table.add_column("Amount", justify="right")
        table.add_column("Status", justify="center")
        if show_assignee:
            table.add_column("Assigned To", style="yellow")

        total = Decimal("0")
        for order in orders:
            total += order.amount or 0
            row = [
                short_date(order.created_at),
                order.id or "-",
                order.buyer_name,
                str(order.item_count),
                f"{order.amount:.2f}" if order.amount is not None else "-",
                status_text(order.display_status),
            ]
            if show_assignee:
                row.append(order.assignee_name)
            table.add_row(*row)

        table.columns[3].footer = Text("TOTAL", style="bold")
        table.columns[4].footer = Text(f"{total:.2f}", style="bold green")

        return table

    def print_table(self, orders: list[Order], title: Optional[str] = None, show_assignee: bool = True) -> None:
        self.console.print(self.create_table(orders, title, show_assignee))

    def print_detail(self, order: Order) -> None:
        """Print one order with its line items and shipping details."""
        info = order.shipping_info or {}
        self.console.print()
        self.console.print(f"[bold]Order {order.id}[/bold]")
        self.console.print(f"  Buyer: [green]{order.buyer_name}[/green]")
        self.console.print("  Status: ", status_text(order.display_status))
        self.console.print(f"  Placed: {short_date(order.created_at)}")
        self.console.print(f"  Ship to: {order.shipping_address}")
        self.console.print(f"  Phone: {info.get('phoneNo') or '-'}")
        self.console.print(f"  Assigned to: {order.assignee_name}")
        if order.amount is not None:
            self.console.print(f"  Amount: {order.amount:.2f}")

        if order.products:
            items = Table(show_header=True, box=None, padding=(0, 2))
            items.add_column("Item")
            items.add_column("Qty", justify="right")
            items.add_column("Price", justify="right")
            for item in order.products:
                items.add_row(
                    truncate(item.get("name")),
                    str(item.get("quantity") or 1),
                    str(item.get("price") if item.get("price") is not None else "-"),
                )
            self.console.print()
            self.console.print(items)


class ActivityLogTable:
    """Rich table formatter for activity logs, totalling distance travelled."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def create_table(self, logs: list[ActivityLog], title: Optional[str] = None, show_employee: bool = True) -> Table:
        table = Table(title=title, show_footer=True)

        table.add_column("Date", style="cyan", no_wrap=True)
        if show_employee:
            table.add_column("Employee", style="green")
        table.add_column("Call Type", style="blue")
        table.add_column("From")
        table.add_column("To")
        table.add_column("In/Out", style="dim")
        table.add_column("KM", justify="right", style="magenta")
        table.add_column("Status", justify="center")

        total_km = Decimal("0")
        for log in logs:
            total_km += log.km or Decimal("0")
            cells = [short_date(log.date)]
            if show_employee:
                cells.append(log.employee_name)
            cells.extend([
                log.call_type or log.leave_or_work or "-",
                log.from_company_name or "-",
                log.to_company_name or "-",
                f"{log.in_time or '-'} / {log.out_time or '-'}",
                f"{log.km:.1f}" if log.km is not None else "-",
                status_text(log.status),
            ])
            table.add_row(*cells)

        km_column = 6 if show_employee else 5
        table.columns[km_column - 1].footer = Text("TOTAL", style="bold")
        table.columns[km_column].footer = Text(f"{total_km:.1f}", style="bold magenta")

        return table

    def print_table(self, logs: list[ActivityLog], title: Optional[str] = None, show_employee: bool = True) -> None:
        self.console.print(self.create_table(logs, title, show_employee))


class LeaveTable:
    """Rich table formatter for leave applications."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def create_table(self, leaves: list[LeaveApplication], title: Optional[str] = None, show_employee: bool = True) -> Table:
        table = Table(title=title)

        table.add_column("ID", style="dim", no_wrap=True)
        if show_employee:
            table.add_column("Employee", style="green")
        table.add_column("Type", style="blue")
        table.add_column("From", style="cyan")
        table.add_column("To", style="cyan")
        table.add_column("Days", justify="right")
        table.add_column("Manager", justify="center")
        table.add_column("HR", justify="center")
        table.add_column("Status", justify="center")

        for leave in leaves:
            cells = [leave.id or "-"]
            if show_employee:
                cells.append(leave.employee_name)
            cells.extend([
                leave.display_type,
                short_date(leave.leave_from),
                short_date(leave.leave_to),
                f"{leave.total_days:g}" if leave.total_days is not None else "-",
                status_text(leave.manager_approval),
                status_text(leave.hr_approval),
                status_text(leave.status),
            ])
            table.add_row(*cells)

        return table

    def print_table(self, leaves: list[LeaveApplication], title: Optional[str] = None, show_employee: bool = True) -> None:
        self.console.print(self.create_table(leaves, title, show_employee))


class PermissionTable:
    """Rich table formatter for a user's permission grants."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def create_table(self, permissions: list[Permission], title: Optional[str] = None) -> Table:
        table = Table(title=title)

        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Name", style="green")
        table.add_column("Parent", style="dim")
        table.add_column("Section", style="blue")
        table.add_column("Actions", style="yellow")

        for permission in sorted(permissions, key=lambda p: p.key):
            table.add_row(
                permission.key,
                permission.name or "-",
                permission.parent_key or "-",
                permission.section_type or "-",
                ", ".join(permission.actions) or "[dim]none[/dim]",
            )

        return table

    def print_table(self, permissions: list[Permission], title: Optional[str] = None) -> None:
        self.console.print(self.create_table(permissions, title))
