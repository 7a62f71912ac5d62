"""Interactive company and credit browser using Textual."""

from typing import Optional

from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import (
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    ListItem,
    ListView,
    Static,
)

from ..api.companies import CompaniesAPI
from ..api.credits import CreditsAPI, CreditSummary
from ..context import AuthContext
from ..exceptions import CorpCultureError
from ..filters import RecordView
from ..models import Company, Credit

COMPANY_SEARCH_FIELDS = ("companyName", "contactPerson", "phone", "city")


class CompanyListItem(ListItem):
    """List item for a company."""

    def __init__(self, company: Company, selected: bool = False, **kwargs):
        super().__init__(**kwargs)
        self.company = company
        self.selected = selected

    def compose(self) -> ComposeResult:
        marker = "* " if self.selected else ""
        yield Label(f"{marker}{self.company.display_name}")


class CreditDetail(Static):
    """Widget showing the selected credit, or the company summary."""

    TYPE_COLORS = {"Given": "green", "Used": "red", "Adjusted": "yellow"}

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._company: Optional[Company] = None
        self._credit: Optional[Credit] = None
        self._summary: Optional[CreditSummary] = None

    def show_company(self, company: Optional[Company], summary: Optional[CreditSummary]) -> None:
        self._company = company
        self._summary = summary
        self._credit = None
        self.refresh()

    def show_credit(self, credit: Optional[Credit]) -> None:
        self._credit = credit
        self.refresh()

    def render(self) -> Text:
        if not self._company:
            return Text("Select a company to view its credits", style="dim")

        result = Text()
        result.append(f"{self._company.display_name}\n", style="bold cyan")
        result.append(f"Contact: {self._company.contact_person or '-'}\n", style="green")
        result.append(f"Phone: {self._company.phone or '-'}\n")

        if self._summary:
            result.append("\n")
            result.append(f"Given:     {self._summary.total_given:>12.2f}\n", style="green")
            result.append(f"Used:      {self._summary.total_used:>12.2f}\n", style="red")
            result.append(f"Adjusted:  {self._summary.total_adjusted:>12.2f}\n", style="yellow")
            result.append(f"Available: {self._summary.available_credit:>12.2f}\n", style="bold")

        if self._credit:
            credit = self._credit
            result.append("\n" + "─" * 30 + "\n")
            result.append(f"{credit.credit_type or '-'} ", style=self.TYPE_COLORS.get(credit.credit_type or "", "white"))
            result.append(f"{credit.amount:.2f}\n", style="bold")
            result.append(f"Date: {(credit.created_at or '-')[:10]}\n")
            result.append(f"{credit.description or ''}", style="dim")

        return result


class CompanyBrowserApp(App):
    """Interactive company browser TUI application."""

    CSS = """
    Screen {
        layout: horizontal;
    }

    #company-panel {
        width: 30%;
        min-width: 25;
        border: solid green;
        padding: 1;
    }

    #credit-panel {
        width: 40%;
        border: solid cyan;
    }

    #detail-panel {
        width: 30%;
        border: solid yellow;
        padding: 1;
    }

    #company-list {
        height: 1fr;
    }

    .panel-title {
        text-align: center;
        text-style: bold;
        background: $surface;
        padding: 1;
    }

    DataTable {
        height: 1fr;
    }

    DataTable > .datatable--cursor {
        background: $accent;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("s", "select_company", "Use company"),
        Binding("n", "next_page", "Next page"),
        Binding("p", "previous_page", "Prev page"),
        Binding("escape", "quit", "Quit"),
    ]

    def __init__(self, context: AuthContext, **kwargs):
        super().__init__(**kwargs)
        self.context = context
        self._companies_api = CompaniesAPI(context.client)
        self._credits_api = CreditsAPI(context.client)
        self._companies = RecordView(fields=COMPANY_SEARCH_FIELDS, rows_per_page=1000)
        self._credits = RecordView(
            fields=("creditType", "description", "createdAt"),
            rows_per_page=context.config.preferences.rows_per_page,
        )
        self._current: Optional[Company] = None

    def compose(self) -> ComposeResult:
        yield Header()

        with Horizontal():
            with Vertical(id="company-panel"):
                yield Static("Companies", classes="panel-title")
                yield Input(placeholder="Search companies", id="company-search")
                yield ListView(id="company-list")

            with Vertical(id="credit-panel"):
                yield Static("Credits", classes="panel-title")
                yield DataTable(id="credit-table")
                yield Label("", id="credit-pager")

            with Vertical(id="detail-panel"):
                yield Static("Details", classes="panel-title")
                yield CreditDetail(id="credit-detail")

        yield Footer()

    def on_mount(self) -> None:
        self.title = "CorpCulture Company Browser"
        self.sub_title = "Loading..."

        credit_table = self.query_one("#credit-table", DataTable)
        credit_table.add_columns("Date", "Type", "Amount", "Description")
        credit_table.cursor_type = "row"

        self.load_data()

    def load_data(self) -> None:
        """Load the companies visible to the signed-in user."""
        try:
            self._companies_api.clear_cache()
            companies = self.context.visible_companies(self._companies_api)
        except CorpCultureError as e:
            self.sub_title = f"Error: {e.message}"
            return

        self._companies.set_records(sorted(companies, key=lambda c: c.display_name.lower()))
        self._populate_company_list()
        self.sub_title = f"{len(companies)} companies"

    def _populate_company_list(self) -> None:
        company_list = self.query_one("#company-list", ListView)
        company_list.clear()

        selected = self.context.selected_company
        for company in self._companies.page_rows:
            company_list.append(CompanyListItem(company, selected=company.id == selected))

    def _load_credits(self, company: Company) -> None:
        try:
            credits, total, summary = self._credits_api.for_company(company.id)
        except CorpCultureError as e:
            self.sub_title = f"Error: {e.message}"
            return

        self._credits.set_records(credits)
        self._populate_credit_table()
        self.query_one("#credit-detail", CreditDetail).show_company(company, summary)
        self.sub_title = f"{company.display_name}: {total} credits"

    def _populate_credit_table(self) -> None:
        credit_table = self.query_one("#credit-table", DataTable)
        credit_table.clear()

        for credit in self._credits.page_rows:
            style = CreditDetail.TYPE_COLORS.get(credit.credit_type or "", "white")
            credit_table.add_row(
                (credit.created_at or "-")[:10],
                Text(credit.credit_type or "-", style=style),
                f"{credit.signed_amount:.2f}",
                (credit.description or "")[:40],
                key=credit.id,
            )

        pager = self._credits.paginator
        self.query_one("#credit-pager", Label).update(
            f"{pager.describe()}  (page {pager.page + 1}/{pager.total_pages})"
        )

    @on(Input.Changed, "#company-search")
    def on_search_changed(self, event: Input.Changed) -> None:
        self._companies.search(event.value)
        self._populate_company_list()

    @on(ListView.Selected, "#company-list")
    def on_company_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, CompanyListItem):
            self._current = event.item.company
            self._load_credits(event.item.company)

    @on(DataTable.RowSelected, "#credit-table")
    def on_credit_selected(self, event: DataTable.RowSelected) -> None:
        if event.row_key is None:
            return
        credit_id = str(event.row_key.value)
        credit = next((c for c in self._credits.rows if c.id == credit_id), None)
        self.query_one("#credit-detail", CreditDetail).show_credit(credit)

    def action_select_company(self) -> None:
        """Make the highlighted company the selected one for company mode."""
        if not self._current:
            return
        self.context.selected_company = self._current.id
        self._populate_company_list()
        self.notify(f"Selected {self._current.display_name}")

    def action_next_page(self) -> None:
        self._credits.paginator.next()
        self._populate_credit_table()

    def action_previous_page(self) -> None:
        self._credits.paginator.previous()
        self._populate_credit_table()

    def action_refresh(self) -> None:
        self.sub_title = "Refreshing..."
        self.context.refresh_company_details()
        self.load_data()
        if self._current:
            self._load_credits(self._current)

    def action_quit(self) -> None:
        self.exit()


def run_company_browser(context: AuthContext) -> None:
    """Run the company browser app."""
    app = CompanyBrowserApp(context)
    app.run()
