"""Unit tests for client-side search, filters and pagination."""

import pytest

from corpculture_tools.filters import Paginator, RecordView, filter_records, matches, resolve
from corpculture_tools.models import Company, RentalInvoice


@pytest.fixture
def companies(companies_response):
    return Company.parse_many(companies_response["companies"])


@pytest.fixture
def entries(rentals_response):
    return RentalInvoice.parse_many(rentals_response["entries"])


class TestResolve:
    """Tests for dotted-path lookups."""

    def test_populated_reference(self, entries):
        assert resolve(entries[0], "companyId.companyName") == "Acme Textiles"

    def test_model_property(self, entries):
        assert resolve(entries[1], "display_date") == "2026-04-05"

    def test_missing_path(self, entries):
        assert resolve(entries[1], "rentalId.rentalType") is None

    def test_plain_dict(self):
        record = {"employeeId": {"name": "Karthik S"}}
        assert resolve(record, "employeeId.name") == "Karthik S"
        assert resolve(record, "employeeId.name.first") is None


class TestMatches:
    """Tests for the case-insensitive text search."""

    def test_empty_query_matches_everything(self, companies):
        assert all(matches(c, "", ["companyName"]) for c in companies)
        assert all(matches(c, None, ["companyName"]) for c in companies)
        assert all(matches(c, "   ", ["companyName"]) for c in companies)

    def test_case_insensitive_substring(self, companies):
        assert matches(companies[0], "ACME", ["companyName"])
        assert not matches(companies[1], "acme", ["companyName"])

    def test_any_field(self, companies):
        assert matches(companies[1], "coimbatore", ["companyName", "city"])

    def test_null_field_does_not_match(self, companies):
        assert not matches(companies[2], "none", ["email"])


class TestFilterRecords:
    """Tests for exact-match filters combined with search."""

    def test_search_only(self, companies):
        result = filter_records(companies, "acme", ["companyName"])
        assert [c.id for c in result] == ["c-1", "c-3"]

    def test_exact_filter_on_nested_path(self, entries):
        result = filter_records(entries, None, [], **{"assignedTo.name": "Karthik S"})
        assert [e.id for e in result] == ["r-1", "r-3"]

    def test_empty_filter_value_means_all(self, entries):
        assert len(filter_records(entries, None, [], status="")) == 3
        assert len(filter_records(entries, None, [], status=None)) == 3

    def test_filters_and_search_combine(self, entries):
        result = filter_records(
            entries,
            "monthly",
            ["paymentAmountType"],
            **{"assignedTo.name": "Karthik S", "status": "Unpaid"},
        )
        assert [e.id for e in result] == ["r-1"]

    def test_preserves_order(self, companies):
        result = filter_records(list(reversed(companies)), "a", ["companyName"])
        assert [c.id for c in result] == ["c-3", "c-2", "c-1"]


class TestPaginator:
    """Tests for zero-based page bookkeeping."""

    def test_slicing(self):
        rows = list(range(23))
        paginator = Paginator(total=23, rows_per_page=10)

        assert paginator.slice(rows) == list(range(10))
        paginator.set_page(2)
        assert paginator.slice(rows) == [20, 21, 22]
        assert paginator.describe() == "21-23 of 23"

    def test_total_pages_never_zero(self):
        paginator = Paginator(total=0, rows_per_page=10)
        assert paginator.total_pages == 1
        assert paginator.describe() == "0 of 0"
        assert not paginator.has_next

    def test_page_is_clamped(self):
        paginator = Paginator(total=25, rows_per_page=10)
        assert paginator.set_page(7) == 2
        assert paginator.set_page(-1) == 0

    def test_next_and_previous(self):
        paginator = Paginator(total=15, rows_per_page=10)
        assert paginator.has_next
        assert paginator.next() == 1
        assert not paginator.has_next
        assert paginator.next() == 1
        assert paginator.previous() == 0
        assert not paginator.has_previous

    def test_rows_per_page_change_resets_page(self):
        paginator = Paginator(total=100, rows_per_page=10, page=4)
        paginator.set_rows_per_page(25)
        assert paginator.page == 0
        assert paginator.total_pages == 4

    def test_rejects_non_positive_page_size(self):
        with pytest.raises(ValueError):
            Paginator(total=10, rows_per_page=0)


class TestRecordView:
    """Tests for search and filter changes resetting the pager."""

    def test_search_resets_page(self, companies):
        view = RecordView(companies * 5, ["companyName"], rows_per_page=10)
        view.paginator.next()
        assert view.paginator.page == 1

        view.search("acme")

        assert view.paginator.page == 0
        assert len(view.rows) == 10
        assert view.paginator.total == 10

    def test_filter_resets_page(self, entries):
        view = RecordView(entries * 4, ["paymentAmountType"], rows_per_page=5)
        view.paginator.next()

        view.set_filter("status", "Pending")

        assert view.paginator.page == 0
        assert [e.id for e in view.page_rows] == ["r-2"] * 4

    def test_clear_filters(self, entries):
        view = RecordView(entries, ["paymentAmountType"])
        view.search("quarterly")
        view.set_filter("status", "Pending")

        view.clear_filters()

        assert len(view.rows) == 3

    def test_set_records_keeps_search(self, companies):
        view = RecordView(companies, ["companyName"])
        view.search("bluewave")

        view.set_records(companies[:1])

        assert view.rows == []
