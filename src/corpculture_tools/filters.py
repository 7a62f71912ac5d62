"""Client-side search, dropdown filters and pagination over fetched records."""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Optional, Union

from .config import DEFAULT_ROWS_PER_PAGE
from .models import Record

ROWS_PER_PAGE_OPTIONS = (10, 25, 50, 100)

RecordLike = Union[Record, dict[str, Any]]


def resolve(record: RecordLike, path: str) -> Any:
    """Value at a dotted path, looking inside populated references."""
    if isinstance(record, Record):
        return record.lookup(path)

    value: Any = record
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def matches(record: RecordLike, query: Optional[str], fields: Iterable[str]) -> bool:
    """Case-insensitive substring match of ``query`` against any of ``fields``.

    An empty query matches every record.
    """
    if not query:
        return True
    needle = query.strip().lower()
    if not needle:
        return True
    return any(needle in _text(resolve(record, path)).lower() for path in fields)


def filter_records(
    records: Iterable[RecordLike],
    query: Optional[str] = None,
    fields: Iterable[str] = (),
    **equals: Any,
) -> list:
    """Apply exact-match filters, then the text search.

    Keyword filters name a field path; pass dotted paths with ``**{...}``.
    A filter whose value is None or empty means "all" and is skipped.
    """
    active = {path: value for path, value in equals.items() if value not in (None, "")}
    fields = list(fields)

    result = []
    for record in records:
        if any(_text(resolve(record, path)) != _text(value) for path, value in active.items()):
            continue
        if not matches(record, query, fields):
            continue
        result.append(record)
    return result


@dataclass
class Paginator:
    """Zero-based page bookkeeping for a list of ``total`` rows."""

    total: int = 0
    rows_per_page: int = DEFAULT_ROWS_PER_PAGE
    page: int = 0

    def __post_init__(self):
        if self.rows_per_page <= 0:
            raise ValueError("rows_per_page must be positive")
        self.page = self._clamp(self.page)

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total / self.rows_per_page))

    @property
    def start(self) -> int:
        return self.page * self.rows_per_page

    @property
    def end(self) -> int:
        return min(self.start + self.rows_per_page, self.total)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages - 1

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    def _clamp(self, page: int) -> int:
        return max(0, min(page, self.total_pages - 1))

    def set_page(self, page: int) -> int:
        """Move to ``page``, clamped to the valid range."""
        self.page = self._clamp(page)
        return self.page

    def next(self) -> int:
        return self.set_page(self.page + 1)

    def previous(self) -> int:
        return self.set_page(self.page - 1)

    def set_rows_per_page(self, rows_per_page: int) -> None:
        """Change the page size and go back to the first page."""
        if rows_per_page <= 0:
            raise ValueError("rows_per_page must be positive")
        self.rows_per_page = rows_per_page
        self.page = 0

    def reset(self, total: Optional[int] = None) -> None:
        """Back to the first page, optionally with a new row count."""
        if total is not None:
            self.total = total
        self.page = 0

    def slice(self, rows: Sequence) -> list:
        """Rows on the current page."""
        return list(rows[self.start:self.start + self.rows_per_page])

    def describe(self) -> str:
        if not self.total:
            return "0 of 0"
        return f"{self.start + 1}-{self.end} of {self.total}"


class RecordView:
    """Records with a search box, dropdown filters and a pager.

    Any change to the search or the filters puts the pager back on page 0.
    """

    def __init__(
        self,
        records: Iterable[RecordLike] = (),
        fields: Iterable[str] = (),
        rows_per_page: int = DEFAULT_ROWS_PER_PAGE,
    ):
        self.records = list(records)
        self.fields = list(fields)
        self.query: Optional[str] = None
        self.equals: dict[str, Any] = {}
        self.paginator = Paginator(rows_per_page=rows_per_page)
        self._rows = list(self.records)
        self.paginator.reset(len(self._rows))

    def _refilter(self) -> None:
        self._rows = filter_records(self.records, self.query, self.fields, **self.equals)
        self.paginator.reset(len(self._rows))

    def set_records(self, records: Iterable[RecordLike]) -> None:
        """Replace the data, as after a refetch."""
        self.records = list(records)
        self._refilter()

    def search(self, query: Optional[str]) -> None:
        self.query = query
        self._refilter()

    def set_filter(self, path: str, value: Any) -> None:
        self.equals[path] = value
        self._refilter()

    def clear_filters(self) -> None:
        self.query = None
        self.equals = {}
        self._refilter()

    @property
    def rows(self) -> list:
        """All rows passing the current search and filters."""
        return self._rows

    @property
    def page_rows(self) -> list:
        return self.paginator.slice(self._rows)
