"""CSV export utilities for record listings."""

import csv
from collections.abc import Sequence
from datetime import datetime
from io import StringIO
from typing import Optional

from ..filters import RecordLike, resolve

CREDIT_COLUMNS = [
    ("Date", "createdAt"),
    ("Company", "companyId.companyName"),
    ("Type", "creditType"),
    ("Amount", "amount"),
    ("Description", "description"),
]

RENTAL_COLUMNS = [
    ("Invoice #", "invoiceNumber"),
    ("Type", "invoiceType"),
    ("Company", "companyId.companyName"),
    ("Invoice Date", "invoiceDate"),
    ("Payment", "paymentAmountType"),
    ("Mode", "modeOfPayment"),
    ("Status", "status"),
    ("Assigned To", "assignedTo.name"),
]

ACTIVITY_COLUMNS = [
    ("Date", "date"),
    ("Employee", "employeeId.name"),
    ("Call Type", "callType"),
    ("Leave/Work", "leaveOrWork"),
    ("From", "fromCompanyName"),
    ("To", "toCompanyName"),
    ("In", "inTime"),
    ("Out", "outTime"),
    ("KM", "km"),
    ("Status", "status"),
]

LEAVE_COLUMNS = [
    ("Employee", "employeeId.name"),
    ("Type", "leaveType"),
    ("From", "leaveFrom"),
    ("To", "leaveTo"),
    ("Days", "totalDays"),
    ("Manager", "managerApproval"),
    ("HR", "hrApproval"),
    ("Status", "status"),
]


ORDER_COLUMNS = [
    ("Date", "createdAt"),
    ("Order", "_id"),
    ("Buyer", "buyer.name"),
    ("Amount", "amount"),
    ("Status", "orderStatus"),
    ("City", "shippingInfo.city"),
    ("Assigned To", "employeeId.name"),
]


def generate_csv_filename(report_type: str) -> str:
    """
    Generate timestamp-based filename for CSV export.

    Args:
        report_type: Kind of listing (e.g., 'credits', 'rentals', 'activity_logs')

    Returns:
        Filename with timestamp (e.g., 'credits_20260129T143045.csv')
    """
    timestamp = datetime.now().strftime('%Y%m%dT%H%M%S')
    return f"{report_type}_{timestamp}.csv"


def export_records_csv(
    records: Sequence[RecordLike],
    columns: Sequence[tuple[str, str]],
    report_type: str,
    output: Optional[str] = None,
) -> str:
    """
    Export records to CSV.

    Args:
        records: Records to export, in display order
        columns: (header, dotted field path) pairs
        report_type: Prefix for the generated filename
        output: Optional output file path (auto-generates if None)

    Returns:
        Path to the exported CSV file
    """
    filepath = output or generate_csv_filename(report_type)

    buffer = StringIO()
    writer = csv.writer(buffer)

    writer.writerow([header for header, _ in columns])
    for record in records:
        row = []
        for _, path in columns:
            value = resolve(record, path)
            row.append("" if value is None else value)
        writer.writerow(row)

    with open(filepath, "w", newline='') as f:
        f.write(buffer.getvalue())

    return filepath
