"""CSV rendering for the India sales report."""
from __future__ import annotations

import csv
from io import StringIO
from typing import Iterable

from .computations import ReportRow

HEADERS = [
    "ID",
    "Date",
    "Place of Supply (State)",
    "Zip Tax Rate (%) (Rate from Database)",
    "Taxable Value (cents)",
    "Integrated Tax Amount (cents)",
    "Tax Rate (%) (Calculated From Tax Collected)",
    "Expected Tax (cents, rounded)",
    "Expected Tax (cents, floored)",
    "Tax Difference (rounded)",
    "Tax Difference (floored)",
]

CONTENT_TYPE = "text/csv"


def render_csv(rows: Iterable[ReportRow]) -> bytes:
    """Render rows in the order given, after the fixed header. Zero rows -> header only."""
    buf = StringIO()
    # Several labels contain commas, so let the csv module handle quoting
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(HEADERS)
    for row in rows:
        writer.writerow(row.as_csv_row())
    return buf.getvalue().encode("utf-8")
