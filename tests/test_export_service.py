import csv
import io
from datetime import datetime

import pytest

from services.export_service import (
    CSV_HEADER, ExportFormat, ExportService, build_document_pages,
    to_delimited_text, to_paginated_document,
)
from utils.constants import (
    NET_NEGATIVE_COLOR, NET_POSITIVE_COLOR, PAGE_HEIGHT, PAGE_MARGIN,
)
from utils.date_helpers import parse_numeric_datetime

GENERATED_AT = datetime(2025, 8, 20, 9, 15)


def _rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


def _texts(pages) -> list[str]:
    return [line.text for page in pages for line in page.lines]


# ── Delimited text ────────────────────────────────────────────────────────────

def test_csv_header_and_section_order(make_record):
    expense = make_record(12.5, category="Food", occurred_at=datetime(2025, 8, 18, 15, 5))
    income = make_record(1000.0, category="Salary", kind="income",
                         occurred_at=datetime(2025, 8, 1, 9, 0))
    rows = _rows(to_delimited_text([expense], [income], "₹"))

    assert rows[0] == CSV_HEADER
    assert rows[1] == ["Expense", "8/18/2025, 3:05 PM", "Food", "₹12.50", ""]
    assert rows[2] == ["Income", "8/1/2025, 9:00 AM", "Salary", "₹1000.00", ""]


def test_csv_round_trip(make_record):
    records = [
        make_record(3.0, category="Travel", occurred_at=datetime(2025, 1, 2, 0, 7), notes="bus"),
        make_record(45.99, category="Bills", occurred_at=datetime(2025, 12, 31, 23, 59)),
    ]
    rows = _rows(to_delimited_text(records, [], "$"))[1:]

    for record, row in zip(records, rows):
        assert parse_numeric_datetime(row[1]) == record.occurred_at
        assert row[2] == record.category_name
        assert float(row[3].lstrip("$")) == record.amount
        assert row[4] == (record.notes or "")


def test_csv_quotes_special_characters(make_record):
    notes = 'He said "hi", then\nleft'
    record = make_record(5.0, category="Food, drinks", notes=notes)
    text = to_delimited_text([record], [], "₹")

    assert '"He said ""hi"", then\nleft"' in text
    assert '"Food, drinks"' in text
    row = _rows(text)[1]
    assert row[2] == "Food, drinks"
    assert row[4] == notes


def test_csv_empty_has_only_header():
    assert to_delimited_text([], [], "₹") == "Type,Date,Category,Amount,Notes\n"


# ── Document layout ───────────────────────────────────────────────────────────

def test_empty_document_layout():
    pages = build_document_pages([], [], "₹", GENERATED_AT)
    texts = _texts(pages)

    assert len(pages) == 1
    assert texts[0] == "Expense Report"
    assert texts[1] == "August 20, 2025 at 9:15 AM"
    assert "Income (0)" in texts
    assert "No income recorded." in texts
    assert "Expenses (0)" in texts
    assert "No expenses recorded." in texts
    assert texts.index("Income (0)") < texts.index("Expenses (0)")

    first = pages[0].lines[0]
    assert first.y == PAGE_HEIGHT - PAGE_MARGIN
    assert first.size == 24 and first.bold


def test_net_line_color_follows_sign(make_record):
    surplus = build_document_pages([make_record(10.0)], [make_record(50.0, kind="income")], "₹", GENERATED_AT)
    deficit = build_document_pages([make_record(80.0)], [make_record(50.0, kind="income")], "₹", GENERATED_AT)

    def net_line(pages):
        return next(l for l in pages[0].lines if l.text.startswith("Net Amount"))

    assert net_line(surplus).text == "Net Amount: ₹40.00"
    assert net_line(surplus).color == NET_POSITIVE_COLOR
    assert net_line(deficit).text == "Net Amount: ₹-30.00"
    assert net_line(deficit).color == NET_NEGATIVE_COLOR


def test_record_and_note_lines(make_record):
    record = make_record(7.5, category="Food", occurred_at=datetime(2025, 8, 18, 15, 5), notes="Lunch")
    lines = build_document_pages([record], [], "₹", GENERATED_AT)[0].lines

    bullet = next(l for l in lines if l.text.startswith("•"))
    note = next(l for l in lines if "Note:" in l.text)
    assert bullet.text == "• Food: ₹7.50 - 8/18/2025, 3:05 PM"
    assert note.text == "  Note: Lunch"
    assert note.size == 10
    assert note.x == bullet.x + 20
    assert bullet.y - note.y == 20


def test_long_reports_paginate_within_margins(make_record):
    expenses = [make_record(float(i + 1), notes=f"note {i}") for i in range(60)]
    pages = build_document_pages(expenses, [], "₹", GENERATED_AT)

    assert len(pages) > 1
    for page in pages:
        assert page.lines
        assert page.lines[0].y == PAGE_HEIGHT - PAGE_MARGIN
        assert all(line.y >= PAGE_MARGIN for line in page.lines)
    assert sum(t.startswith("•") for t in _texts(pages)) == 60


def test_pdf_bytes(make_record):
    data = to_paginated_document([make_record(1.0)], [], "₹", GENERATED_AT)
    assert data.startswith(b"%PDF")


# ── File export ───────────────────────────────────────────────────────────────

def test_export_to_file_writes_csv(tx_service, settings, tmp_path):
    tx_service.add("expense", 9.99, "Food", datetime(2025, 8, 18, 12, 0), "Sandwich")
    tx_service.add("income", 500.0, "Salary", datetime(2025, 8, 1, 9, 0))
    path = tmp_path / "export.csv"

    ExportService(tx_service, settings).export_to_file(ExportFormat.CSV, str(path))

    rows = _rows(path.read_text(encoding="utf-8"))
    assert [r[0] for r in rows[1:]] == ["Expense", "Income"]
    assert rows[1][3] == "₹9.99"


def test_export_to_missing_folder_raises(tx_service, settings, tmp_path):
    with pytest.raises(OSError):
        ExportService(tx_service, settings).export_to_file(
            ExportFormat.CSV, str(tmp_path / "missing" / "export.csv")
        )


def test_default_filename():
    name = ExportService.default_filename(ExportFormat.PDF, datetime(2025, 8, 20))
    assert name.startswith("expense_data_")
    assert name.endswith(".pdf")
