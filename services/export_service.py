"""Render expense and income records to CSV text and a paginated PDF report."""
import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure

from models.settings import AppSettings
from models.transaction import Transaction
from services.transaction_service import TransactionService
from utils.constants import (
    APP_NAME, LINE_HEIGHT, NET_NEGATIVE_COLOR, NET_POSITIVE_COLOR,
    PAGE_HEIGHT, PAGE_MARGIN, PAGE_WIDTH,
)
from utils.date_helpers import format_long_datetime, format_numeric_datetime
from utils.date_helpers import now as current_time

logger = logging.getLogger(__name__)

CSV_HEADER = ["Type", "Date", "Category", "Amount", "Notes"]

_TEXT_COLOR = "#000000"
_MUTED_COLOR = "#8E8E93"


class ExportFormat(Enum):
    PDF = ("PDF", "pdf")
    CSV = ("Excel (CSV)", "csv")

    def __init__(self, label: str, extension: str):
        self.label = label
        self.extension = extension


# ── CSV ───────────────────────────────────────────────────────────────────────

def _csv_row(type_label: str, record: Transaction, currency_symbol: str) -> list[str]:
    return [
        type_label,
        format_numeric_datetime(record.occurred_at),
        record.category_name,
        f"{currency_symbol}{record.amount:.2f}",
        record.notes or "",
    ]


def to_delimited_text(
    expenses: list[Transaction],
    income: list[Transaction],
    currency_symbol: str,
) -> str:
    """Header line, then expenses, then income.

    Fields holding a comma, quote or newline are quoted, quotes doubled.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_HEADER)
    for record in expenses:
        writer.writerow(_csv_row("Expense", record, currency_symbol))
    for record in income:
        writer.writerow(_csv_row("Income", record, currency_symbol))
    return buf.getvalue()


# ── Paginated document ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TextLine:
    x: float
    y: float            # points from the bottom edge, top of the text
    text: str
    size: float
    bold: bool = False
    color: str = _TEXT_COLOR


@dataclass
class DocumentPage:
    lines: list[TextLine] = field(default_factory=list)


class _PageWriter:
    """Tracks the vertical offset and starts a new page when a block would not fit."""

    def __init__(self):
        self.pages: list[DocumentPage] = [DocumentPage()]
        self.y = PAGE_HEIGHT - PAGE_MARGIN

    def ensure_room(self, required: float):
        if self.y - required < PAGE_MARGIN:
            self.pages.append(DocumentPage())
            self.y = PAGE_HEIGHT - PAGE_MARGIN

    def draw(self, text: str, size: float, x: float = PAGE_MARGIN, bold: bool = False,
             color: str = _TEXT_COLOR):
        self.pages[-1].lines.append(TextLine(x, self.y, text, size, bold, color))

    def advance(self, amount: float):
        self.y -= amount


def _write_section(
    writer: _PageWriter,
    title: str,
    empty_text: str,
    records: list[Transaction],
    currency_symbol: str,
):
    writer.ensure_room(50)
    writer.draw(f"{title} ({len(records)})", 18, bold=True)
    writer.advance(30)

    if not records:
        writer.draw(empty_text, 12, color=_MUTED_COLOR)
        writer.advance(LINE_HEIGHT)
        return

    for record in records:
        writer.ensure_room(LINE_HEIGHT)
        writer.draw(
            f"• {record.category_name}: {currency_symbol}{record.amount:.2f}"
            f" - {format_numeric_datetime(record.occurred_at)}",
            12,
        )
        writer.advance(LINE_HEIGHT)
        if record.notes:
            writer.ensure_room(LINE_HEIGHT)
            writer.draw(f"  Note: {record.notes}", 10, x=PAGE_MARGIN + 20, color=_MUTED_COLOR)
            writer.advance(LINE_HEIGHT)


def build_document_pages(
    expenses: list[Transaction],
    income: list[Transaction],
    currency_symbol: str,
    generated_at: datetime | None = None,
) -> list[DocumentPage]:
    """Lay out the report on US-letter pages; no rendering happens here."""
    generated_at = generated_at or current_time()
    writer = _PageWriter()

    writer.ensure_room(50)
    writer.draw("Expense Report", 24, bold=True)
    writer.advance(40)

    writer.ensure_room(30)
    writer.draw(format_long_datetime(generated_at), 12, color=_MUTED_COLOR)
    writer.advance(40)

    total_expenses = sum(r.amount for r in expenses)
    total_income = sum(r.amount for r in income)
    net = total_income - total_expenses

    writer.ensure_room(40)
    writer.draw(f"Total Expenses: {currency_symbol}{total_expenses:.2f}", 12)
    writer.advance(20)
    writer.draw(f"Total Income: {currency_symbol}{total_income:.2f}", 12)
    writer.advance(20)
    writer.draw(
        f"Net Amount: {currency_symbol}{net:.2f}", 14, bold=True,
        color=NET_POSITIVE_COLOR if net >= 0 else NET_NEGATIVE_COLOR,
    )
    writer.advance(40)

    _write_section(writer, "Income", "No income recorded.", income, currency_symbol)
    writer.advance(20)
    _write_section(writer, "Expenses", "No expenses recorded.", expenses, currency_symbol)

    return writer.pages


def render_pdf(pages: list[DocumentPage]) -> bytes:
    buf = io.BytesIO()
    with PdfPages(buf, metadata={"Title": "Expense Report", "Creator": APP_NAME}) as pdf:
        for page in pages:
            fig = Figure(figsize=(PAGE_WIDTH / 72, PAGE_HEIGHT / 72))
            for line in page.lines:
                fig.text(
                    line.x / PAGE_WIDTH,
                    line.y / PAGE_HEIGHT,
                    line.text,
                    fontsize=line.size,
                    fontweight="bold" if line.bold else "normal",
                    color=line.color,
                    va="top",
                    ha="left",
                )
            pdf.savefig(fig)
    return buf.getvalue()


def to_paginated_document(
    expenses: list[Transaction],
    income: list[Transaction],
    currency_symbol: str,
    generated_at: datetime | None = None,
) -> bytes:
    return render_pdf(build_document_pages(expenses, income, currency_symbol, generated_at))


# ── File export ───────────────────────────────────────────────────────────────

class ExportService:
    def __init__(self, tx_service: TransactionService, settings: AppSettings):
        self._tx_svc = tx_service
        self._settings = settings

    @staticmethod
    def default_filename(fmt: ExportFormat, at: datetime | None = None) -> str:
        stamp = int((at or current_time()).timestamp())
        return f"expense_data_{stamp}.{fmt.extension}"

    def render(self, fmt: ExportFormat) -> bytes:
        expenses = self._tx_svc.list_expenses()
        income = self._tx_svc.list_income()
        symbol = self._settings.currency_symbol
        if fmt == ExportFormat.CSV:
            return to_delimited_text(expenses, income, symbol).encode("utf-8")
        return to_paginated_document(expenses, income, symbol)

    def export_to_file(self, fmt: ExportFormat, path: str) -> str:
        data = self.render(fmt)
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError:
            logger.exception("Export to %s failed", path)
            raise
        logger.info("Exported %s to %s (%d bytes)", fmt.extension, path, len(data))
        return path
