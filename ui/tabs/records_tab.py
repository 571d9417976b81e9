from datetime import date, datetime
from tkinter import messagebox

import customtkinter as ctk

from database.db_manager import StoreError
from models.category import builtin_categories_for
from models.filter_state import FilterState, TimeScope
from models.settings import AppSettings
from models.statistics import Statistics
from models.transaction import Transaction
from services.category_service import CategoryResolver, CategoryService
from services.report_service import ReportService
from services.transaction_service import TransactionService
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.date_picker import DatePickerWidget
from ui.components.transaction_form import TransactionForm
from utils.currency import format_currency
from utils.date_helpers import format_display_date, format_time
from utils.emoji_helpers import tk_color

_MAX_RENDERED_ROWS = 100
_ALL_CATEGORIES = "All Categories"

_KIND_COLORS = {"expense": "#F44336", "income": "#4CAF50"}


class RecordsTab(ctk.CTkFrame):
    """Filterable list of one record kind with a totals header."""

    def __init__(
        self,
        master,
        kind: str,
        tx_service: TransactionService,
        report_service: ReportService,
        category_service: CategoryService,
        resolver: CategoryResolver,
        settings: AppSettings,
        notify_refresh,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._kind = kind
        self._tx_svc = tx_service
        self._report_svc = report_service
        self._cat_svc = category_service
        self._resolver = resolver
        self._settings = settings
        self._notify_refresh = notify_refresh

        self._state = FilterState()
        self._categories = builtin_categories_for(kind)

        self._scope_var = ctk.StringVar(value=TimeScope.ALL.value)
        self._category_var = ctk.StringVar(value=_ALL_CATEGORIES)
        self._filtered_stats_var = ctk.BooleanVar(value=True)
        self._search_var = ctk.StringVar()
        self._search_var.trace_add("write", lambda *_: self._on_search())

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_filter_bar()
        self._build_stats_header()
        self._build_list()
        self._load()

    @property
    def filter_state(self) -> FilterState:
        return self._state

    def refresh(self):
        self._load()

    # ── Filter bar ──────────────────────────────────────────────────────────
    def _build_filter_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        bar.grid_columnconfigure(3, weight=1)

        ctk.CTkSegmentedButton(
            bar,
            values=[scope.value for scope in TimeScope],
            variable=self._scope_var,
            command=self._on_scope_changed,
            width=200,
        ).grid(row=0, column=0, padx=(8, 4), pady=6)

        self._date_picker = DatePickerWidget(
            bar, date_format=self._settings.date_format, on_change=self._on_custom_date,
        )
        # Shown only while the Custom scope is selected
        self._date_picker.grid(row=0, column=1, padx=4)
        self._date_picker.grid_remove()

        ctk.CTkComboBox(
            bar,
            values=[_ALL_CATEGORIES] + [c.label for c in self._categories],
            variable=self._category_var,
            width=160, state="readonly",
            command=self._on_category_changed,
        ).grid(row=0, column=2, padx=4)

        ctk.CTkEntry(
            bar, textvariable=self._search_var,
            placeholder_text="Search notes or category…", width=200,
        ).grid(row=0, column=3, padx=8, sticky="w")

        ctk.CTkButton(
            bar, text=f"+ Add {self._kind.title()}", width=110,
            command=self._open_add_form,
        ).grid(row=0, column=4, padx=(0, 8))

    def _on_scope_changed(self, value: str):
        self._state.time_scope = TimeScope(value)
        if self._state.time_scope == TimeScope.CUSTOM:
            self._date_picker.grid()
        else:
            self._date_picker.grid_remove()
        self._load()

    def _on_custom_date(self, picked: date):
        self._state.custom_date = datetime.combine(picked, datetime.min.time())
        self._load()

    def _on_category_changed(self, value: str):
        self._state.category = None if value == _ALL_CATEGORIES else self._categories.from_name(value)
        self._load()

    def _on_search(self):
        self._state.search = self._search_var.get()
        self._load()

    # ── Totals header ───────────────────────────────────────────────────────
    def _build_stats_header(self):
        frame = ctk.CTkFrame(self, fg_color="transparent")
        frame.grid(row=1, column=0, sticky="ew", padx=8, pady=8)
        frame.grid_columnconfigure((0, 1, 2), weight=1)

        self._stat_labels: dict[str, ctk.CTkLabel] = {}
        self._stat_titles: dict[str, ctk.CTkLabel] = {}
        for i, key in enumerate(("today", "week", "month")):
            card = ctk.CTkFrame(frame, fg_color=("gray90", "gray20"), corner_radius=10)
            card.grid(row=0, column=i, padx=6, sticky="ew")
            self._stat_titles[key] = ctk.CTkLabel(card, text="", text_color="gray60")
            self._stat_titles[key].pack(pady=(10, 0), padx=16)
            self._stat_labels[key] = ctk.CTkLabel(
                card, text="", font=ctk.CTkFont(size=18, weight="bold"),
                text_color=_KIND_COLORS[self._kind],
            )
            self._stat_labels[key].pack(pady=(4, 10), padx=16)

        ctk.CTkCheckBox(
            frame, text="Totals follow filters",
            variable=self._filtered_stats_var, command=self._load,
        ).grid(row=1, column=0, columnspan=3, sticky="w", padx=8, pady=(6, 0))

    def _show_stats(self, stats: Statistics):
        symbol = self._settings.currency_symbol
        custom = self._state.time_scope == TimeScope.CUSTOM and self._state.custom_date is not None
        day_title = (
            format_display_date(self._state.custom_date, self._settings.date_format)
            if custom else "Today"
        )
        for key, title, value in (
            ("today", day_title, stats.total_today),
            ("week", "This Week", stats.total_this_week),
            ("month", "This Month", stats.total_this_month),
        ):
            self._stat_titles[key].configure(text=title)
            self._stat_labels[key].configure(text=format_currency(value, symbol))

    # ── List ────────────────────────────────────────────────────────────────
    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        try:
            visible = self._report_svc.get_visible(self._kind, self._state)
            stats = self._report_svc.get_statistics(
                self._kind, self._state, filtered=self._filtered_stats_var.get()
            )
        except StoreError as e:
            # Keep the last snapshot on screen
            messagebox.showerror("Error", str(e), parent=self.winfo_toplevel())
            return

        self._show_stats(stats)

        for w in self._scroll.winfo_children():
            w.destroy()

        if not visible:
            ctk.CTkLabel(
                self._scroll, text=f"No {self._kind} records match.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=20)
            return

        is_dark = ctk.get_appearance_mode() == "Dark"
        for idx, tx in enumerate(visible[:_MAX_RENDERED_ROWS]):
            self._add_row(idx, tx, is_dark)

        if len(visible) > _MAX_RENDERED_ROWS:
            ctk.CTkLabel(
                self._scroll,
                text=f"Showing {_MAX_RENDERED_ROWS} of {len(visible)} records. Use filters or search to narrow results.",
                text_color="gray60",
                font=ctk.CTkFont(size=11),
            ).grid(row=_MAX_RENDERED_ROWS, column=0, pady=8)

    def _add_row(self, idx: int, tx: Transaction, is_dark: bool):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)
        row.grid_columnconfigure(2, weight=1)

        display = self._resolver.resolve(tx, is_dark=is_dark)
        tint = tk_color(display.color) if display.color else None

        ctk.CTkLabel(row, text=display.emoji, width=32, font=ctk.CTkFont(size=18)).grid(
            row=0, column=0, rowspan=2, padx=(8, 4), pady=4
        )
        ctk.CTkLabel(
            row, text=tx.category_name, anchor="w", text_color=tint,
            font=ctk.CTkFont(weight="bold"),
        ).grid(row=0, column=1, sticky="w", padx=4)
        ctk.CTkLabel(
            row,
            text=f"{format_display_date(tx.occurred_at, self._settings.date_format)}  {format_time(tx.occurred_at)}",
            anchor="w", text_color="gray60", font=ctk.CTkFont(size=11),
        ).grid(row=1, column=1, sticky="w", padx=4)

        ctk.CTkLabel(row, text=tx.notes or "", anchor="w", text_color="gray60").grid(
            row=0, column=2, rowspan=2, sticky="w", padx=8
        )

        sign = "+" if tx.is_income else "-"
        ctk.CTkLabel(
            row, text=f"{sign}{format_currency(tx.amount, self._settings.currency_symbol)}",
            width=100, anchor="e", text_color=_KIND_COLORS[tx.kind],
        ).grid(row=0, column=3, rowspan=2, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=4, rowspan=2, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=44, height=24,
            command=lambda t=tx: self._open_edit_form(t),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Del", width=38, height=24,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda t=tx: self._delete_tx(t),
        ).pack(side="left")

    # ── Actions ─────────────────────────────────────────────────────────────
    def _open_form(self, transaction: Transaction | None = None):
        form = TransactionForm(
            self.winfo_toplevel(),
            self._tx_svc, self._cat_svc,
            kind=self._kind,
            transaction=transaction,
            currency_symbol=self._settings.currency_symbol,
            date_format=self._settings.date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _open_add_form(self):
        self._open_form()

    def _open_edit_form(self, tx: Transaction):
        self._open_form(tx)

    def _delete_tx(self, tx: Transaction):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            f"Delete {tx.kind.title()}",
            f"Delete this {tx.kind} of {format_currency(tx.amount, self._settings.currency_symbol)}?",
        )
        if not dlg.result:
            return
        try:
            self._tx_svc.delete(tx)
        except StoreError as e:
            messagebox.showerror("Error", str(e), parent=self.winfo_toplevel())
            return
        self._notify_refresh("transaction")
