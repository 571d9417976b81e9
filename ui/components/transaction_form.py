from datetime import datetime

import customtkinter as ctk

from database.db_manager import StoreError
from models.transaction import Transaction
from services.category_service import CategoryService
from services.transaction_service import TransactionService
from ui.components.date_picker import DatePickerWidget
from utils.currency import parse_amount
from utils.date_helpers import now


class TransactionForm(ctk.CTkToplevel):
    """Add or edit an expense or income record."""

    def __init__(
        self,
        master,
        tx_service: TransactionService,
        category_service: CategoryService,
        kind: str = "expense",
        transaction: Transaction | None = None,
        currency_symbol: str = "",
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._tx_svc = tx_service
        self._cat_svc = category_service
        self._transaction = transaction
        self._kind = transaction.kind if transaction else kind
        self._date_format = date_format
        self.saved = False

        self.title(f"{'Edit' if transaction else 'Add'} {self._kind.title()}")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        initial = transaction.occurred_at if transaction else now()
        r = 0

        # Amount
        self._label(f"Amount ({currency_symbol}):" if currency_symbol else "Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{transaction.amount:.2f}" if transaction else "")
        amount_entry = ctk.CTkEntry(self, textvariable=self._amount_var, width=200)
        amount_entry.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        # Category
        self._label("Category:", r)
        names = self._cat_svc.names_for_kind(self._kind)
        current = transaction.category_name if transaction else (names[0] if names else "")
        if current and current not in names:
            # Records keep their name after a category is renamed or deleted
            names = [current] + names
        self._cat_var = ctk.StringVar(value=current)
        ctk.CTkComboBox(
            self, values=names, variable=self._cat_var, width=200, state="readonly"
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        # Date
        self._label("Date:", r)
        self._date_picker = DatePickerWidget(
            self, initial=initial.date(), date_format=self._date_format
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        # Time
        self._label("Time:", r)
        self._time_var = ctk.StringVar(value=initial.strftime("%H:%M"))
        ctk.CTkEntry(self, textvariable=self._time_var, width=80, placeholder_text="HH:MM").grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="w"
        )
        r += 1

        # Notes
        self._label("Notes:", r)
        self._notes_var = ctk.StringVar(value=transaction.notes or "" if transaction else "")
        ctk.CTkEntry(self, textvariable=self._notes_var, width=200).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        self._build_footer(r)

        self.transient(master)
        self.grab_set()
        self._center()
        amount_entry.focus_set()

    def _label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(row=row, column=0, padx=(16, 8), pady=4, sticky="e")

    def _build_footer(self, r):
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Save", width=110, command=self._on_save).pack(side="right")

    def _occurred_at(self) -> datetime:
        day = self._date_picker.get()
        if day is None:
            raise ValueError("Invalid date.")
        try:
            clock = datetime.strptime(self._time_var.get().strip(), "%H:%M").time()
        except ValueError:
            raise ValueError("Time must look like 14:30.") from None
        return datetime.combine(day, clock)

    def _on_save(self):
        try:
            amount = parse_amount(self._amount_var.get())
            occurred_at = self._occurred_at()
            notes = self._notes_var.get()
            category = self._cat_var.get()
            if self._transaction:
                self._tx_svc.update(self._transaction, amount, category, occurred_at, notes)
            else:
                self._tx_svc.add(self._kind, amount, category, occurred_at, notes)
        except (ValueError, StoreError) as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w // 2}+{mh - h // 2}")
