from datetime import date
from typing import Callable

import customtkinter as ctk
import tkinter as tk
from tkinter import ttk
from tkcalendar import Calendar

from utils.date_helpers import format_display_date, parse_display_date, today


class DatePickerWidget(ctk.CTkFrame):
    """CTkEntry in the display format plus a calendar popup button.

    .get() returns a date (or None when the entry is empty or unparsable).
    .set(value) accepts a date/datetime or None.
    on_change(date) fires after a pick from the calendar or a valid manual edit.
    """

    def __init__(
        self,
        master,
        initial: date | None = None,
        date_format: str = "MM/DD/YYYY",
        on_change: Callable[[date], None] | None = None,
        width: int = 110,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)

        self._date_format = date_format
        self._on_change = on_change
        self._popup: ctk.CTkToplevel | None = None

        self._var = tk.StringVar(
            value=format_display_date(initial, date_format) if initial else ""
        )

        self._entry = ctk.CTkEntry(self, textvariable=self._var, width=width)
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._on_focus_out)
        self._entry.bind("<Return>", self._on_focus_out)

        self._btn = ctk.CTkButton(self, text="📅", width=32, command=self._open_popup)
        self._btn.grid(row=0, column=1, padx=(4, 0))

    def get(self) -> date | None:
        raw = self._var.get().strip()
        return parse_display_date(raw, self._date_format) if raw else None

    def set(self, value: date | None):
        self._var.set(format_display_date(value, self._date_format) if value else "")
        self._reset_border()

    def is_valid(self) -> bool:
        return self.get() is not None

    def _on_focus_out(self, _event=None):
        raw = self._var.get().strip()
        if not raw:
            self._reset_border()
            return
        d = parse_display_date(raw, self._date_format)
        if d:
            self._var.set(format_display_date(d, self._date_format))
            self._reset_border()
            if self._on_change:
                self._on_change(d)
        else:
            self._entry.configure(border_color="#F44336")

    def _reset_border(self):
        self._entry.configure(border_color=("gray65", "gray35"))

    def _open_popup(self):
        if self._popup and self._popup.winfo_exists():
            self._popup.destroy()
            self._popup = None
            return

        popup = ctk.CTkToplevel(self)
        popup.overrideredirect(True)
        popup.resizable(False, False)
        self._popup = popup

        # Theme the calendar to match CTk appearance
        if ctk.get_appearance_mode() == "Dark":
            bg, fg = "#2b2b2b", "#ffffff"
        else:
            bg, fg = "#ffffff", "#000000"
        style = ttk.Style(popup)
        style.theme_use("default")
        style.configure("Calendar.Treeview", background=bg, foreground=fg, fieldbackground=bg)

        current = self.get() or today()

        cal = Calendar(
            popup,
            selectmode="day",
            year=current.year,
            month=current.month,
            day=current.day,
            date_pattern="yyyy-mm-dd",
            background=bg,
            foreground=fg,
            headersbackground=bg,
            headersforeground=fg,
            selectbackground="#1f6aa5",
            weekendbackground=bg,
            weekendforeground=fg,
            othermonthforeground="gray60",
            bordercolor=bg,
        )
        cal.pack(padx=4, pady=4)
        cal.bind("<<CalendarSelected>>", lambda e: self._on_date_selected(cal, popup))

        self._entry.update_idletasks()
        x = self._entry.winfo_rootx()
        y = self._entry.winfo_rooty() + self._entry.winfo_height() + 2
        popup.geometry(f"+{x}+{y}")

        popup.bind("<FocusOut>", lambda e: self._maybe_close(popup))

    def _on_date_selected(self, cal: Calendar, popup: ctk.CTkToplevel):
        picked = cal.selection_get()
        self.set(picked)
        popup.destroy()
        self._popup = None
        if self._on_change:
            self._on_change(picked)

    def _maybe_close(self, popup: ctk.CTkToplevel):
        if not popup.winfo_exists():
            return
        try:
            focused = popup.focus_get()
        except (KeyError, tk.TclError):
            # focus_get fails while focus sits in another toplevel's menu
            focused = None
        if focused is None or not str(focused).startswith(str(popup)):
            popup.destroy()
            self._popup = None
