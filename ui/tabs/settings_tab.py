import customtkinter as ctk
from tkinter import filedialog, messagebox

from database.db_manager import StoreError
from models.settings import AppSettings
from services.export_service import ExportFormat, ExportService
from services.security_service import SecurityGate
from services.settings_service import SettingsService
from services.transaction_service import TransactionService
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.pin_setup_dialog import PinSetupDialog
from utils.app_config import get_db_folder, set_db_folder
from utils.constants import APP_NAME, APP_VERSION
from utils.date_helpers import DATE_FORMAT_OPTIONS, WEEKDAY_NAMES


class SettingsTab(ctk.CTkFrame):
    """Preferences, app lock, export, data reset and about."""

    def __init__(
        self,
        master,
        settings: AppSettings,
        settings_service: SettingsService,
        gate: SecurityGate,
        export_service: ExportService,
        tx_service: TransactionService,
        notify_refresh,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._settings = settings
        self._settings_svc = settings_service
        self._gate = gate
        self._export_svc = export_service
        self._tx_svc = tx_service
        self._notify_refresh = notify_refresh

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        scroll = ctk.CTkScrollableFrame(self, fg_color="transparent")
        scroll.grid(row=0, column=0, sticky="nsew")
        scroll.grid_columnconfigure(0, weight=1)

        self._build_preferences_section(scroll)
        self._build_security_section(scroll)
        self._build_data_section(scroll)
        self._build_db_folder_section(scroll)
        self._build_about_section(scroll)

    def refresh(self):
        """Re-read the shared settings object into the widgets."""
        s = self._settings
        self._currency_var.set(s.currency_symbol)
        self._date_fmt_var.set(s.date_format)
        self._weekday_var.set(WEEKDAY_NAMES[s.first_weekday])
        self._notifications_var.set(s.notifications_enabled)
        self._dark_var.set(s.dark_mode)
        self._sync_security_widgets()

    # ── Section 1: Preferences ────────────────────────────────────────────────

    def _build_preferences_section(self, parent):
        section = self._make_section(parent, "Preferences", row=0)
        s = self._settings

        self._row_label(section, "Currency Symbol:", 0)
        self._currency_var = ctk.StringVar(value=s.currency_symbol)
        ctk.CTkEntry(section, textvariable=self._currency_var, width=60).grid(
            row=0, column=1, padx=4, pady=6, sticky="w"
        )

        self._row_label(section, "Date Format:", 1)
        self._date_fmt_var = ctk.StringVar(value=s.date_format)
        ctk.CTkComboBox(
            section, values=DATE_FORMAT_OPTIONS, variable=self._date_fmt_var,
            width=180, state="readonly",
        ).grid(row=1, column=1, padx=4, pady=6, sticky="w")

        self._row_label(section, "Week Starts On:", 2)
        self._weekday_var = ctk.StringVar(value=WEEKDAY_NAMES[s.first_weekday])
        ctk.CTkComboBox(
            section, values=WEEKDAY_NAMES, variable=self._weekday_var,
            width=180, state="readonly",
        ).grid(row=2, column=1, padx=4, pady=6, sticky="w")

        self._notifications_var = ctk.BooleanVar(value=s.notifications_enabled)
        ctk.CTkSwitch(section, text="Notifications", variable=self._notifications_var).grid(
            row=3, column=1, padx=4, pady=6, sticky="w"
        )

        self._dark_var = ctk.BooleanVar(value=s.dark_mode)
        ctk.CTkSwitch(section, text="Dark Mode", variable=self._dark_var).grid(
            row=4, column=1, padx=4, pady=6, sticky="w"
        )

        ctk.CTkButton(
            section, text="Save Preferences", width=140, command=self._save_preferences,
        ).grid(row=5, column=0, columnspan=2, pady=(10, 4))

        self._prefs_status_var = ctk.StringVar()
        ctk.CTkLabel(
            section, textvariable=self._prefs_status_var,
            text_color="#4CAF50", font=ctk.CTkFont(size=11),
        ).grid(row=6, column=0, columnspan=2, pady=(0, 8))

    def _save_preferences(self):
        try:
            self._settings_svc.update(
                self._settings,
                currency_symbol=self._currency_var.get().strip(),
                date_format=self._date_fmt_var.get(),
                first_weekday=WEEKDAY_NAMES.index(self._weekday_var.get()),
                notifications_enabled=self._notifications_var.get(),
                dark_mode=self._dark_var.get(),
            )
        except StoreError as e:
            messagebox.showerror("Error", str(e), parent=self.winfo_toplevel())
            return
        self._currency_var.set(self._settings.currency_symbol)
        ctk.set_appearance_mode("dark" if self._settings.dark_mode else "light")
        self._prefs_status_var.set("Preferences saved. Date format applies after restart.")
        self._notify_refresh("full")

    # ── Section 2: Security ───────────────────────────────────────────────────

    def _build_security_section(self, parent):
        section = self._make_section(parent, "Security", row=1)

        self._lock_var = ctk.BooleanVar()
        self._bio_var = ctk.BooleanVar()
        self._pin_var = ctk.BooleanVar()

        ctk.CTkSwitch(
            section, text="App Lock", variable=self._lock_var,
            command=lambda: self._configure_lock(enabled=self._lock_var.get()),
        ).grid(row=0, column=0, columnspan=2, padx=8, pady=6, sticky="w")
        ctk.CTkSwitch(
            section, text="Unlock with Biometrics", variable=self._bio_var,
            command=lambda: self._configure_lock(use_biometric=self._bio_var.get()),
        ).grid(row=1, column=0, columnspan=2, padx=8, pady=6, sticky="w")
        ctk.CTkSwitch(
            section, text="Unlock with PIN", variable=self._pin_var,
            command=lambda: self._configure_lock(use_pin=self._pin_var.get()),
        ).grid(row=2, column=0, columnspan=2, padx=8, pady=6, sticky="w")

        btn_frame = ctk.CTkFrame(section, fg_color="transparent")
        btn_frame.grid(row=3, column=0, columnspan=2, padx=8, pady=6, sticky="w")
        self._pin_btn = ctk.CTkButton(btn_frame, text="", width=120, command=self._setup_pin)
        self._pin_btn.pack(side="left", padx=(0, 4))
        self._remove_pin_btn = ctk.CTkButton(
            btn_frame, text="Remove PIN", width=110,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._remove_pin,
        )
        self._remove_pin_btn.pack(side="left", padx=4)
        self._lock_now_btn = ctk.CTkButton(btn_frame, text="Lock Now", width=100, command=self._gate.lock)
        self._lock_now_btn.pack(side="left", padx=4)

        if not self._gate.biometric_available:
            ctk.CTkLabel(
                section, text="Biometric authentication is not available on this device.",
                text_color="gray60", font=ctk.CTkFont(size=11), anchor="w",
            ).grid(row=4, column=0, columnspan=2, sticky="w", padx=8)

        self._security_error_var = ctk.StringVar()
        ctk.CTkLabel(
            section, textvariable=self._security_error_var,
            text_color="#F44336", font=ctk.CTkFont(size=11), anchor="w",
        ).grid(row=5, column=0, columnspan=2, sticky="w", padx=8, pady=(0, 6))

        self._sync_security_widgets()

    def _sync_security_widgets(self):
        self._lock_var.set(self._gate.enabled)
        self._bio_var.set(self._gate.use_biometric)
        self._pin_var.set(self._gate.use_pin)
        self._pin_btn.configure(text="Change PIN" if self._gate.has_passcode else "Set Up PIN")
        self._remove_pin_btn.configure(state="normal" if self._gate.has_passcode else "disabled")
        self._lock_now_btn.configure(state="normal" if self._gate.enabled else "disabled")

    def _configure_lock(self, **changes):
        try:
            self._gate.configure(**changes)
            self._security_error_var.set("")
        except (ValueError, StoreError) as e:
            self._security_error_var.set(str(e))
        self._sync_security_widgets()

    def _setup_pin(self):
        dlg = PinSetupDialog(self.winfo_toplevel(), self._gate)
        self.wait_window(dlg)
        if dlg.saved:
            self._security_error_var.set("")
        self._sync_security_widgets()

    def _remove_pin(self):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Remove PIN",
            message="Remove the PIN? PIN unlock will be turned off.",
        )
        if not dlg.result:
            return
        try:
            if self._gate.enabled and not self._gate.use_biometric:
                self._gate.configure(enabled=False, use_pin=False)
            self._gate.clear_passcode()
        except (ValueError, StoreError) as e:
            self._security_error_var.set(str(e))
        self._sync_security_widgets()

    # ── Section 3: Data ───────────────────────────────────────────────────────

    def _build_data_section(self, parent):
        section = self._make_section(parent, "Data", row=2)

        self._export_fmt_var = ctk.StringVar(value=ExportFormat.PDF.label)
        btn_frame = ctk.CTkFrame(section, fg_color="transparent")
        btn_frame.grid(row=0, column=0, sticky="w", padx=8, pady=6)

        ctk.CTkSegmentedButton(
            btn_frame, values=[f.label for f in ExportFormat], variable=self._export_fmt_var,
        ).pack(side="left", padx=(0, 8))
        ctk.CTkButton(btn_frame, text="Export…", width=100, command=self._export).pack(
            side="left", padx=4
        )
        ctk.CTkButton(
            btn_frame, text="Clear All Data", width=120,
            fg_color="#F44336", hover_color="#D32F2F",
            command=self._clear_all,
        ).pack(side="left", padx=(24, 4))

        self._io_status_var = ctk.StringVar()
        ctk.CTkLabel(
            section, textvariable=self._io_status_var,
            text_color="#4CAF50", font=ctk.CTkFont(size=11), anchor="w",
        ).grid(row=1, column=0, sticky="w", padx=8, pady=(0, 6))

    def _export(self):
        fmt = next(f for f in ExportFormat if f.label == self._export_fmt_var.get())
        path = filedialog.asksaveasfilename(
            title=f"Export as {fmt.label}",
            defaultextension=f".{fmt.extension}",
            filetypes=[(fmt.label, f"*.{fmt.extension}"), ("All files", "*.*")],
            initialfile=self._export_svc.default_filename(fmt),
        )
        if not path:
            return
        try:
            self._export_svc.export_to_file(fmt, path)
        except (OSError, StoreError) as e:
            messagebox.showerror("Export Failed", str(e), parent=self.winfo_toplevel())
            return
        self._io_status_var.set(f"Exported to {path}")

    def _clear_all(self):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Clear All Data",
            message="Delete every expense and income record? This cannot be undone.",
            confirm_text="Delete All",
        )
        if not dlg.result:
            return
        try:
            count = self._tx_svc.clear_all()
        except StoreError as e:
            messagebox.showerror("Error", str(e), parent=self.winfo_toplevel())
            return
        self._io_status_var.set(f"Deleted {count} records.")
        self._notify_refresh("transaction")

    # ── Section 4: DB folder ──────────────────────────────────────────────────

    def _build_db_folder_section(self, parent):
        section = self._make_section(parent, "Database Folder", row=3)

        self._db_folder_var = ctk.StringVar(value=get_db_folder() or "(default)")
        ctk.CTkEntry(section, textvariable=self._db_folder_var, state="readonly", width=340).grid(
            row=0, column=0, padx=(8, 4), pady=4, sticky="ew"
        )
        ctk.CTkButton(section, text="Browse…", width=90, command=self._browse_db_folder).grid(
            row=0, column=1, padx=4
        )
        ctk.CTkButton(
            section, text="Reset to Default", width=120,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._reset_db_folder,
        ).grid(row=0, column=2, padx=(4, 8))

        self._db_restart_label = ctk.CTkLabel(
            section, text="", text_color="#FF9800", font=ctk.CTkFont(size=11), anchor="w",
        )
        self._db_restart_label.grid(row=1, column=0, columnspan=3, sticky="w", padx=8, pady=(0, 6))

    def _browse_db_folder(self):
        path = filedialog.askdirectory(title="Choose DB folder")
        if path:
            self._set_db_folder(path)

    def _reset_db_folder(self):
        self._set_db_folder(None)

    def _set_db_folder(self, path: str | None):
        try:
            set_db_folder(path)
        except OSError as e:
            messagebox.showerror("Error", str(e), parent=self.winfo_toplevel())
            return
        self._db_folder_var.set(path or "(default)")
        self._db_restart_label.configure(text="Restart the app for the change to take effect.")

    # ── Section 5: About ──────────────────────────────────────────────────────

    def _build_about_section(self, parent):
        section = self._make_section(parent, "About", row=4)
        ctk.CTkLabel(section, text=f"{APP_NAME} {APP_VERSION}", anchor="w").grid(
            row=0, column=0, sticky="w", padx=8, pady=(4, 0)
        )
        ctk.CTkLabel(
            section, text="Track daily expenses and income, stored locally on this computer.",
            text_color="gray60", font=ctk.CTkFont(size=11), anchor="w",
        ).grid(row=1, column=0, sticky="w", padx=8, pady=(0, 6))

    # ── Helpers ───────────────────────────────────────────────────────────────

    @staticmethod
    def _row_label(section, text: str, row: int):
        ctk.CTkLabel(section, text=text, anchor="e", width=120).grid(
            row=row, column=0, padx=(8, 4), pady=6, sticky="e"
        )

    def _make_section(self, parent, title: str, row: int) -> ctk.CTkFrame:
        """Create a labelled card section and return its inner frame."""
        outer = ctk.CTkFrame(parent, corner_radius=8)
        outer.grid(row=row, column=0, sticky="ew", padx=12, pady=8)
        outer.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            outer, text=title, font=ctk.CTkFont(size=14, weight="bold"), anchor="w",
        ).grid(row=0, column=0, sticky="w", padx=12, pady=(10, 4))

        inner = ctk.CTkFrame(outer, fg_color="transparent")
        inner.grid(row=1, column=0, sticky="ew", padx=4, pady=(0, 8))
        inner.grid_columnconfigure(0, weight=1)
        return inner
