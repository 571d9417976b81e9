import logging

import customtkinter as ctk

from models.settings import AppSettings
from services.category_service import CategoryResolver, CategoryService
from services.export_service import ExportService
from services.report_service import ReportService
from services.security_service import AppLifecycle, LockState, SecurityGate
from services.settings_service import SettingsService
from services.transaction_service import TransactionService
from ui.components.lock_screen import LockScreen
from ui.tabs.categories_tab import CategoriesTab
from ui.tabs.records_tab import RecordsTab
from ui.tabs.settings_tab import SettingsTab
from ui.tabs.statistics_tab import StatisticsTab
from utils.constants import APP_HEIGHT, APP_NAME, APP_WIDTH

logger = logging.getLogger(__name__)

_REFRESH_SCOPES: dict[str, set[str]] = {
    "transaction": {"expenses", "income", "statistics"},
    "category":    {"expenses", "income", "categories"},
    "full":        {"expenses", "income", "statistics", "categories", "settings"},
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        settings: AppSettings,
        settings_service: SettingsService,
        tx_service: TransactionService,
        report_service: ReportService,
        category_service: CategoryService,
        resolver: CategoryResolver,
        export_service: ExportService,
        gate: SecurityGate,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._settings = settings
        self._settings_svc = settings_service
        self._tx_svc = tx_service
        self._report_svc = report_service
        self._cat_svc = category_service
        self._resolver = resolver
        self._export_svc = export_service
        self._gate = gate

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        self._build_tabs()
        self._build_lock_screen()

    # ── Tabs ────────────────────────────────────────────────────────────────
    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=0, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Expenses", "Income", "Statistics", "Categories", "Settings"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._expenses_tab = self._records_tab("Expenses", "expense")
        self._income_tab = self._records_tab("Income", "income")

        self._statistics_tab = StatisticsTab(
            self._tabview.tab("Statistics"),
            report_service=self._report_svc,
            settings=self._settings,
        )
        self._statistics_tab.grid(row=0, column=0, sticky="nsew")

        self._categories_tab = CategoriesTab(
            self._tabview.tab("Categories"),
            category_service=self._cat_svc,
            notify_refresh=self.notify_tabs_refresh,
        )
        self._categories_tab.grid(row=0, column=0, sticky="nsew")

        self._settings_tab = SettingsTab(
            self._tabview.tab("Settings"),
            settings=self._settings,
            settings_service=self._settings_svc,
            gate=self._gate,
            export_service=self._export_svc,
            tx_service=self._tx_svc,
            notify_refresh=self.notify_tabs_refresh,
        )
        self._settings_tab.grid(row=0, column=0, sticky="nsew")

    def _records_tab(self, tab_name: str, kind: str) -> RecordsTab:
        tab = RecordsTab(
            self._tabview.tab(tab_name),
            kind=kind,
            tx_service=self._tx_svc,
            report_service=self._report_svc,
            category_service=self._cat_svc,
            resolver=self._resolver,
            settings=self._settings,
            notify_refresh=self.notify_tabs_refresh,
        )
        tab.grid(row=0, column=0, sticky="nsew")
        return tab

    # ── Lock ────────────────────────────────────────────────────────────────
    def _build_lock_screen(self):
        self._lock_screen = LockScreen(self, self._gate)
        self._gate.subscribe(self._on_lock_state)

        # Minimizing the window counts as moving to the background
        self.bind("<Unmap>", self._on_unmap)
        self.bind("<Map>", self._on_map)

        if self._gate.is_locked:
            self._lock_screen.show()

    def _on_unmap(self, event):
        if event.widget is self:
            self._gate.on_lifecycle(AppLifecycle.BACKGROUND)

    def _on_map(self, event):
        if event.widget is self:
            self._gate.on_lifecycle(AppLifecycle.ACTIVE)

    def _on_lock_state(self, state: LockState):
        # Gate listeners may fire on the biometric worker thread
        self.after(0, lambda: self._apply_lock_state(state))

    def _apply_lock_state(self, state: LockState):
        if state == LockState.LOCKED:
            self._lock_screen.show()
        else:
            self._lock_screen.hide()
            self.notify_tabs_refresh("full")

    # ── Refresh ──────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        tabs = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        if "expenses"   in tabs: self._expenses_tab.refresh()
        if "income"     in tabs: self._income_tab.refresh()
        if "statistics" in tabs: self._statistics_tab.refresh()
        if "categories" in tabs: self._categories_tab.refresh()
        if "settings"   in tabs: self._settings_tab.refresh()
