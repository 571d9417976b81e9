import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.category_dao import CategoryDAO
from database.secret_dao import SecretDAO
from database.transaction_dao import TransactionDAO

from services.category_service import CategoryResolver, CategoryService
from services.export_service import ExportService
from services.report_service import ReportService
from services.security_service import SecurityGate
from services.settings_service import SettingsService
from services.transaction_service import TransactionService

from ui.app_window import AppWindow
from utils.app_config import LOG_DIR, get_db_folder, get_log_level
from utils.constants import APP_NAME, APP_VERSION
from utils.logger import setup_logging


def main():
    # ── Bootstrap: logging and DB folder from pre-DB config ──────────────────
    logger = setup_logging(get_log_level(), log_dir=LOG_DIR)
    logger.info("Starting %s %s", APP_NAME, APP_VERSION)

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=get_db_folder())

    # ── DAOs ─────────────────────────────────────────────────────────────────
    tx_dao = TransactionDAO(db)
    category_dao = CategoryDAO(db)
    secret_dao = SecretDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    settings_svc = SettingsService(db)
    settings = settings_svc.load()
    tx_svc = TransactionService(tx_dao)
    report_svc = ReportService(tx_svc, settings)
    category_svc = CategoryService(category_dao)
    resolver = CategoryResolver(category_dao)
    export_svc = ExportService(tx_svc, settings)
    gate = SecurityGate(settings, settings_svc, secret_dao)

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode("dark" if settings.dark_mode else "light")
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        settings=settings,
        settings_service=settings_svc,
        tx_service=tx_svc,
        report_service=report_svc,
        category_service=category_svc,
        resolver=resolver,
        export_service=export_svc,
        gate=gate,
    )

    def on_close():
        logger.info("Shutting down")
        db.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
