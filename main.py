import logging
import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.month_settings_dao import MonthSettingsDAO
from database.recurring_dao import RecurringTemplateDAO
from database.transaction_dao import TransactionDAO

from services.month_service import MonthService
from services.recurring_service import RecurringService
from services.transaction_service import TransactionService

from ui.app_window import AppWindow
from utils.app_config import get_db_folder, get_log_level
from utils.constants import LOG_FORMAT

logger = logging.getLogger(__name__)


def main():
    # ── Bootstrap: logging + DB folder from pre-DB config ─────────────────────
    logging.basicConfig(level=get_log_level(), format=LOG_FORMAT)
    db_folder = get_db_folder()

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=db_folder)

    # ── DAOs ─────────────────────────────────────────────────────────────────
    template_dao = RecurringTemplateDAO(db)
    tx_dao = TransactionDAO(db)
    settings_dao = MonthSettingsDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    tx_svc = TransactionService(tx_dao, settings_dao)
    recurring_svc = RecurringService(template_dao, tx_dao, settings_dao)
    month_svc = MonthService(recurring_svc, template_dao, tx_dao, settings_dao)

    # ── Catch up on recurring occurrences since the last run ─────────────────
    new_transactions = recurring_svc.apply_due_templates()
    logger.info("Startup: %d recurring transaction(s) added", len(new_transactions))

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(db.get_setting("appearance_mode", "system"))
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        month_service=month_svc,
        tx_service=tx_svc,
        recurring_service=recurring_svc,
        startup_transactions=new_transactions,
        date_format=db.get_setting("date_format", "MM/DD/YYYY"),
        currency_symbol=db.get_setting("currency_symbol", "$"),
    )

    def on_close():
        db.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
