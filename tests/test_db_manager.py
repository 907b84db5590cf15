import os

from database.db_manager import DatabaseManager
from utils.constants import DB_FILE


def test_seeded_settings(db):
    assert db.get_setting("currency_symbol") == "$"
    assert db.get_setting("missing", "fallback") == "fallback"


def test_set_setting_overwrites(db):
    db.set_setting("date_format", "DD/MM/YYYY")
    assert db.get_setting("date_format") == "DD/MM/YYYY"


def test_initialize_is_repeatable(db):
    db.set_setting("appearance_mode", "dark")
    db.initialize()
    assert db.get_setting("appearance_mode") == "dark"


def test_open_creates_folder(tmp_path):
    folder = tmp_path / "nested" / "data"
    db = DatabaseManager.open(db_folder=str(folder))
    try:
        assert os.path.exists(folder / DB_FILE)
        tables = {
            r["name"] for r in db.get_connection().execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            )
        }
        assert {"recurring_templates", "transactions", "deleted_occurrences",
                "month_settings", "app_settings"} <= tables
    finally:
        db.close()
