APP_NAME = "Recurring Budget"
APP_WIDTH = 1100
APP_HEIGHT = 720
DB_FILE = "recurring_budget.db"
DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

TRANSACTION_TYPES = ["income", "expense"]

SCHEDULE_TYPES = ["weekly", "biweekly", "monthly", "custom"]
SCHEDULE_STEP_DAYS = {
    "weekly": 7,
    "biweekly": 14,
}
SCHEDULE_LABELS = {
    "weekly":   "Weekly",
    "biweekly": "Every 2 weeks",
    "monthly":  "Monthly",
    "custom":   "Custom",
}
MIN_DAY_OF_MONTH = 1
MAX_DAY_OF_MONTH = 31

DEFAULT_CATEGORIES = [
    {"id": "housing", "name": "Housing"},
    {"id": "food", "name": "Food & Dining"},
    {"id": "transport", "name": "Transportation"},
    {"id": "utilities", "name": "Utilities"},
    {"id": "entertainment", "name": "Entertainment"},
    {"id": "shopping", "name": "Shopping"},
    {"id": "health", "name": "Health"},
    {"id": "salary", "name": "Salary"},
    {"id": "other", "name": "Other"},
]
CATEGORY_NAMES = {c["id"]: c["name"] for c in DEFAULT_CATEGORIES}

SEVERITY_COLORS = {
    "error":   "#F44336",
    "warning": "#FF9800",
    "info":    "#2196F3",
    "success": "#4CAF50",
}
