from datetime import date, datetime
import calendar
from utils.constants import DATE_FORMAT, MONTH_FORMAT

_STRFTIME_MAP = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD.MM.YYYY": "%d.%m.%Y",
}

_TKCAL_MAP = {
    "MM/DD/YYYY": "mm/dd/yyyy",
    "DD/MM/YYYY": "dd/mm/yyyy",
    "YYYY-MM-DD": "yyyy-mm-dd",
    "DD.MM.YYYY": "dd.mm.yyyy",
}


def today() -> date:
    return date.today()


def current_month_str() -> str:
    return date.today().strftime(MONTH_FORMAT)


def parse_date(date_str: str | None) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_month(d: date) -> str:
    return d.strftime(MONTH_FORMAT)


def parse_month(month_str: str) -> date | None:
    """Return the first day of the given YYYY-MM month string."""
    if not month_str:
        return None
    try:
        return datetime.strptime(month_str, MONTH_FORMAT).date()
    except ValueError:
        return None


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(month_str: str) -> tuple[date, date]:
    """Return (first_day, last_day) for a YYYY-MM month."""
    d = parse_month(month_str)
    if d is None:
        raise ValueError(f"Invalid month: {month_str}")
    return d, d.replace(day=days_in_month(d.year, d.month))


def prev_month(month_str: str) -> str:
    d = parse_month(month_str)
    if d is None:
        raise ValueError(f"Invalid month: {month_str}")
    return format_month(add_months(d, -1))


def next_month(month_str: str) -> str:
    d = parse_month(month_str)
    if d is None:
        raise ValueError(f"Invalid month: {month_str}")
    return format_month(add_months(d, 1))


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    return min(day, days_in_month(year, month))


def add_months(d: date, n: int, day: int | None = None) -> date:
    """Move d by n calendar months.

    The result lands on `day` (default: d.day) clamped to the length of the
    destination month, so Jan 31 + 1 month is Feb 28/29, never Mar 2/3.
    """
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    target = d.day if day is None else day
    return date(year, month, clamp_day_to_month(year, month, target))


def ordinal(n: int) -> str:
    """1 -> '1st', 22 -> '22nd', 13 -> '13th'."""
    if 11 <= n % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def friendly_month(month_str: str) -> str:
    """Convert YYYY-MM to e.g. 'February 2026'."""
    d = parse_month(month_str)
    if d is None:
        return month_str
    return d.strftime("%B %Y")


def format_display_date(d: date | None, fmt_key: str = "MM/DD/YYYY") -> str:
    """Render a date in the user-facing display format ('' for None)."""
    if d is None:
        return ""
    return d.strftime(_STRFTIME_MAP.get(fmt_key, "%m/%d/%Y"))


def tkcal_date_pattern(fmt_key: str) -> str:
    """Return the tkcalendar date_pattern string for the given format key."""
    return _TKCAL_MAP.get(fmt_key, "mm/dd/yyyy")


def parse_display_date(display_str: str, fmt_key: str) -> date | None:
    """Parse a date in the given display format. Returns None on failure.

    Falls back to ISO 8601 parse if the display format doesn't match.
    """
    if not display_str:
        return None
    fmt = _STRFTIME_MAP.get(fmt_key, "%m/%d/%Y")
    try:
        return datetime.strptime(display_str.strip(), fmt).date()
    except ValueError:
        return parse_date(display_str.strip().replace("/", "-").replace(".", "-"))
