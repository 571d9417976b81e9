from datetime import date, datetime, time, timedelta
from utils.constants import DATE_FORMAT, DATETIME_FORMAT

# ── Display date format options ───────────────────────────────────────────────

DATE_FORMAT_OPTIONS = ["MM/DD/YYYY", "DD/MM/YYYY", "YYYY-MM-DD", "DD.MM.YYYY", "MM-DD-YYYY"]

_STRFTIME_MAP = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD.MM.YYYY": "%d.%m.%Y",
    "MM-DD-YYYY": "%m-%d-%Y",
}

_TKCAL_MAP = {
    "MM/DD/YYYY": "mm/dd/yyyy",
    "DD/MM/YYYY": "dd/mm/yyyy",
    "YYYY-MM-DD": "yyyy-mm-dd",
    "DD.MM.YYYY": "dd.mm.yyyy",
    "MM-DD-YYYY": "mm-dd-yyyy",
}

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def now() -> datetime:
    return datetime.now()


def today() -> date:
    return date.today()


# ── Storage format ────────────────────────────────────────────────────────────

def format_datetime(dt: datetime) -> str:
    return dt.strftime(DATETIME_FORMAT)


def parse_datetime(value: str) -> datetime | None:
    """Parse a stored timestamp; accepts a bare YYYY-MM-DD as midnight."""
    if not value:
        return None
    for fmt in (DATETIME_FORMAT, "%Y-%m-%d %H:%M:%S", DATE_FORMAT):
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_date(date_str: str) -> date | None:
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


# ── Calendar windows ──────────────────────────────────────────────────────────

def start_of_day(value: datetime | date) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.min)


def is_same_day(a: datetime | date, b: datetime | date) -> bool:
    day_a = a.date() if isinstance(a, datetime) else a
    day_b = b.date() if isinstance(b, datetime) else b
    return day_a == day_b


def week_start(reference: datetime | date, first_weekday: int = 0) -> datetime:
    """Midnight of the most recent `first_weekday` (0=Mon..6=Sun) on or before reference.

    Raises OverflowError when the window falls outside the supported calendar.
    """
    day = start_of_day(reference)
    offset = (day.weekday() - first_weekday) % 7
    return day - timedelta(days=offset)


def month_start(reference: datetime | date) -> datetime:
    return start_of_day(reference).replace(day=1)


def next_month_start(reference: datetime | date) -> datetime:
    """Raises ValueError past year 9999."""
    first = month_start(reference)
    if first.month == 12:
        return first.replace(year=first.year + 1, month=1)
    return first.replace(month=first.month + 1)


# ── Display ───────────────────────────────────────────────────────────────────

def format_display_date(value: datetime | date, fmt_key: str = "MM/DD/YYYY") -> str:
    return value.strftime(_STRFTIME_MAP.get(fmt_key, "%m/%d/%Y"))


def format_time(value: datetime) -> str:
    """Short 12-hour time, e.g. '3:05 PM'."""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def format_numeric_datetime(value: datetime) -> str:
    """Numeric date with short time, e.g. '8/18/2025, 3:05 PM'."""
    return f"{value.month}/{value.day}/{value.year}, {format_time(value)}"


def parse_numeric_datetime(value: str) -> datetime:
    """Inverse of format_numeric_datetime."""
    return datetime.strptime(value.strip(), "%m/%d/%Y, %I:%M %p")


def format_long_datetime(value: datetime) -> str:
    """Long date with short time, e.g. 'August 18, 2025 at 3:05 PM'."""
    return f"{value.strftime('%B')} {value.day}, {value.year} at {format_time(value)}"


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
        return parse_date(display_str)
