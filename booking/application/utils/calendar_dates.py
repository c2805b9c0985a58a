from __future__ import annotations

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

MONTH_NAMES = {
    "en": (
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ),
    "fr": (
        "janvier",
        "février",
        "mars",
        "avril",
        "mai",
        "juin",
        "juillet",
        "août",
        "septembre",
        "octobre",
        "novembre",
        "décembre",
    ),
}


def today_in(timezone: ZoneInfo) -> date:
    return datetime.now(timezone).date()


def midnight_timestamp(day: date, timezone: ZoneInfo) -> str:
    """ISO-8601 timestamp of local midnight, e.g. 2025-06-10T00:00:00+01:00."""
    return datetime.combine(day, time.min, tzinfo=timezone).isoformat()


def format_long_date(day: date, locale: str) -> str:
    """Long calendar form: "10 juin 2025" (fr) or "June 10, 2025" (en)."""
    normalized = (locale or "").lower().split("-")[0]
    if normalized == "fr":
        return f"{day.day} {MONTH_NAMES['fr'][day.month - 1]} {day.year}"
    return f"{MONTH_NAMES['en'][day.month - 1]} {day.day}, {day.year}"
