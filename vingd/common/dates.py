"""
Date and URL utilities.

Dates may be given as relative periods (``"+15 minutes"``, ``"+1 month"``,
``"tomorrow"``), as ISO 8601 durations (``"P1D"``, passed to the broker
verbatim) or as absolute timestamps (ISO 8601 basic/extended, ``"@<unix>"``).
"""

from __future__ import annotations

import calendar
import re
from datetime import datetime, timedelta
from typing import Any
from urllib.parse import urlencode

from vingd.common.config import Config

config = Config()

RELATIVE_PART_RE = re.compile(
    r"\s*(?P<sign>[+-])?\s*(?P<count>\d+)\s*"
    r"(?P<unit>sec|second|min|minute|hour|day|week|fortnight|month|year)s?\b",
    re.IGNORECASE,
)

UNIT_SECONDS = {
    "sec": 1,
    "second": 1,
    "min": 60,
    "minute": 60,
    "hour": 3600,
    "day": 86400,
    "week": 7 * 86400,
    "fortnight": 14 * 86400,
}

KEYWORD_DAYS = {"now": 0, "today": 0, "tomorrow": 1, "yesterday": -1}


def add_months(moment: datetime, months: int) -> datetime:
    """Shift ``moment`` by calendar months, clamping to the month's last day."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_relative(value: str, now: datetime) -> datetime | None:
    """Parse a relative period such as ``"+1 month 2 days"``."""
    position = 0
    moment = now
    matched = False
    while position < len(value):
        match = RELATIVE_PART_RE.match(value, position)
        if not match:
            if value[position:].strip():
                return None
            break
        matched = True
        position = match.end()
        count = int(match.group("count"))
        if match.group("sign") == "-":
            count = -count
        unit = match.group("unit").lower()
        if unit == "month":
            moment = add_months(moment, count)
        elif unit == "year":
            moment = add_months(moment, 12 * count)
        else:
            moment += timedelta(seconds=count * UNIT_SECONDS[unit])
    return moment if matched else None


def parse_date(value: str, now: datetime | None = None) -> datetime:
    """Parse a date/time expression into an aware ``datetime``."""
    now = now or datetime.now().astimezone()
    text = value.strip()
    keyword = text.lower()

    if keyword in KEYWORD_DAYS:
        moment = now + timedelta(days=KEYWORD_DAYS[keyword])
        if keyword != "now":
            moment = moment.replace(hour=0, minute=0, second=0, microsecond=0)
        return moment

    if text.startswith("@") and text[1:].lstrip("-").isdigit():
        return datetime.fromtimestamp(int(text[1:])).astimezone()

    relative = parse_relative(text, now)
    if relative is not None:
        return relative

    try:
        moment = datetime.fromisoformat(text)
    except ValueError as err:
        msg = f"Unrecognized date/time expression: '{value}'"
        raise ValueError(msg) from err
    return moment.astimezone()


def strftime(moment: datetime, fmt: str) -> str:
    """``datetime.strftime`` with ``%:z`` and ``%-d`` on every platform."""
    offset = moment.strftime("%z")
    if offset:
        offset = f"{offset[:3]}:{offset[3:5]}"
    fmt = fmt.replace("%:z", offset).replace("%-d", str(moment.day))
    return moment.strftime(fmt)


def format_date(fmt: str, value: Any, default: Any = None) -> str | None:
    """Convert a date, period or timestamp ``value`` into ``fmt``.

    Falls back to ``default`` when ``value`` is empty. ISO 8601 durations
    (``P...``) are returned with the leading ``P`` replaced by ``+``.
    """
    if not value:
        value = default
    if not value:
        return value
    if isinstance(value, datetime):
        moment = value if value.tzinfo else value.astimezone()
        return strftime(moment, fmt)
    value = str(value)
    if value[0].upper() == "P":
        return "+" + value[1:]
    return strftime(parse_date(value), fmt)


def to_iso_date(value: Any, default: Any = None) -> str | None:
    return format_date(config.DATE_ISO, value, default)


def to_iso_basic_date(value: Any, default: Any = None) -> str | None:
    return format_date(config.DATE_ISO_BASIC, value, default)


def to_human_date(value: Any, default: Any = None) -> str | None:
    """Human readable date; ``"never"`` for an empty value without default."""
    if not value and not default:
        return "never"
    return format_date(config.DATE_HUMAN, value, default)


def to_custom_date(fmt: str, value: Any, default: Any = None) -> str | None:
    return format_date(fmt, value, default)


def concat_url(base: str, params: str = "") -> str:
    """Append an encoded query string to ``base``."""
    if not params:
        return base
    glue = "&" if "?" in base else "?"
    return f"{base}{glue}{params}"


def build_url(base: str, params: dict[str, Any] | None = None) -> str:
    """Build a URL from ``base`` and a dictionary of GET parameters."""
    params = {k: v for k, v in (params or {}).items() if v is not None}
    return concat_url(base, urlencode(params))
