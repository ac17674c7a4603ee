from __future__ import annotations

import re
from datetime import date, timedelta

from savings_ledger.services.errors import MalformedDate

_DATE_RE = re.compile(r"^\s*(\d{1,4})-(\d{1,2})-(\d{1,2})")


def parse_date(value: str | None) -> date | None:
    # Out-of-range month and day values roll over: 2024-13-01 is 2025-01-01.
    if not value:
        return None
    m = _DATE_RE.match(value)
    if m is None:
        return None

    year, month, day = (int(g) for g in m.groups())
    years, month0 = divmod(year * 12 + month - 1, 12)
    try:
        return date(years, month0 + 1, 1) + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        return None


def require_date(value: str) -> date:
    d = parse_date(value)
    if d is None:
        raise MalformedDate(value)
    return d


def format_date(d: date) -> str:
    return d.isoformat()
