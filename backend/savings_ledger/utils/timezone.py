from datetime import date, datetime
from zoneinfo import ZoneInfo

from savings_ledger.core.config import settings


def ledger_tz() -> ZoneInfo:
    return ZoneInfo(settings.timezone or "UTC")


def now_ledger() -> datetime:
    return datetime.now(tz=ledger_tz())


def today_ledger() -> date:
    return now_ledger().date()
