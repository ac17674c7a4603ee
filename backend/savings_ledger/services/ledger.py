from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, Protocol

from savings_ledger.schemas.bank_data import InterestRate, User
from savings_ledger.services.dates import format_date, parse_date
from savings_ledger.services.events import Event, apply_action, build_events, schedule_events

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.0

Series = list[tuple[str, float]]


class LedgerObserver(Protocol):
    def series_started(self, first_day: date) -> None: ...

    def event_applied(self, event: Event, balance: float, rate: float) -> None: ...

    def series_finished(self, balance: float) -> None: ...


class LoggingObserver:
    def __init__(self, name: str = "", log: logging.Logger | None = None):
        self.name = name
        self.log = log or logger

    def series_started(self, first_day: date) -> None:
        self.log.debug("replay for %s starts on %s", self.name or "?", format_date(first_day))

    def event_applied(self, event: Event, balance: float, rate: float) -> None:
        self.log.debug(
            "event on %s (%s): balance=%s rate=%s",
            format_date(event.date),
            type(event.action).__name__,
            balance,
            rate,
        )

    def series_finished(self, balance: float) -> None:
        self.log.info("final balance for %s: %s", self.name or "?", balance)


def _compound(balance: float, rate: float) -> float:
    return balance * (1 + rate / DAYS_PER_YEAR)


def project_balances(
    events: list[Event],
    today: date,
    observer: LedgerObserver | None = None,
) -> Series:
    balance = 0.0
    current_rate = 0.0
    day = events[0].date
    rows: Series = []

    if observer is not None:
        observer.series_started(day)

    for ev in events:
        while day < ev.date:
            balance = _compound(balance, current_rate)
            rows.append((format_date(day), balance))
            day = day + timedelta(days=1)

        balance = apply_action(balance, ev.action)
        if ev.rate_change is not None:
            current_rate = ev.rate_change

        if observer is not None:
            observer.event_applied(ev, balance, current_rate)

    while day <= today:
        balance = _compound(balance, current_rate)
        rows.append((format_date(day), balance))
        day = day + timedelta(days=1)

    if observer is not None:
        observer.series_finished(balance)

    return rows


def account_values_series(user: User, today: date, observer: LedgerObserver | None = None) -> Series:
    events = schedule_events(build_events(user.transactions, user.intervals), name=user.name)
    return project_balances(events, today, observer=observer)


def current_interest_rate(intervals: Iterable[InterestRate], today: date) -> float:
    # Last match in list order wins, not the latest end date.
    rate = 0.0
    for r in intervals:
        end = parse_date(r.end_date)
        if end is None:
            continue
        if end <= today:
            rate = r.rate
    return rate
