from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Union

from savings_ledger.schemas.bank_data import InterestRate, Transaction
from savings_ledger.services.dates import parse_date
from savings_ledger.services.errors import EmptyLedger


@dataclass(frozen=True)
class Deposit:
    amount: float


@dataclass(frozen=True)
class Withdrawal:
    amount: float


@dataclass(frozen=True)
class RateStart:
    rate: float


@dataclass(frozen=True)
class RateBoundary:
    pass


Action = Union[Deposit, Withdrawal, RateStart, RateBoundary]


@dataclass(frozen=True)
class Event:
    date: date
    action: Action

    @property
    def rate_change(self) -> float | None:
        if isinstance(self.action, RateStart):
            return self.action.rate
        return None


def apply_action(balance: float, action: Action) -> float:
    if isinstance(action, Deposit):
        return balance + action.amount
    if isinstance(action, Withdrawal):
        return balance - action.amount
    return balance


def _transaction_event(t: Transaction) -> Event | None:
    d = parse_date(t.date)
    if d is None:
        return None
    if t.type == "deposit":
        return Event(d, Deposit(t.amount))
    return Event(d, Withdrawal(t.amount))


def _interval_events(r: InterestRate) -> list[Event]:
    start = parse_date(r.start_date)
    if start is None:
        return []
    out = [Event(start, RateStart(r.rate))]

    # The closing boundary never carries a rate; the opened rate stays active
    # until a later RateStart replaces it.
    end = parse_date(r.end_date)
    if end is not None:
        out.append(Event(end + timedelta(days=1), RateBoundary()))
    return out


def build_events(transactions: Iterable[Transaction], intervals: Iterable[InterestRate]) -> list[Event]:
    events: list[Event] = []
    for t in transactions:
        ev = _transaction_event(t)
        if ev is not None:
            events.append(ev)
    for r in intervals:
        events.extend(_interval_events(r))
    return events


def schedule_events(events: Iterable[Event], name: str | None = None) -> list[Event]:
    ordered = sorted(events, key=lambda e: e.date)
    if not ordered:
        raise EmptyLedger(name)
    return ordered
