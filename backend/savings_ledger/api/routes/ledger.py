from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from savings_ledger.api.deps import repository, user_by_name, as_of_date
from savings_ledger.schemas.bank_data import User
from savings_ledger.schemas.ledger import AccountValuePoint, CurrentRateOut
from savings_ledger.services.bank_data import BankDataRepository
from savings_ledger.services.errors import EmptyLedger

router = APIRouter(prefix="/users/{name}", tags=["ledger"])


@router.get("/account-values", response_model=list[AccountValuePoint])
def account_values(
    u: User = Depends(user_by_name),
    today: date = Depends(as_of_date),
    repo: BankDataRepository = Depends(repository),
):
    try:
        series = repo.get_account_values_series(u, today=today)
    except EmptyLedger:
        raise HTTPException(status_code=422, detail="empty_ledger")
    return [AccountValuePoint(date=d, balance=b) for d, b in series]


@router.get("/current-rate", response_model=CurrentRateOut)
def current_rate(
    u: User = Depends(user_by_name),
    today: date = Depends(as_of_date),
    repo: BankDataRepository = Depends(repository),
):
    return CurrentRateOut(name=u.name, rate=repo.get_current_interest_rate(u, today=today), as_of=today)
