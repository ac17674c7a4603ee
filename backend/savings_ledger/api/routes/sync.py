from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from savings_ledger.api.deps import repository
from savings_ledger.schemas.sync import SyncStatusOut
from savings_ledger.services.bank_data import BankDataRepository
from savings_ledger.services.bank_data_sync import get_status, refresh
from savings_ledger.services.errors import RemoteFetchFailure


router = APIRouter(prefix="/sync", tags=["sync"])


@router.get("/status", response_model=SyncStatusOut)
def status():
    return get_status()


@router.post("", response_model=SyncStatusOut)
def sync(repo: BankDataRepository = Depends(repository)):
    try:
        return refresh(repo)
    except RemoteFetchFailure:
        raise HTTPException(status_code=502, detail="bank_data_unavailable")
