from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from io import BytesIO
from datetime import date
import re

from savings_ledger.api.deps import repository, user_by_name, as_of_date
from savings_ledger.schemas.bank_data import User
from savings_ledger.services.bank_data import BankDataRepository
from savings_ledger.services.errors import EmptyLedger
from savings_ledger.services.reports import build_account_report

router = APIRouter(prefix="/users/{name}/report", tags=["reports"])


def _safe_part(v: str) -> str:
    s = (v or "").strip()
    s = re.sub(r"\s+", "_", s)
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", s)
    s = re.sub(r"_+", "_", s).strip("_")
    return (s[:40] or "unknown")

@router.get("")
def report(
    u: User = Depends(user_by_name),
    today: date = Depends(as_of_date),
    repo: BankDataRepository = Depends(repository),
):
    try:
        series = repo.get_account_values_series(u, today=today)
    except EmptyLedger:
        raise HTTPException(status_code=422, detail="empty_ledger")

    buf = BytesIO()
    build_account_report(u, series, repo.get_current_interest_rate(u, today=today), buf)
    buf.seek(0)

    filename = f"{_safe_part(u.name)}_account_values_{today}.xlsx"
    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
