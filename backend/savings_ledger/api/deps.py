from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session
from savings_ledger.db.session import SessionLocal
from savings_ledger.schemas.bank_data import User
from savings_ledger.services.bank_data import BankDataRepository
from savings_ledger.services.cache import SqlKeyValueStore
from savings_ledger.services.dates import require_date
from savings_ledger.services.errors import MalformedDate
from savings_ledger.utils.timezone import today_ledger

def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()

def repository(s: Session = Depends(db)):
    repo = BankDataRepository(SqlKeyValueStore(s))
    try:
        yield repo
    finally:
        repo.close()

def user_by_name(name: str, repo: BankDataRepository = Depends(repository)) -> User:
    u = repo.get_user(name)
    if u is None:
        raise HTTPException(status_code=404, detail="user_not_found")
    return u

def as_of_date(as_of: str | None = None):
    if as_of is None:
        return today_ledger()
    try:
        return require_date(as_of)
    except MalformedDate:
        raise HTTPException(status_code=400, detail="malformed_date")
