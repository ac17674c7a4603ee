from fastapi import APIRouter, Depends
from savings_ledger.api.deps import repository, user_by_name
from savings_ledger.schemas.bank_data import User
from savings_ledger.services.bank_data import BankDataRepository

router = APIRouter(prefix="/users", tags=["users"])

@router.get("", response_model=list[User], response_model_by_alias=True)
def list_users(repo: BankDataRepository = Depends(repository)):
    return repo.load_data()

@router.get("/{name}", response_model=User, response_model_by_alias=True)
def get_user(u: User = Depends(user_by_name)):
    return u
