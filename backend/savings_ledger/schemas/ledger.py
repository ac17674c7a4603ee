from pydantic import BaseModel
from datetime import date

class AccountValuePoint(BaseModel):
    date: str
    balance: float

class CurrentRateOut(BaseModel):
    name: str
    rate: float
    as_of: date
