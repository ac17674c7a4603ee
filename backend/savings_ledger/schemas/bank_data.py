from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class Transaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str
    type: str
    amount: float

    @field_validator("type")
    @classmethod
    def type_normalize(cls, v: str):
        return (v or "").strip().lower()


class InterestRate(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")
    rate: float


class User(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    transactions: tuple[Transaction, ...] = ()
    intervals: tuple[InterestRate, ...] = Field(default=(), alias="interestRates")


class BankData(BaseModel):
    users: list[User] = Field(default_factory=list)


users_adapter = TypeAdapter(list[User])


def dump_users(users: list[User]) -> bytes:
    return users_adapter.dump_json(users, by_alias=True)


def load_users(raw: bytes) -> list[User]:
    return users_adapter.validate_json(raw)
