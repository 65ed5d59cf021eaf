from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class Currency(str, Enum):
    ILS = "ILS"
    USD = "USD"

BASE_CURRENCY = Currency.ILS
SECONDARY_CURRENCY = Currency.USD

class TransactionType(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken to be UTC so every ledger date is comparable."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class Account(CamelModel):
    id: str
    name: str
    phone_number: Optional[str] = None
    balance: float = Field(default=0.0, description="Balance in the base currency, may be negative")
    created_at: datetime
    last_transaction_date: Optional[datetime] = None

    @field_validator("created_at", "last_transaction_date")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

class Transaction(CamelModel):
    id: str
    account_id: str
    amount: float = Field(..., gt=0, allow_inf_nan=False, description="Amount in the transaction currency")
    currency: Currency
    exchange_rate: Optional[float] = Field(
        default=None,
        gt=0,
        allow_inf_nan=False,
        description="Factor converting amount into the base currency",
    )
    type: TransactionType
    date: datetime
    notes: Optional[str] = None

    @field_validator("date")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def check_exchange_rate(self) -> "Transaction":
        if self.currency == SECONDARY_CURRENCY and self.exchange_rate is None:
            raise ValueError(f"exchangeRate is required for {SECONDARY_CURRENCY.value}")
        if self.currency == BASE_CURRENCY and self.exchange_rate is not None:
            raise ValueError(f"exchangeRate is not allowed for {BASE_CURRENCY.value}")
        return self

class Snapshot(CamelModel):
    accounts: list[Account]
    transactions: list[Transaction]
    exported_at: Optional[datetime] = None

class AccountCreate(CamelModel):
    name: str = Field(..., min_length=1, description="Display name, not required to be unique")
    phone_number: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("account name required")
        return value

class AccountUpdate(AccountCreate):
    pass

class TransactionCreate(CamelModel):
    account_id: str
    type: TransactionType
    amount: float
    currency: Currency = BASE_CURRENCY
    exchange_rate: Optional[float] = None
    date: datetime
    notes: Optional[str] = None

class TransactionListItem(Transaction):
    account_name: str = Field(..., description="Account name, or a placeholder for a deleted account")

class MonthlyBucket(CamelModel):
    period: str = Field(..., description="month/year, e.g. 3/2024")
    deposits: float = 0.0
    withdrawals: float = 0.0

class DashboardStats(CamelModel):
    total_accounts: int
    total_balance: float
    monthly_activity: list[MonthlyBucket]
    recent_transactions: list[Transaction]
    period_deposits: float = 0.0
    period_withdrawals: float = 0.0

class SyncEndpoint(CamelModel):
    url: Optional[str] = None

class ImportSummary(CamelModel):
    accounts: int
    transactions: int
