from __future__ import annotations
from typing import Optional
from sqlmodel import Field, SQLModel

class AccountRecord(SQLModel, table=True):
    id: str = Field(primary_key=True)
    position: int = Field(index=True)
    name: str
    phone_number: Optional[str] = None
    balance: float = 0.0
    created_at: str
    last_transaction_date: Optional[str] = None

class TransactionRecord(SQLModel, table=True):
    id: str = Field(primary_key=True)
    position: int = Field(index=True)
    # Plain column, not a foreign key: transactions outlive deleted accounts.
    account_id: str = Field(index=True)
    amount: float
    currency: str
    exchange_rate: Optional[float] = None
    type: str
    date: str
    notes: Optional[str] = None

class LedgerSetting(SQLModel, table=True):
    key: str = Field(primary_key=True)
    value: str
