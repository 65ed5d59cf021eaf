from .db import AccountRecord, LedgerSetting, TransactionRecord
from .schemas import (
    BASE_CURRENCY,
    SECONDARY_CURRENCY,
    Account,
    AccountCreate,
    AccountUpdate,
    Currency,
    DashboardStats,
    ImportSummary,
    MonthlyBucket,
    Snapshot,
    SyncEndpoint,
    Transaction,
    TransactionCreate,
    TransactionListItem,
    TransactionType,
)

__all__ = [
    "BASE_CURRENCY",
    "SECONDARY_CURRENCY",
    "Account",
    "AccountCreate",
    "AccountUpdate",
    "Currency",
    "DashboardStats",
    "ImportSummary",
    "MonthlyBucket",
    "Snapshot",
    "SyncEndpoint",
    "Transaction",
    "TransactionCreate",
    "TransactionListItem",
    "TransactionType",
    "AccountRecord",
    "TransactionRecord",
    "LedgerSetting",
]
