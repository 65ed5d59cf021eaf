"""Read-side views derived from the account set and the transaction log."""
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..models import (
    Account,
    DashboardStats,
    MonthlyBucket,
    Transaction,
    TransactionListItem,
    TransactionType,
)
from .currency import normalize


UNKNOWN_ACCOUNT_LABEL = "Unknown account"


def total_balance(accounts: Iterable[Account]) -> float:
    return sum((account.balance for account in accounts), 0.0)


def period_key(transaction: Transaction) -> str:
    # month/year without zero padding, e.g. "3/2024"
    return f"{transaction.date.month}/{transaction.date.year}"


def monthly_series(transactions: Iterable[Transaction], limit: int = 6) -> list[MonthlyBucket]:
    """Deposit/withdrawal totals per calendar month, in base currency.

    Buckets keep the order in which their month first appears in the log
    and months without activity are not filled in. Only the last ``limit``
    buckets are returned.
    """
    buckets: dict[str, MonthlyBucket] = {}
    for transaction in transactions:
        key = period_key(transaction)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = MonthlyBucket(period=key)
        amount = normalize(transaction.amount, transaction.currency, transaction.exchange_rate)
        if transaction.type == TransactionType.DEPOSIT:
            bucket.deposits += amount
        else:
            bucket.withdrawals += amount
    series = list(buckets.values())
    if limit <= 0:
        return []
    return series[-limit:]


def _newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    # sorted() is stable with reverse=True, ties keep log order
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def recent_activity(transactions: Iterable[Transaction], n: int = 5) -> list[Transaction]:
    if n <= 0:
        return []
    return _newest_first(transactions)[:n]


def dashboard_stats(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
) -> DashboardStats:
    series = monthly_series(transactions)
    latest = series[-1] if series else None
    return DashboardStats(
        total_accounts=len(accounts),
        total_balance=total_balance(accounts),
        monthly_activity=series,
        recent_transactions=recent_activity(transactions),
        period_deposits=latest.deposits if latest else 0.0,
        period_withdrawals=latest.withdrawals if latest else 0.0,
    )


def search_accounts(accounts: Iterable[Account], term: Optional[str] = None) -> list[Account]:
    if not term or not term.strip():
        return list(accounts)
    needle = term.strip()
    return [
        account
        for account in accounts
        if needle.casefold() in account.name.casefold()
        or (account.phone_number and needle in account.phone_number)
    ]


def search_transactions(
    accounts: Sequence[Account],
    transactions: Iterable[Transaction],
    term: Optional[str] = None,
) -> list[TransactionListItem]:
    """Transactions matching ``term`` against account name and notes, newest first."""
    names = {account.id: account.name for account in accounts}
    needle = (term or "").strip().casefold()
    items = []
    for transaction in _newest_first(transactions):
        label = names.get(transaction.account_id, UNKNOWN_ACCOUNT_LABEL)
        haystack = f"{names.get(transaction.account_id, '')} {transaction.notes or ''}".casefold()
        if needle and needle not in haystack:
            continue
        items.append(TransactionListItem(**transaction.model_dump(), account_name=label))
    return items


def account_history(transactions: Iterable[Transaction], account_id: str) -> list[Transaction]:
    return _newest_first(t for t in transactions if t.account_id == account_id)
