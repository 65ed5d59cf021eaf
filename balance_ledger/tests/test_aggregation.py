from datetime import UTC, datetime

import pytest

from ..models import Account, Currency, Transaction, TransactionType
from ..services import aggregation
from .helpers import at

DEPOSIT = TransactionType.DEPOSIT
WITHDRAWAL = TransactionType.WITHDRAWAL


def make_account(account_id: str, name: str, balance: float = 0, phone=None) -> Account:
    return Account(
        id=account_id,
        name=name,
        phone_number=phone,
        balance=balance,
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
    )


def make_txn(txn_id, when, amount=10, type=DEPOSIT, account_id="a", currency=Currency.ILS, rate=None, notes=None):
    return Transaction(
        id=str(txn_id),
        account_id=account_id,
        amount=amount,
        currency=currency,
        exchange_rate=rate,
        type=type,
        date=when,
        notes=notes,
    )


def test_total_balance_sums_signed_balances() -> None:
    accounts = [make_account("a", "A", 5000), make_account("b", "B", -200.5)]
    assert aggregation.total_balance(accounts) == 4799.5
    assert aggregation.total_balance([]) == 0

def test_monthly_series_buckets_by_month_in_base_currency() -> None:
    transactions = [
        make_txn(1, at(2024, 3, 2), 100),
        make_txn(2, at(2024, 3, 20), 30, WITHDRAWAL),
        make_txn(3, at(2024, 3, 21), 10, currency=Currency.USD, rate=3.5),
        make_txn(4, at(2024, 11, 5), 7, WITHDRAWAL, currency=Currency.USD, rate=4),
    ]

    series = aggregation.monthly_series(transactions)

    assert [b.period for b in series] == ["3/2024", "11/2024"]
    assert series[0].deposits == 135
    assert series[0].withdrawals == 30
    assert series[1].deposits == 0
    assert series[1].withdrawals == 28

def test_monthly_series_keeps_first_appearance_order_and_last_six() -> None:
    # recorded out of calendar order
    order = [5, 1, 8, 2, 7, 3, 6, 4]
    transactions = [make_txn(m, at(2023, m)) for m in order]
    transactions.append(make_txn(99, at(2023, 5, 28)))

    series = aggregation.monthly_series(transactions)

    assert len(series) == 6
    assert [b.period for b in series] == ["8/2023", "2/2023", "7/2023", "3/2023", "6/2023", "4/2023"]

def test_monthly_series_does_not_zero_fill_gaps() -> None:
    transactions = [make_txn(1, at(2024, 1)), make_txn(2, at(2024, 4))]
    assert [b.period for b in aggregation.monthly_series(transactions)] == ["1/2024", "4/2024"]

def test_recent_activity_returns_latest_five_descending() -> None:
    transactions = [make_txn(day, at(2024, 6, day)) for day in (3, 9, 1, 10, 7, 2, 8, 5, 4, 6)]

    recent = aggregation.recent_activity(transactions, 5)

    assert [t.date.day for t in recent] == [10, 9, 8, 7, 6]

def test_recent_activity_is_stable_for_equal_dates() -> None:
    same = at(2024, 6, 1)
    transactions = [make_txn(i, same) for i in range(4)] + [make_txn(9, at(2024, 7))]

    recent = aggregation.recent_activity(transactions, 3)

    assert [t.id for t in recent] == ["9", "0", "1"]

def test_dashboard_stats_uses_last_bucket_for_period_totals() -> None:
    accounts = [make_account("a", "A", 100), make_account("b", "B", 50)]
    transactions = [
        make_txn(1, at(2024, 1), 100),
        make_txn(2, at(2024, 2), 80),
        make_txn(3, at(2024, 2, 3), 30, WITHDRAWAL),
    ]

    stats = aggregation.dashboard_stats(accounts, transactions)

    assert stats.total_accounts == 2
    assert stats.total_balance == 150
    assert stats.period_deposits == 80
    assert stats.period_withdrawals == 30
    assert [t.id for t in stats.recent_transactions] == ["3", "2", "1"]

def test_dashboard_stats_empty_ledger() -> None:
    stats = aggregation.dashboard_stats([], [])
    assert stats.monthly_activity == []
    assert stats.period_deposits == 0
    assert stats.recent_transactions == []

def test_search_accounts_matches_name_or_phone() -> None:
    accounts = [
        make_account("1", "Ahmad Mohammad", phone="0501234567"),
        make_account("2", "Al-Noor Company", phone="0509876543"),
    ]
    assert [a.id for a in aggregation.search_accounts(accounts, "noor")] == ["2"]
    assert [a.id for a in aggregation.search_accounts(accounts, "1234")] == ["1"]
    assert len(aggregation.search_accounts(accounts, "  ")) == 2

def test_search_transactions_labels_orphans_and_filters() -> None:
    accounts = [make_account("a", "Alice")]
    transactions = [
        make_txn(1, at(2024, 1), account_id="a", notes="Rent"),
        make_txn(2, at(2024, 2), account_id="gone", notes="Supplies"),
    ]

    everything = aggregation.search_transactions(accounts, transactions)
    assert [(t.id, t.account_name) for t in everything] == [
        ("2", aggregation.UNKNOWN_ACCOUNT_LABEL),
        ("1", "Alice"),
    ]
    assert [t.id for t in aggregation.search_transactions(accounts, transactions, "ALICE")] == ["1"]
    assert [t.id for t in aggregation.search_transactions(accounts, transactions, "supp")] == ["2"]

def test_account_history_newest_first() -> None:
    transactions = [
        make_txn(1, at(2024, 1), account_id="a"),
        make_txn(2, at(2024, 3), account_id="b"),
        make_txn(3, at(2024, 2), account_id="a"),
    ]
    assert [t.id for t in aggregation.account_history(transactions, "a")] == ["3", "1"]

@pytest.mark.parametrize("limit", [0, -1])
def test_monthly_series_non_positive_limit(limit) -> None:
    assert aggregation.monthly_series([make_txn(1, at(2024, 1))], limit=limit) == []
