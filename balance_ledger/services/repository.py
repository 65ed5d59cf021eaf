from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Optional

from sqlmodel import Session, select

from ..models import (
    Account,
    AccountRecord,
    Currency,
    LedgerSetting,
    Transaction,
    TransactionRecord,
    TransactionType,
)


logger = logging.getLogger(__name__)

ACCOUNTS_KEY = "ledger.accounts"
TRANSACTIONS_KEY = "ledger.transactions"
SYNC_ENDPOINT_KEY = "ledger.sync_endpoint"


def demo_accounts(now: datetime) -> list[Account]:
    return [
        Account(id="1", name="Ahmad Mohammad", phone_number="0501234567", balance=5000,
                created_at=now, last_transaction_date=now),
        Account(id="2", name="Al-Noor Company", phone_number="0509876543", balance=12500,
                created_at=now, last_transaction_date=now),
        Account(id="3", name="Khaled Al-Omari", phone_number="0561122334", balance=-200,
                created_at=now, last_transaction_date=now),
    ]


def demo_transactions(now: datetime) -> list[Transaction]:
    ils = Currency.ILS
    return [
        Transaction(id="101", account_id="1", amount=5000, currency=ils,
                    type=TransactionType.DEPOSIT, date=now, notes="Opening payment"),
        Transaction(id="102", account_id="2", amount=15000, currency=ils,
                    type=TransactionType.DEPOSIT, date=now, notes="Design project"),
        Transaction(id="103", account_id="2", amount=2500, currency=ils,
                    type=TransactionType.WITHDRAWAL, date=now, notes="Materials"),
        Transaction(id="104", account_id="3", amount=200, currency=ils,
                    type=TransactionType.WITHDRAWAL, date=now, notes="Advance"),
    ]


class LedgerRepository:
    """Key-value style store for the account set, the transaction log and settings.

    Collections are written whole. A collection that was never written is
    seeded with demo data on first load when ``seed`` is set.
    """

    def __init__(self, session: Session, *, seed: bool = True) -> None:
        self.session = session
        self.seed = seed

    # Settings -----------------------------------------------------------
    def get_setting(self, key: str) -> Optional[str]:
        record = self.session.get(LedgerSetting, key)
        return None if record is None else record.value

    def set_setting(self, key: str, value: str) -> None:
        record = self.session.get(LedgerSetting, key)
        if record is None:
            record = LedgerSetting(key=key, value=value)
        else:
            record.value = value
        self.session.add(record)
        self.session.flush()

    def delete_setting(self, key: str) -> None:
        record = self.session.get(LedgerSetting, key)
        if record is not None:
            self.session.delete(record)
            self.session.flush()

    def _mark_written(self, key: str) -> None:
        if self.get_setting(key) is None:
            self.set_setting(key, datetime.now(UTC).isoformat())

    # Accounts -----------------------------------------------------------
    def load_accounts(self) -> list[Account]:
        if self.get_setting(ACCOUNTS_KEY) is None:
            accounts = demo_accounts(datetime.now(UTC)) if self.seed else []
            self.save_accounts(accounts)
            logger.info("ledger.seeded", extra={"collection": "accounts", "count": len(accounts)})
            return accounts
        stmt = select(AccountRecord).order_by(AccountRecord.position)
        return [
            Account.model_validate(record.model_dump(exclude={"position"}))
            for record in self.session.exec(stmt)
        ]

    def save_accounts(self, accounts: list[Account]) -> None:
        for record in self.session.exec(select(AccountRecord)).all():
            self.session.delete(record)
        self.session.flush()
        for position, account in enumerate(accounts):
            self.session.add(AccountRecord(position=position, **account.model_dump(mode="json")))
        self._mark_written(ACCOUNTS_KEY)
        self.session.flush()

    # Transactions -------------------------------------------------------
    def load_transactions(self) -> list[Transaction]:
        if self.get_setting(TRANSACTIONS_KEY) is None:
            transactions = demo_transactions(datetime.now(UTC)) if self.seed else []
            self.save_transactions(transactions)
            logger.info(
                "ledger.seeded",
                extra={"collection": "transactions", "count": len(transactions)},
            )
            return transactions
        stmt = select(TransactionRecord).order_by(TransactionRecord.position)
        return [
            Transaction.model_validate(record.model_dump(exclude={"position"}))
            for record in self.session.exec(stmt)
        ]

    def save_transactions(self, transactions: list[Transaction]) -> None:
        for record in self.session.exec(select(TransactionRecord)).all():
            self.session.delete(record)
        self.session.flush()
        for position, transaction in enumerate(transactions):
            self.session.add(
                TransactionRecord(position=position, **transaction.model_dump(mode="json"))
            )
        self._mark_written(TRANSACTIONS_KEY)
        self.session.flush()

    # Remote mirror endpoint ---------------------------------------------
    def load_sync_endpoint(self) -> Optional[str]:
        return self.get_setting(SYNC_ENDPOINT_KEY) or None

    def save_sync_endpoint(self, url: Optional[str]) -> None:
        url = (url or "").strip()
        if url:
            self.set_setting(SYNC_ENDPOINT_KEY, url)
        else:
            self.delete_setting(SYNC_ENDPOINT_KEY)
