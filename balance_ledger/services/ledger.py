from __future__ import annotations

import logging
from concurrent.futures import Future
from datetime import date, datetime
from typing import Optional

from sqlmodel import Session

from ..models import (
    Account,
    AccountCreate,
    AccountUpdate,
    DashboardStats,
    ImportSummary,
    Transaction,
    TransactionCreate,
    TransactionListItem,
)
from . import aggregation, snapshot
from .engine import LedgerEngine, LedgerState
from .mirror import MirrorOutcome, RemoteMirror
from .repository import LedgerRepository


logger = logging.getLogger(__name__)


class LedgerService:
    """Owns the account set, the transaction log and the sync endpoint for one unit of work.

    Every mutation runs engine -> repository -> commit -> mirror. Errors raised
    by the engine stop the mutation before anything is written.
    """

    def __init__(
        self,
        session: Session,
        repository: Optional[LedgerRepository] = None,
        mirror: Optional[RemoteMirror] = None,
    ) -> None:
        self.session = session
        self.repository = repository or LedgerRepository(session)
        self.mirror = mirror
        self.engine = LedgerEngine(
            LedgerState(
                accounts=self.repository.load_accounts(),
                transactions=self.repository.load_transactions(),
            )
        )
        self.sync_endpoint = self.repository.load_sync_endpoint()
        # first load may have seeded the store
        self.session.commit()

    @property
    def accounts(self) -> list[Account]:
        return self.engine.state.accounts

    @property
    def transactions(self) -> list[Transaction]:
        return self.engine.state.transactions

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    def _persist(self, *, accounts: bool = True, transactions: bool = False) -> Optional[Future[MirrorOutcome]]:
        if accounts:
            self.repository.save_accounts(self.accounts)
        if transactions:
            self.repository.save_transactions(self.transactions)
        self.session.commit()
        return self._mirror()

    def _mirror(self) -> Optional[Future[MirrorOutcome]]:
        if self.mirror is None or not self.sync_endpoint:
            return None
        return self.mirror.push(self.sync_endpoint, self.accounts, self.transactions)

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------
    def list_accounts(self, search: Optional[str] = None) -> list[Account]:
        return aggregation.search_accounts(self.accounts, search)

    def get_account(self, account_id: str) -> Account:
        return self.engine.get_account(account_id)

    def create_account(self, payload: AccountCreate) -> Account:
        account = self.engine.add_account(payload.name, payload.phone_number)
        self._persist()
        logger.info(
            "account.created",
            extra={"account_id": account.id, "account_name": account.name},
        )
        return account

    def update_account(self, account_id: str, payload: AccountUpdate) -> Account:
        account = self.engine.update_account(account_id, payload.name, payload.phone_number)
        self._persist()
        logger.info("account.updated", extra={"account_id": account_id})
        return account

    def delete_account(self, account_id: str) -> None:
        if not self.engine.delete_account(account_id):
            logger.info("account.delete.missing", extra={"account_id": account_id})
            return
        self._persist()
        logger.info("account.deleted", extra={"account_id": account_id})

    def account_history(self, account_id: str) -> list[Transaction]:
        self.engine.get_account(account_id)
        return aggregation.account_history(self.transactions, account_id)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    def record_transaction(self, payload: TransactionCreate) -> Transaction:
        transaction = self.engine.record_transaction(
            account_id=payload.account_id,
            type=payload.type,
            amount=payload.amount,
            currency=payload.currency,
            exchange_rate=payload.exchange_rate,
            date=payload.date,
            notes=payload.notes,
        )
        self._persist(transactions=True)
        account = self.engine.find_account(payload.account_id)
        logger.info(
            "transaction.recorded",
            extra={
                "transaction_id": transaction.id,
                "account_id": transaction.account_id,
                "type": transaction.type.value,
                "amount": transaction.amount,
                "currency": transaction.currency.value,
                "balance": account.balance if account else None,
            },
        )
        return transaction

    def list_transactions(self, search: Optional[str] = None) -> list[TransactionListItem]:
        return aggregation.search_transactions(self.accounts, self.transactions, search)

    def dashboard(self) -> DashboardStats:
        return aggregation.dashboard_stats(self.accounts, self.transactions)

    # ------------------------------------------------------------------
    # Settings, backup and export
    # ------------------------------------------------------------------
    def get_sync_endpoint(self) -> Optional[str]:
        return self.sync_endpoint

    def set_sync_endpoint(self, url: Optional[str]) -> Optional[str]:
        self.repository.save_sync_endpoint(url)
        self.session.commit()
        self.sync_endpoint = self.repository.load_sync_endpoint()
        logger.info("sync_endpoint.updated", extra={"configured": self.sync_endpoint is not None})
        return self.sync_endpoint

    def export_snapshot(self, exported_at: Optional[datetime] = None) -> bytes:
        return snapshot.export_snapshot(self.accounts, self.transactions, exported_at)

    def backup_filename(self, today: Optional[date] = None) -> str:
        return snapshot.backup_filename(today)

    def import_snapshot(self, raw: bytes) -> ImportSummary:
        restored = snapshot.import_snapshot(raw)
        self.engine.replace_all(restored.accounts, restored.transactions)
        self._persist(transactions=True)
        logger.info(
            "snapshot.imported",
            extra={
                "accounts": len(restored.accounts),
                "transactions": len(restored.transactions),
            },
        )
        return ImportSummary(
            accounts=len(restored.accounts),
            transactions=len(restored.transactions),
        )

    def export_tabular(self) -> snapshot.TabularExport:
        return snapshot.export_tabular(self.accounts, self.transactions)
