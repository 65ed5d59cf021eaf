from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Optional
from uuid import uuid4

from ..core.errors import AccountNotFoundError, InvalidInputError
from ..models import Account, Currency, Transaction, TransactionType
from .currency import normalize, validate_exchange_rate


logger = logging.getLogger(__name__)


@dataclass
class LedgerState:
    accounts: list[Account] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)


class LedgerEngine:
    """Applies ledger mutations to a ``LedgerState``. Performs no I/O.

    Account balances are an incrementally maintained fold over the
    transactions recorded against them, in recording order. Recording a
    transaction never depends on the account existing: the transaction is
    logged either way and only the balance update is skipped.
    """

    def __init__(self, state: Optional[LedgerState] = None) -> None:
        self.state = state or LedgerState()

    def _index_of(self, account_id: str) -> Optional[int]:
        for idx, account in enumerate(self.state.accounts):
            if account.id == account_id:
                return idx
        return None

    def find_account(self, account_id: str) -> Optional[Account]:
        idx = self._index_of(account_id)
        return None if idx is None else self.state.accounts[idx]

    def get_account(self, account_id: str) -> Account:
        account = self.find_account(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found")
        return account

    def add_account(self, name: str, phone_number: Optional[str] = None) -> Account:
        account = Account(
            id=uuid4().hex,
            name=name,
            phone_number=phone_number,
            balance=0.0,
            created_at=datetime.now(UTC),
        )
        self.state.accounts.append(account)
        return account

    def update_account(
        self,
        account_id: str,
        name: str,
        phone_number: Optional[str] = None,
    ) -> Account:
        idx = self._index_of(account_id)
        if idx is None:
            raise AccountNotFoundError(f"Account {account_id} not found")
        updated = self.state.accounts[idx].model_copy(
            update={"name": name, "phone_number": phone_number}
        )
        self.state.accounts[idx] = updated
        return updated

    def delete_account(self, account_id: str) -> bool:
        idx = self._index_of(account_id)
        if idx is None:
            return False
        del self.state.accounts[idx]
        return True

    def record_transaction(
        self,
        *,
        account_id: str,
        type: TransactionType,
        amount: float,
        currency: Currency,
        date: datetime,
        exchange_rate: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> Transaction:
        if amount is None or not math.isfinite(amount) or amount <= 0:
            raise InvalidInputError("Amount must be a positive number")
        validate_exchange_rate(currency, exchange_rate)
        base_amount = normalize(amount, currency, exchange_rate)

        transaction = Transaction(
            id=uuid4().hex,
            account_id=account_id,
            amount=amount,
            currency=currency,
            exchange_rate=exchange_rate,
            type=type,
            date=date,
            notes=notes,
        )
        self.state.transactions.append(transaction)

        idx = self._index_of(account_id)
        if idx is None:
            logger.warning(
                "transaction.orphaned",
                extra={"transaction_id": transaction.id, "account_id": account_id},
            )
            return transaction

        account = self.state.accounts[idx]
        if type == TransactionType.DEPOSIT:
            balance = account.balance + base_amount
        else:
            balance = account.balance - base_amount
        # Follows the latest recorded transaction, so a back-dated entry moves it backward.
        self.state.accounts[idx] = account.model_copy(
            update={"balance": balance, "last_transaction_date": transaction.date}
        )
        return transaction

    def replace_all(
        self,
        accounts: list[Account],
        transactions: list[Transaction],
    ) -> None:
        self.state.accounts = list(accounts)
        self.state.transactions = list(transactions)
