from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from datetime import UTC, date, datetime
from io import StringIO
from typing import Iterable, Optional, Sequence

from pydantic import ValidationError

from ..core.errors import InvalidFormatError
from ..models import BASE_CURRENCY, Account, Snapshot, Transaction


ACCOUNT_COLUMNS = [
    "Account ID",
    "Name",
    "Phone",
    f"Balance ({BASE_CURRENCY.value})",
    "Created At",
    "Last Transaction",
]
TRANSACTION_COLUMNS = [
    "Transaction ID",
    "Account ID",
    "Amount",
    "Currency",
    "Exchange Rate",
    "Type",
    "Date",
    "Notes",
]
# Spreadsheet tools need the BOM to pick UTF-8 for non-Latin names.
BOM = "\ufeff"


@dataclass(frozen=True)
class TabularExport:
    accounts_csv: bytes
    transactions_csv: bytes


def snapshot_payload(accounts: Sequence[Account], transactions: Sequence[Transaction]) -> dict:
    """The ``{accounts, transactions}`` body shared by backups and the remote mirror."""
    return {
        "accounts": [a.model_dump(mode="json", by_alias=True, exclude_none=True) for a in accounts],
        "transactions": [
            t.model_dump(mode="json", by_alias=True, exclude_none=True) for t in transactions
        ],
    }


def export_snapshot(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    exported_at: Optional[datetime] = None,
) -> bytes:
    payload = snapshot_payload(accounts, transactions)
    payload["exportedAt"] = (exported_at or datetime.now(UTC)).isoformat()
    return json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")


def import_snapshot(raw: bytes) -> Snapshot:
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidFormatError("Backup is not valid JSON") from exc

    if not isinstance(data, dict) or "accounts" not in data or "transactions" not in data:
        raise InvalidFormatError("Backup must contain accounts and transactions")

    try:
        restored = Snapshot.model_validate(data)
    except ValidationError as exc:
        raise InvalidFormatError(f"Backup contains invalid records: {exc.error_count()} error(s)") from exc

    for kind, records in (("account", restored.accounts), ("transaction", restored.transactions)):
        duplicates = _duplicate_ids(record.id for record in records)
        if duplicates:
            raise InvalidFormatError(f"Backup repeats {kind} id(s): {', '.join(duplicates)}")
    return restored


def _duplicate_ids(ids: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    repeated: list[str] = []
    for record_id in ids:
        if record_id in seen and record_id not in repeated:
            repeated.append(record_id)
        seen.add(record_id)
    return repeated


def backup_filename(today: Optional[date] = None) -> str:
    today = today or datetime.now(UTC).date()
    return f"backup_balance_{today.isoformat()}.json"


def _number(value: Optional[float]) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _timestamp(value: Optional[datetime]) -> str:
    return value.isoformat() if value else ""


def _render(header: list[str], rows: list[list[str]]) -> bytes:
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(header)
    writer.writerows(rows)
    return (BOM + output.getvalue()).encode("utf-8")


def export_tabular(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
) -> TabularExport:
    account_rows = [
        [
            account.id,
            account.name,
            account.phone_number or "",
            _number(account.balance),
            _timestamp(account.created_at),
            _timestamp(account.last_transaction_date),
        ]
        for account in accounts
    ]
    transaction_rows = [
        [
            txn.id,
            txn.account_id,
            _number(txn.amount),
            txn.currency.value,
            # base-currency rows carry the identity rate
            _number(txn.exchange_rate if txn.exchange_rate is not None else 1),
            txn.type.value,
            _timestamp(txn.date),
            txn.notes or "",
        ]
        for txn in transactions
    ]
    return TabularExport(
        accounts_csv=_render(ACCOUNT_COLUMNS, account_rows),
        transactions_csv=_render(TRANSACTION_COLUMNS, transaction_rows),
    )
