from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status

from ..core.dependencies import get_ledger_service
from ..models import (
    Account,
    AccountCreate,
    AccountUpdate,
    DashboardStats,
    ImportSummary,
    SyncEndpoint,
    Transaction,
    TransactionCreate,
    TransactionListItem,
)
from ..services import LedgerService


def _download(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

router = APIRouter(prefix="/accounts", tags=["accounts"])

@router.get("", response_model=list[Account], response_model_exclude_none=True)
def list_accounts(
    search: Optional[str] = None,
    service: LedgerService = Depends(get_ledger_service),
) -> list[Account]:
    return service.list_accounts(search)

@router.post(
    "",
    response_model=Account,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_account(
    payload: AccountCreate,
    service: LedgerService = Depends(get_ledger_service),
) -> Account:
    return service.create_account(payload)

@router.get("/{account_id}", response_model=Account, response_model_exclude_none=True)
def get_account(
    account_id: str,
    service: LedgerService = Depends(get_ledger_service),
) -> Account:
    return service.get_account(account_id)

@router.put("/{account_id}", response_model=Account, response_model_exclude_none=True)
def update_account(
    account_id: str,
    payload: AccountUpdate,
    service: LedgerService = Depends(get_ledger_service),
) -> Account:
    return service.update_account(account_id, payload)

@router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_account(
    account_id: str,
    service: LedgerService = Depends(get_ledger_service),
) -> Response:
    service.delete_account(account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get(
    "/{account_id}/transactions",
    response_model=list[Transaction],
    response_model_exclude_none=True,
)
def account_history(
    account_id: str,
    service: LedgerService = Depends(get_ledger_service),
) -> list[Transaction]:
    return service.account_history(account_id)

transaction_router = APIRouter(prefix="/transactions", tags=["transactions"])

@transaction_router.get(
    "",
    response_model=list[TransactionListItem],
    response_model_exclude_none=True,
)
def list_transactions(
    search: Optional[str] = None,
    service: LedgerService = Depends(get_ledger_service),
) -> list[TransactionListItem]:
    return service.list_transactions(search)

@transaction_router.post(
    "",
    response_model=Transaction,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def record_transaction(
    payload: TransactionCreate,
    service: LedgerService = Depends(get_ledger_service),
) -> Transaction:
    return service.record_transaction(payload)

dashboard_router = APIRouter(tags=["dashboard"])

@dashboard_router.get("/dashboard", response_model=DashboardStats, response_model_exclude_none=True)
def dashboard(service: LedgerService = Depends(get_ledger_service)) -> DashboardStats:
    return service.dashboard()

settings_router = APIRouter(prefix="/settings", tags=["settings"])

@settings_router.get("/sync-endpoint", response_model=SyncEndpoint)
def get_sync_endpoint(service: LedgerService = Depends(get_ledger_service)) -> SyncEndpoint:
    return SyncEndpoint(url=service.get_sync_endpoint())

@settings_router.put("/sync-endpoint", response_model=SyncEndpoint)
def set_sync_endpoint(
    payload: SyncEndpoint,
    service: LedgerService = Depends(get_ledger_service),
) -> SyncEndpoint:
    return SyncEndpoint(url=service.set_sync_endpoint(payload.url))

backup_router = APIRouter(tags=["backup"])

@backup_router.get("/backup")
def download_backup(service: LedgerService = Depends(get_ledger_service)) -> Response:
    return _download(service.export_snapshot(), "application/json", service.backup_filename())

@backup_router.post("/backup", response_model=ImportSummary)
async def restore_backup(
    request: Request,
    service: LedgerService = Depends(get_ledger_service),
) -> ImportSummary:
    raw = await request.body()
    return service.import_snapshot(raw)

@backup_router.get("/export/accounts.csv")
def export_accounts_csv(service: LedgerService = Depends(get_ledger_service)) -> Response:
    return _download(
        service.export_tabular().accounts_csv,
        "text/csv; charset=utf-8",
        "accounts.csv",
    )

@backup_router.get("/export/transactions.csv")
def export_transactions_csv(service: LedgerService = Depends(get_ledger_service)) -> Response:
    return _download(
        service.export_tabular().transactions_csv,
        "text/csv; charset=utf-8",
        "transactions.csv",
    )

__all__ = [
    "router",
    "transaction_router",
    "dashboard_router",
    "settings_router",
    "backup_router",
]
