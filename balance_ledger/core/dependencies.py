from functools import lru_cache

from fastapi import Depends
from sqlmodel import Session

from ..services import LedgerRepository, LedgerService, RemoteMirror
from .config import get_settings
from .db import get_session


@lru_cache(maxsize=1)
def get_mirror() -> RemoteMirror:
    return RemoteMirror(max_workers=get_settings().mirror_workers)

def get_ledger_service(
    session: Session = Depends(get_session),
    mirror: RemoteMirror = Depends(get_mirror),
) -> LedgerService:
    repository = LedgerRepository(session, seed=get_settings().seed_demo_data)
    return LedgerService(session, repository, mirror)
