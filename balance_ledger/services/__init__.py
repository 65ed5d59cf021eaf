from .engine import LedgerEngine, LedgerState
from .ledger import LedgerService
from .mirror import MirrorOutcome, RemoteMirror
from .repository import LedgerRepository

__all__ = [
    "LedgerEngine",
    "LedgerState",
    "LedgerService",
    "LedgerRepository",
    "MirrorOutcome",
    "RemoteMirror",
]
