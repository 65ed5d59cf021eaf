from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Sequence

import httpx

from ..core.errors import MirrorFailure
from ..models import Account, Transaction
from .snapshot import snapshot_payload


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MirrorOutcome:
    endpoint: str
    delivered: bool
    status_code: Optional[int] = None
    error: Optional[MirrorFailure] = None


class RemoteMirror:
    """Fire-and-forget push of the full ledger snapshot to an external endpoint.

    ``push`` hands the POST to a worker thread and returns a future right
    away. Callers may ignore it; it only exists so the outcome can be
    inspected. Transport errors are logged and recorded on the outcome,
    never raised. There is no retry and no ordering between pushes, which
    is fine because every push carries the whole state.
    """

    def __init__(self, client: Optional[httpx.Client] = None, max_workers: int = 2) -> None:
        self.client = client or httpx.Client()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="ledger-mirror",
        )

    def push(
        self,
        endpoint: str,
        accounts: Sequence[Account],
        transactions: Sequence[Transaction],
    ) -> Future[MirrorOutcome]:
        # Serialize now so later mutations cannot leak into this push.
        payload = snapshot_payload(accounts, transactions)
        return self._executor.submit(self._send, endpoint, payload)

    def _send(self, endpoint: str, payload: dict) -> MirrorOutcome:
        try:
            response = self.client.post(endpoint, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning(
                "mirror.failed",
                extra={"endpoint": endpoint, "error": str(exc)},
            )
            return MirrorOutcome(
                endpoint=endpoint,
                delivered=False,
                error=MirrorFailure(f"Mirror push to {endpoint} failed: {exc}"),
            )

        logger.info(
            "mirror.pushed",
            extra={
                "endpoint": endpoint,
                "status_code": response.status_code,
                "accounts": len(payload["accounts"]),
                "transactions": len(payload["transactions"]),
            },
        )
        return MirrorOutcome(endpoint=endpoint, delivered=True, status_code=response.status_code)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        self.client.close()
