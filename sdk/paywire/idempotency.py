"""In-flight guard for transfers sharing an idempotency key."""

import asyncio
import logging
import uuid
from typing import Awaitable, Callable, Optional

from paywire.exceptions import ConflictIdempotency
from paywire.types import TransferRequest, TransferResult

logger = logging.getLogger(__name__)


def new_idempotency_key() -> str:
    """Generate a key for one user-initiated send action."""
    return uuid.uuid4().hex


class InFlightRegistry:
    """Map of idempotency key to the task settling that transfer.

    A second caller with the same key awaits the running task instead of
    starting another ledger call. The entry is removed by the task itself,
    before any waiter resumes, whatever the outcome.

    All access happens on one event loop; there is no await between the
    lookup and the insert in ``run``.
    """

    def __init__(self) -> None:
        self._calls: dict[str, tuple[TransferRequest, asyncio.Task[TransferResult]]] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._calls

    def __len__(self) -> int:
        return len(self._calls)

    def get(self, key: str) -> Optional[asyncio.Task[TransferResult]]:
        entry = self._calls.get(key)
        return entry[1] if entry else None

    async def run(
        self,
        request: TransferRequest,
        settle: Callable[[TransferRequest], Awaitable[TransferResult]],
    ) -> TransferResult:
        """Settle ``request`` once, sharing the result with concurrent callers.

        The settling task is shielded: cancelling a caller does not cancel
        the ledger call.

        Raises:
            ConflictIdempotency: If the key is in flight for a different request
        """
        key = request.idempotency_key
        entry = self._calls.get(key)

        if entry is not None:
            running_request, task = entry
            if running_request.fingerprint() != request.fingerprint():
                raise ConflictIdempotency(
                    message="Idempotency key is already in use for a different transfer",
                    details={"idempotency_key": key},
                )
            logger.info(f"Joining in-flight transfer {key[:8]}")
        else:
            task = asyncio.ensure_future(self._settle_and_evict(request, settle))
            self._calls[key] = (request, task)

        return await asyncio.shield(task)

    async def _settle_and_evict(
        self,
        request: TransferRequest,
        settle: Callable[[TransferRequest], Awaitable[TransferResult]],
    ) -> TransferResult:
        try:
            return await settle(request)
        finally:
            self._calls.pop(request.idempotency_key, None)
