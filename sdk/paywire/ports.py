"""Contracts of the external collaborators."""

from typing import Optional, Protocol

from paywire.types import (
    AccountBalance,
    AddressField,
    LedgerResponse,
    RecipientCandidate,
    TransactionRecord,
    TransferRequest,
)


class AccountDirectory(Protocol):
    """Read-only view of user accounts."""

    async def search(
        self,
        pattern: str,
        exclude_user_id: str,
        limit: int,
    ) -> list[RecipientCandidate]:
        """Case-insensitive substring match over email, UPI handle and wallet id."""
        ...

    async def lookup(
        self,
        field: AddressField,
        value: str,
    ) -> Optional[RecipientCandidate]:
        """Exact match on a single identifier field."""
        ...


class LedgerService(Protocol):
    """Sole mutator of balances.

    ``transfer`` debits the caller and credits the recipient atomically and
    is idempotent on ``request.idempotency_key``. Implementations raise
    ``LedgerDeclined`` for business declines and ``TransportFailure`` when no
    structured answer was received.
    """

    async def transfer(self, request: TransferRequest) -> LedgerResponse:
        ...


class AccountState(Protocol):
    """Read side of the ledger, used to reconcile after an unknown outcome."""

    async def balance(self, user_id: str) -> AccountBalance:
        ...

    async def transactions(self, user_id: str, limit: int) -> list[TransactionRecord]:
        """Most recent first."""
        ...
