"""Dependencies wiring the payment components to the database."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from paywire.idempotency import InFlightRegistry
from paywire.orchestrator import TransferOrchestrator
from paywire.ports import AccountDirectory, AccountState, LedgerService
from paywire.resolver import RecipientResolver
from paywire.scan import ScanIntentRouter
from paywire_service.core.config import settings
from paywire_service.db import get_db
from paywire_service.middleware.caller import get_caller_id
from paywire_service.services.account import SqlAccountState
from paywire_service.services.directory import SqlAccountDirectory
from paywire_service.services.ledger import SqlLedgerService

# Shared by every request handled by this process.
transfer_registry = InFlightRegistry()
scan_router = ScanIntentRouter()


async def get_directory(db: AsyncSession = Depends(get_db)) -> AccountDirectory:
    return SqlAccountDirectory(db)


async def get_account_state(db: AsyncSession = Depends(get_db)) -> AccountState:
    return SqlAccountState(db)


async def get_resolver(
    directory: AccountDirectory = Depends(get_directory),
) -> RecipientResolver:
    return RecipientResolver(
        directory,
        min_query_length=settings.SEARCH_MIN_QUERY_LENGTH,
        limit=settings.SEARCH_RESULT_LIMIT,
    )


async def get_ledger(
    caller_id: str = Depends(get_caller_id),
    db: AsyncSession = Depends(get_db),
) -> LedgerService:
    return SqlLedgerService(db, sender_user_id=caller_id)


async def get_orchestrator(
    ledger: LedgerService = Depends(get_ledger),
) -> TransferOrchestrator:
    return TransferOrchestrator(ledger, registry=transfer_registry)


async def get_scan_router() -> ScanIntentRouter:
    return scan_router
