"""Balance and transaction history endpoints."""

from fastapi import APIRouter, Depends, Query

from paywire.ports import AccountState
from paywire.types import AccountBalance
from paywire_service.api.deps import get_account_state
from paywire_service.middleware.caller import get_caller_id
from paywire_service.schemas.account import TransactionListResponse

router = APIRouter()


@router.get("/me/balance", response_model=AccountBalance)
async def get_balance(
    caller_id: str = Depends(get_caller_id),
    account: AccountState = Depends(get_account_state),
) -> AccountBalance:
    """Get the caller's current balance."""
    return await account.balance(caller_id)


@router.get("/transactions", response_model=TransactionListResponse)
async def list_transactions(
    limit: int = Query(20, ge=1, le=100, description="Number of transactions to return"),
    caller_id: str = Depends(get_caller_id),
    account: AccountState = Depends(get_account_state),
) -> TransactionListResponse:
    """List the caller's transactions, most recent first."""
    items = await account.transactions(caller_id, limit)
    return TransactionListResponse(items=items)
