"""Transfer endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Header

from paywire.orchestrator import TransferOrchestrator
from paywire.types import TransferResult
from paywire_service.api.deps import get_orchestrator
from paywire_service.middleware.caller import get_caller_id
from paywire_service.schemas.transfer import TransferCreate

router = APIRouter()


@router.post("", response_model=TransferResult)
async def send_money(
    request: TransferCreate,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    caller_id: str = Depends(get_caller_id),
    orchestrator: TransferOrchestrator = Depends(get_orchestrator),
) -> TransferResult:
    """Send money to a recipient.

    Repeat the call with the same ``Idempotency-Key`` to retry one send
    action; concurrent repeats share a single ledger call.
    """
    # Keys are scoped to the caller so that two users cannot collide.
    scoped_key = f"{caller_id}:{idempotency_key}" if idempotency_key else None

    transfer = orchestrator.build_request(request.recipient, request.amount, scoped_key)
    result = await orchestrator.execute(transfer)

    if idempotency_key:
        result = result.model_copy(update={"idempotency_key": idempotency_key})
    return result
