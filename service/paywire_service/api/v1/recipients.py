"""Recipient search and resolution endpoints."""

from fastapi import APIRouter, Depends, Query

from paywire import codec
from paywire.resolver import RecipientResolver
from paywire.types import RecipientCandidate
from paywire_service.api.deps import get_resolver
from paywire_service.middleware.caller import get_caller_id
from paywire_service.schemas.recipient import RecipientSearchResponse, ResolveCodeRequest

router = APIRouter()


@router.get("", response_model=RecipientSearchResponse)
async def search_recipients(
    q: str = Query(..., description="Partial email, UPI handle or wallet id"),
    caller_id: str = Depends(get_caller_id),
    resolver: RecipientResolver = Depends(get_resolver),
) -> RecipientSearchResponse:
    """Search recipients for the send form."""
    results = await resolver.search(q, exclude_user_id=caller_id)
    return RecipientSearchResponse(results=results)


@router.post("/resolve", response_model=RecipientCandidate)
async def resolve_code(
    request: ResolveCodeRequest,
    caller_id: str = Depends(get_caller_id),
    resolver: RecipientResolver = Depends(get_resolver),
) -> RecipientCandidate:
    """Resolve scanned code text to the account it belongs to."""
    return await resolver.resolve_target(codec.decode(request.code))
