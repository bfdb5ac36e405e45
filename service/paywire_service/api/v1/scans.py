"""Scan endpoint."""

from fastapi import APIRouter, Depends

from paywire.scan import ScanIntentRouter
from paywire.types import TransferIntent
from paywire_service.api.deps import get_scan_router
from paywire_service.schemas.code import ScanRequest

router = APIRouter()


@router.post("", response_model=TransferIntent)
async def scan_code(
    request: ScanRequest,
    scan_router: ScanIntentRouter = Depends(get_scan_router),
) -> TransferIntent:
    """Turn captured code text into a pre-filled send form."""
    return scan_router.route_text(request.text)
