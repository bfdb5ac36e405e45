"""Receive-code endpoints."""

from fastapi import APIRouter, Depends, Query

from paywire import codec
from paywire.types import Scheme
from paywire_service.api.deps import get_directory
from paywire_service.middleware.caller import get_caller_id
from paywire_service.schemas.code import CodeResponse, EncodeRequest
from paywire_service.services.directory import SqlAccountDirectory
from paywire_service.services.receive import build_receive_target

router = APIRouter()


@router.get("/me", response_model=CodeResponse)
async def get_my_code(
    scheme: Scheme = Query(Scheme.WALLET, description="wallet, email, upi, bank or bitcoin"),
    caller_id: str = Depends(get_caller_id),
    directory: SqlAccountDirectory = Depends(get_directory),
) -> CodeResponse:
    """Get the caller's receive code for one tab of the receive screen."""
    profile = await directory.get_profile(caller_id)
    target = build_receive_target(profile, scheme)
    return CodeResponse(scheme=scheme, code=codec.encode(target))


@router.post("", response_model=CodeResponse)
async def encode_target(request: EncodeRequest) -> CodeResponse:
    """Encode an arbitrary payment target."""
    return CodeResponse(scheme=request.target.scheme, code=codec.encode(request.target))
