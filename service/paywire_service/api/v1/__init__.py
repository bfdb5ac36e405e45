"""API v1 router aggregation."""

from fastapi import APIRouter

from paywire_service.api.v1 import account, codes, recipients, scans, transfers
from paywire_service.schemas.common import ErrorResponse

router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)

router.include_router(recipients.router, prefix="/recipients", tags=["recipients"])
router.include_router(transfers.router, prefix="/transfers", tags=["transfers"])
router.include_router(codes.router, prefix="/codes", tags=["codes"])
router.include_router(scans.router, prefix="/scans", tags=["scans"])
router.include_router(account.router, tags=["account"])
