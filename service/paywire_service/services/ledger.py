"""Ledger backed by the transfer_money database function."""

import logging
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from paywire.exceptions import LedgerDeclined, TransportFailure
from paywire.types import LedgerResponse, TransferRequest

logger = logging.getLogger(__name__)

# SQLSTATE of a PL/pgSQL ``RAISE EXCEPTION`` without an explicit code.
RAISE_EXCEPTION_SQLSTATE = "P0001"

TRANSFER_STATEMENT = text(
    "SELECT transfer_money("
    ":p_sender_id, :p_recipient_wallet_id, :p_recipient_email, :p_recipient_upi, "
    ":p_amount, :p_method, :p_idempotency_key"
    ") AS result"
).columns(result=JSONB)


def _sqlstate(error: DBAPIError) -> Optional[str]:
    return getattr(error.orig, "sqlstate", None) or getattr(
        error.orig.__cause__, "sqlstate", None
    )


def _db_message(error: DBAPIError) -> str:
    # asyncpg keeps the raised text on the driver exception behind the adapter.
    message = getattr(error.orig.__cause__, "message", None) or getattr(
        error.orig, "message", None
    )
    return message or str(error.orig)


class SqlLedgerService:
    """``LedgerService`` calling ``transfer_money`` in the caller's name.

    The function debits the sender, credits the recipient found by whichever
    identifier is set, records both sides in the transaction history and
    returns ``{success, recipient_name, new_balance, error}``.
    """

    def __init__(self, db: AsyncSession, sender_user_id: str) -> None:
        self.db = db
        self.sender_user_id = sender_user_id

    async def transfer(self, request: TransferRequest) -> LedgerResponse:
        params: dict[str, Any] = {
            **request.to_rpc_params(),
            "p_sender_id": self.sender_user_id,
            "p_amount": request.amount,
        }

        try:
            result = await self.db.execute(TRANSFER_STATEMENT, params)
            payload = result.scalar_one()
            await self.db.commit()
        except DBAPIError as e:
            await self.db.rollback()
            if _sqlstate(e) == RAISE_EXCEPTION_SQLSTATE:
                raise LedgerDeclined(
                    message=_db_message(e),
                    details={"code": RAISE_EXCEPTION_SQLSTATE},
                )
            logger.warning(f"Ledger call failed: {type(e.orig).__name__}")
            raise TransportFailure(details={"error": type(e.orig).__name__})
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Ledger call failed: {type(e).__name__}")
            raise TransportFailure(details={"error": type(e).__name__})

        if not isinstance(payload, dict):
            logger.warning("Ledger returned a non-object payload")
            raise TransportFailure(details={"error": "UnexpectedPayload"})
        return LedgerResponse.model_validate(payload)
