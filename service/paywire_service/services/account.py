"""Balance and history reads for the signed-in user."""

import logging

from sqlalchemy import Result, Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from paywire.exceptions import RecipientNotFound, TransportFailure
from paywire.types import AccountBalance, TransactionRecord
from paywire_service.models import Profile, Transaction

logger = logging.getLogger(__name__)


def build_history_statement(user_id: str, limit: int) -> Select:
    """Most recent transactions of ``user_id`` first."""
    return (
        select(Transaction)
        .where(Transaction.user_id == user_id)
        .order_by(Transaction.created_at.desc(), Transaction.id)
        .limit(limit)
    )


def to_record(transaction: Transaction) -> TransactionRecord:
    return TransactionRecord(
        id=str(transaction.id),
        type=transaction.type,
        method=transaction.method,
        amount=transaction.amount,
        recipient_name=transaction.recipient_name,
        created_at=transaction.created_at,
    )


class SqlAccountState:
    """``AccountState`` reading the profiles and transactions tables."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _execute(self, statement: Select) -> Result:
        try:
            return await self.db.execute(statement)
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Account read failed: {type(e).__name__}")
            raise TransportFailure(details={"error": type(e).__name__})

    async def balance(self, user_id: str) -> AccountBalance:
        result = await self._execute(
            select(Profile.daily_balance).where(Profile.user_id == user_id)
        )
        balance = result.scalar_one_or_none()
        if balance is None:
            raise RecipientNotFound(
                message="Account not found",
                details={"user_id": user_id},
            )
        return AccountBalance(user_id=user_id, balance=balance)

    async def transactions(self, user_id: str, limit: int) -> list[TransactionRecord]:
        result = await self._execute(build_history_statement(user_id, limit))
        return [to_record(transaction) for transaction in result.scalars().all()]
