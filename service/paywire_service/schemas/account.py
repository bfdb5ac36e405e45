"""Balance and transaction history schemas."""

from pydantic import BaseModel, Field

from paywire.types import TransactionRecord


class TransactionListResponse(BaseModel):
    """Recent transactions, most recent first."""

    items: list[TransactionRecord] = Field(default_factory=list)
