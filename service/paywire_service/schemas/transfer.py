"""Transfer-related schemas."""

from pydantic import BaseModel, Field

from paywire.types import RecipientCandidate


class TransferCreate(BaseModel):
    """Transfer request body."""

    recipient: RecipientCandidate = Field(..., description="Candidate chosen from a search or scan")
    amount: str = Field(..., description="Amount to transfer (as string, e.g., '12.50')")
