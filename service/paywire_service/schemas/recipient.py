"""Recipient search and resolution schemas."""

from pydantic import BaseModel, Field

from paywire.types import RecipientCandidate


class RecipientSearchResponse(BaseModel):
    """Search results in directory order."""

    results: list[RecipientCandidate] = Field(default_factory=list)


class ResolveCodeRequest(BaseModel):
    """Scanned or pasted code text to resolve to an account."""

    code: str = Field(..., description="Code text, e.g. 'upi://pay?pa=alice@okbank&pn=Alice'")
