"""Receive-code and scan schemas."""

from pydantic import BaseModel, Field

from paywire.types import PaymentTarget, Scheme


class EncodeRequest(BaseModel):
    """Target to encode as QR text."""

    target: PaymentTarget


class CodeResponse(BaseModel):
    """Encoded QR text."""

    scheme: Scheme
    code: str


class ScanRequest(BaseModel):
    """Text captured from a camera frame or an uploaded image."""

    text: str = Field(..., description="Decoded QR payload")
