"""Text/QR encoding of payment targets.

Encodings::

    wallet:<id>
    pay:<email>
    upi://pay?pa=<handle>&pn=<display name>
    bank://<account>/<ifsc>
    bitcoin:<address>

Only ``upi://``, ``bitcoin:`` and ``wallet:`` are recognised when decoding.
Email and bank codes are meant to be read by people; scanning one yields an
``UnclassifiedTarget`` carrying the original text.
"""

import re
from urllib.parse import parse_qs, quote

from paywire.types import (
    BITCOIN_ADDRESS_PATTERN,
    BankTarget,
    BitcoinTarget,
    EmailTarget,
    PaymentTarget,
    UnclassifiedTarget,
    UpiTarget,
    WalletTarget,
)

UPI_PREFIX = "upi://"
BITCOIN_PREFIX = "bitcoin:"
WALLET_PREFIX = "wallet:"
EMAIL_PREFIX = "pay:"
BANK_PREFIX = "bank://"

# '@' and '.' are left alone so that ordinary handles keep their usual form.
_UPI_SAFE = "@."


def _upi_param(value: str) -> str:
    return quote(value, safe=_UPI_SAFE)


def encode(target: PaymentTarget) -> str:
    """Encode a payment target as scannable text."""
    if isinstance(target, WalletTarget):
        return f"{WALLET_PREFIX}{target.wallet_id}"
    if isinstance(target, EmailTarget):
        return f"{EMAIL_PREFIX}{target.address}"
    if isinstance(target, UpiTarget):
        return (
            f"{UPI_PREFIX}pay?pa={_upi_param(target.handle)}"
            f"&pn={_upi_param(target.display_name or '')}"
        )
    if isinstance(target, BankTarget):
        return f"{BANK_PREFIX}{target.account}/{target.ifsc}"
    if isinstance(target, BitcoinTarget):
        return f"{BITCOIN_PREFIX}{target.address}"
    if isinstance(target, UnclassifiedTarget):
        return target.raw
    raise TypeError(f"Unsupported payment target: {type(target).__name__}")


def decode(text: str) -> PaymentTarget:
    """Decode scanned or pasted text into a payment target.

    Never raises: anything that is not a well-formed UPI, bitcoin or wallet
    code comes back as an ``UnclassifiedTarget``.
    """
    if text.startswith(UPI_PREFIX):
        return _decode_upi(text)
    if text.startswith(BITCOIN_PREFIX):
        address = text[len(BITCOIN_PREFIX):].split("?", 1)[0]
        if re.fullmatch(BITCOIN_ADDRESS_PATTERN, address):
            return BitcoinTarget(address=address)
    elif text.startswith(WALLET_PREFIX):
        wallet_id = text[len(WALLET_PREFIX):]
        if wallet_id:
            return WalletTarget(wallet_id=wallet_id)
    return UnclassifiedTarget(raw=text)


def _decode_upi(text: str) -> PaymentTarget:
    _, _, query = text.partition("?")
    params = parse_qs(query, keep_blank_values=True)
    handle = params.get("pa", [""])[0]
    if not handle:
        return UnclassifiedTarget(raw=text)
    display_name = params.get("pn", [""])[0] or None
    return UpiTarget(handle=handle, display_name=display_name)


def is_classified(target: PaymentTarget) -> bool:
    """Whether decoding recognised the text."""
    return not isinstance(target, UnclassifiedTarget)
