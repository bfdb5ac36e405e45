"""Routing of scanned codes to pre-filled transfer intents."""

import logging

from paywire import codec
from paywire.types import (
    BankTarget,
    BitcoinTarget,
    EmailTarget,
    PaymentTarget,
    Scheme,
    TransferIntent,
    TransferMethod,
    UnclassifiedTarget,
    UpiTarget,
    WalletTarget,
)

logger = logging.getLogger(__name__)


class ScanIntentRouter:
    """Turns decoded payment targets into send-form intents.

    Pure mapping; no network calls.
    """

    def route(self, decoded: PaymentTarget) -> TransferIntent:
        if isinstance(decoded, UpiTarget):
            return TransferIntent(
                scheme=Scheme.UPI,
                method=TransferMethod.BANK,
                address=decoded.handle,
                recipient_name=decoded.display_name,
            )
        if isinstance(decoded, BitcoinTarget):
            return TransferIntent(
                scheme=Scheme.BITCOIN,
                method=TransferMethod.BITCOIN,
                address=decoded.address,
            )
        if isinstance(decoded, WalletTarget):
            return TransferIntent(
                scheme=Scheme.WALLET,
                method=TransferMethod.BANK,
                address=decoded.wallet_id,
            )
        if isinstance(decoded, EmailTarget):
            return TransferIntent(
                scheme=Scheme.EMAIL,
                method=TransferMethod.BANK,
                address=decoded.address,
            )
        if isinstance(decoded, BankTarget):
            # Bank details are shown for a manual transfer; the UI asks for the rail.
            return TransferIntent(scheme=Scheme.BANK, address=decoded.primary)
        if isinstance(decoded, UnclassifiedTarget):
            return TransferIntent(scheme=Scheme.UNCLASSIFIED, address=decoded.raw)
        raise TypeError(f"Unsupported payment target: {type(decoded).__name__}")

    def route_text(self, text: str) -> TransferIntent:
        """Decode captured text (camera frame or uploaded image) and route it."""
        decoded = codec.decode(text)
        if not codec.is_classified(decoded):
            logger.info("Scanned code matched no known scheme")
        return self.route(decoded)
