"""Receive codes built from the caller's own profile."""

from typing import Optional

from paywire.exceptions import TargetNotConfigured
from paywire.types import (
    BankTarget,
    BitcoinTarget,
    EmailTarget,
    PaymentTarget,
    Scheme,
    UpiTarget,
    WalletTarget,
)
from paywire_service.models import Profile


def build_receive_target(profile: Optional[Profile], scheme: Scheme) -> PaymentTarget:
    """Build the target shown on the receive tab for ``scheme``.

    Args:
        profile: The caller's profile, if one exists
        scheme: Receive tab; one of wallet, email, upi, bank, bitcoin

    Raises:
        TargetNotConfigured: If the identifiers for ``scheme`` are not set
    """
    target = _target_from_profile(profile, scheme) if profile is not None else None
    if target is None:
        raise TargetNotConfigured(details={"scheme": scheme.value})
    return target


def _target_from_profile(profile: Profile, scheme: Scheme) -> Optional[PaymentTarget]:
    if scheme == Scheme.WALLET and profile.wallet_id:
        return WalletTarget(wallet_id=profile.wallet_id)
    if scheme == Scheme.EMAIL and profile.email:
        return EmailTarget(address=profile.email)
    if scheme == Scheme.UPI and profile.upi_id:
        return UpiTarget(handle=profile.upi_id, display_name=profile.display_name)
    if scheme == Scheme.BANK and profile.bank_account and profile.bank_ifsc:
        return BankTarget(account=profile.bank_account, ifsc=profile.bank_ifsc)
    bitcoin_address = (profile.bitcoin_address or "").strip()
    if scheme == Scheme.BITCOIN and bitcoin_address:
        return BitcoinTarget(address=bitcoin_address)
    return None
