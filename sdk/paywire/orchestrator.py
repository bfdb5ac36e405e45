"""Transfer orchestration against an external ledger."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, Union

from paywire.exceptions import (
    ErrorKind,
    InvalidAmount,
    LedgerDeclined,
    RecipientNotFound,
    TransportFailure,
)
from paywire.idempotency import InFlightRegistry, new_idempotency_key
from paywire.ports import LedgerService
from paywire.types import (
    AMOUNT_QUANTUM,
    AddressField,
    RecipientCandidate,
    ResolvedRecipient,
    TransferFailure,
    TransferMethod,
    TransferRequest,
    TransferResult,
    TransferSuccess,
)

logger = logging.getLogger(__name__)

TRANSPORT_FAILURE_REASON = (
    "We could not confirm this transfer. "
    "Check your transaction history before trying again."
)


def select_address(candidate: RecipientCandidate) -> ResolvedRecipient:
    """Pick the single field used to address ``candidate``.

    Precedence is wallet id, then email, then UPI handle: the ledger accepts
    one lookup key per call and the wallet id is the least ambiguous.

    Raises:
        RecipientNotFound: If the candidate has none of the three identifiers
    """
    if candidate.wallet_id:
        return ResolvedRecipient(
            candidate=candidate, field=AddressField.WALLET_ID, value=candidate.wallet_id
        )
    if candidate.email:
        return ResolvedRecipient(
            candidate=candidate, field=AddressField.EMAIL, value=candidate.email
        )
    if candidate.upi_id:
        return ResolvedRecipient(
            candidate=candidate, field=AddressField.UPI_ID, value=candidate.upi_id
        )
    raise RecipientNotFound(
        message="Recipient has no wallet id, email or UPI handle",
        details={"user_id": candidate.user_id},
    )


def parse_amount(amount: Union[str, int, float, Decimal]) -> Decimal:
    """Parse a user-entered amount into a positive two-decimal ``Decimal``.

    Raises:
        InvalidAmount: If the amount is not numeric, not finite, not positive
            or has more than two fractional digits
    """
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmount(details={"amount": str(amount)})

    if not value.is_finite() or value <= 0:
        raise InvalidAmount(details={"amount": str(amount)})

    try:
        quantized = value.quantize(AMOUNT_QUANTUM)
    except InvalidOperation:
        raise InvalidAmount(details={"amount": str(amount)})
    if quantized != value:
        raise InvalidAmount(
            message="Amount can have at most two decimal places",
            details={"amount": str(amount)},
        )
    return quantized


class TransferOrchestrator:
    """Builds canonical transfer requests and settles them once.

    Args:
        ledger: Ledger collaborator
        registry: In-flight guard; share one instance between orchestrators
            that may see the same idempotency keys
        key_factory: Generates a key when the caller does not supply one
    """

    method = TransferMethod.BANK

    def __init__(
        self,
        ledger: LedgerService,
        registry: Optional[InFlightRegistry] = None,
        key_factory: Callable[[], str] = new_idempotency_key,
    ) -> None:
        self.ledger = ledger
        self.registry = registry if registry is not None else InFlightRegistry()
        self.key_factory = key_factory

    def build_request(
        self,
        recipient: RecipientCandidate,
        amount: Union[str, int, float, Decimal],
        idempotency_key: Optional[str] = None,
    ) -> TransferRequest:
        """Build the ledger request for sending ``amount`` to ``recipient``.

        Args:
            recipient: Chosen directory candidate
            amount: Amount as entered by the sender
            idempotency_key: Key of this send action; generated when omitted.
                Pass the same key when retrying the same action.

        Raises:
            InvalidAmount: If the amount is invalid
            RecipientNotFound: If the recipient cannot be addressed
        """
        value = parse_amount(amount)
        resolved = select_address(recipient)

        return TransferRequest(
            recipient_wallet_id=resolved.value if resolved.field == AddressField.WALLET_ID else None,
            recipient_email=resolved.value if resolved.field == AddressField.EMAIL else None,
            recipient_upi=resolved.value if resolved.field == AddressField.UPI_ID else None,
            amount=value,
            method=self.method,
            idempotency_key=idempotency_key or self.key_factory(),
        )

    async def execute(self, request: TransferRequest) -> TransferResult:
        """Settle ``request`` with exactly one ledger call per idempotency key.

        Never raises for ledger outcomes; see ``TransferResult``.

        Raises:
            ConflictIdempotency: If the key is in flight for a different request
        """
        return await self.registry.run(request, self._settle)

    async def transfer(
        self,
        recipient: RecipientCandidate,
        amount: Union[str, int, float, Decimal],
        idempotency_key: Optional[str] = None,
    ) -> TransferResult:
        """Build and execute a transfer in one step."""
        request = self.build_request(recipient, amount, idempotency_key)
        return await self.execute(request)

    async def _settle(self, request: TransferRequest) -> TransferResult:
        key = request.idempotency_key
        logger.info(f"Executing transfer {key[:8]} for {request.amount}")

        try:
            response = await self.ledger.transfer(request)
        except LedgerDeclined as e:
            logger.info(f"Transfer {key[:8]} declined: {e.message}")
            return TransferFailure(
                idempotency_key=key,
                kind=ErrorKind.LEDGER_DECLINED,
                reason=e.message,
            )
        except TransportFailure as e:
            logger.warning(f"Transfer {key[:8]} outcome unknown: {e.message}")
            return _unconfirmed(key)
        except Exception:
            logger.exception(f"Transfer {key[:8]} failed unexpectedly")
            return _unconfirmed(key)

        if not response.success:
            reason = response.error_reason or "Transfer failed"
            logger.info(f"Transfer {key[:8]} declined: {reason}")
            return TransferFailure(
                idempotency_key=key,
                kind=ErrorKind.LEDGER_DECLINED,
                reason=reason,
            )

        return TransferSuccess(
            idempotency_key=key,
            recipient_display_name=response.recipient_name or _addressed_as(request),
            new_balance=response.new_balance,
        )


def _unconfirmed(key: str) -> TransferFailure:
    return TransferFailure(
        idempotency_key=key,
        kind=ErrorKind.TRANSPORT_FAILURE,
        reason=TRANSPORT_FAILURE_REASON,
        should_reconcile=True,
    )


def _addressed_as(request: TransferRequest) -> str:
    return (
        request.recipient_wallet_id
        or request.recipient_email
        or request.recipient_upi
        or ""
    )
