"""Paywire client: send, receive and scan flows over the data gateway."""

from decimal import Decimal
from typing import Any, Optional, Union

import httpx

from paywire import codec
from paywire.idempotency import InFlightRegistry
from paywire.orchestrator import TransferOrchestrator
from paywire.resolver import RecipientResolver
from paywire.rest import (
    GatewayClient,
    RestAccountDirectory,
    RestAccountState,
    RestLedgerService,
)
from paywire.scan import ScanIntentRouter
from paywire.types import (
    AccountBalance,
    PaymentTarget,
    RecipientCandidate,
    TransactionRecord,
    TransferIntent,
    TransferRequest,
    TransferResult,
)


class PayClient:
    """Client for one signed-in user.

    Args:
        base_url: Base URL of the data gateway
        api_key: Project API key
        user_id: The signed-in user's id, excluded from recipient searches
        access_token: The signed-in user's access token
        timeout: Request timeout in seconds
        max_retries: Maximum number of retry attempts for read requests
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        user_id: str,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        max_retries: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.user_id = user_id
        self.gateway = GatewayClient(
            base_url=base_url,
            api_key=api_key,
            access_token=access_token,
            timeout=timeout,
            max_retries=max_retries,
            transport=transport,
        )
        self.resolver = RecipientResolver(RestAccountDirectory(self.gateway))
        self.orchestrator = TransferOrchestrator(
            RestLedgerService(self.gateway),
            registry=InFlightRegistry(),
        )
        self.account = RestAccountState(self.gateway)
        self.router = ScanIntentRouter()

    async def __aenter__(self) -> "PayClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.gateway.aclose()

    async def search(self, query: str) -> list[RecipientCandidate]:
        """Find recipients by partial email, UPI handle or wallet id.

        Returns:
            Up to five candidates; empty when nothing matches
        """
        return await self.resolver.search(query, exclude_user_id=self.user_id)

    async def resolve_code(self, text: str) -> RecipientCandidate:
        """Find the account behind scanned or pasted code text."""
        return await self.resolver.resolve_target(codec.decode(text))

    def prepare_transfer(
        self,
        recipient: RecipientCandidate,
        amount: Union[str, Decimal],
        idempotency_key: Optional[str] = None,
    ) -> TransferRequest:
        """Validate the send form and fix the idempotency key of this action.

        Keep the returned request and pass it to ``send`` again to retry
        the same action.
        """
        return self.orchestrator.build_request(recipient, amount, idempotency_key)

    async def send(self, request: TransferRequest) -> TransferResult:
        """Execute a prepared transfer.

        Returns:
            ``TransferSuccess`` (refresh balance and history) or
            ``TransferFailure`` (re-read history when ``should_reconcile``)
        """
        return await self.orchestrator.execute(request)

    def receive_code(self, target: PaymentTarget) -> str:
        """Text to render as a QR code for receiving payments."""
        return codec.encode(target)

    def scan(self, text: str) -> TransferIntent:
        """Turn captured code text into a pre-filled send form."""
        return self.router.route_text(text)

    async def balance(self) -> AccountBalance:
        """Read the current balance, e.g. after a transfer asked to reconcile."""
        return await self.account.balance(self.user_id)

    async def transactions(self, limit: int = 20) -> list[TransactionRecord]:
        """Read recent transactions, most recent first."""
        return await self.account.transactions(self.user_id, limit)
