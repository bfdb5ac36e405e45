"""Recipient resolution across wallet id, email and UPI handle."""

import logging

from paywire.exceptions import QueryTooShort, RecipientNotFound, UnresolvableTarget
from paywire.ports import AccountDirectory
from paywire.types import (
    AddressField,
    BankTarget,
    BitcoinTarget,
    EmailTarget,
    PaymentTarget,
    RecipientCandidate,
    UnclassifiedTarget,
    UpiTarget,
    WalletTarget,
)

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3
SEARCH_LIMIT = 5


class RecipientResolver:
    """Looks up recipients through an ``AccountDirectory``.

    Args:
        directory: Account directory collaborator
        min_query_length: Shortest trimmed query sent to the directory
        limit: Maximum number of candidates returned by ``search``
    """

    def __init__(
        self,
        directory: AccountDirectory,
        min_query_length: int = MIN_QUERY_LENGTH,
        limit: int = SEARCH_LIMIT,
    ) -> None:
        self.directory = directory
        self.min_query_length = min_query_length
        self.limit = limit

    async def search(
        self,
        query: str,
        exclude_user_id: str,
    ) -> list[RecipientCandidate]:
        """Search recipients by partial email, UPI handle or wallet id.

        Args:
            query: Free text entered by the sender
            exclude_user_id: The sender's own user id

        Returns:
            Candidates in directory order; empty when nothing matches

        Raises:
            QueryTooShort: If the trimmed query is shorter than the minimum
        """
        pattern = query.strip()
        if len(pattern) < self.min_query_length:
            raise QueryTooShort(
                message=f"Enter at least {self.min_query_length} characters to search",
                details={"min_length": self.min_query_length},
            )

        found = await self.directory.search(pattern, exclude_user_id, self.limit)

        candidates: list[RecipientCandidate] = []
        seen: set[str] = set()
        for candidate in found:
            if candidate.user_id == exclude_user_id or candidate.user_id in seen:
                continue
            seen.add(candidate.user_id)
            candidates.append(candidate)
            if len(candidates) == self.limit:
                break

        logger.debug(f"Recipient search returned {len(candidates)} candidate(s)")
        return candidates

    async def resolve_target(self, target: PaymentTarget) -> RecipientCandidate:
        """Resolve a decoded payment target to the account it belongs to.

        Raises:
            UnresolvableTarget: For bank and unclassified targets
            RecipientNotFound: If no account carries the identifier
        """
        if isinstance(target, (BankTarget, UnclassifiedTarget)):
            raise UnresolvableTarget(
                details={"scheme": target.scheme, "address": target.primary},
            )

        field = _lookup_field(target)
        candidate = await self.directory.lookup(field, target.primary)
        if candidate is None:
            raise RecipientNotFound(
                message=f"No account found for this {target.scheme} address",
                details={"scheme": target.scheme, "address": target.primary},
            )
        return candidate


def _lookup_field(target: PaymentTarget) -> AddressField:
    if isinstance(target, WalletTarget):
        return AddressField.WALLET_ID
    if isinstance(target, EmailTarget):
        return AddressField.EMAIL
    if isinstance(target, UpiTarget):
        return AddressField.UPI_ID
    if isinstance(target, BitcoinTarget):
        return AddressField.BITCOIN_ADDRESS
    raise TypeError(f"No lookup field for {type(target).__name__}")
