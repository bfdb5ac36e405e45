"""Paywire SDK - payment addressing and transfer orchestration."""

from paywire.client import PayClient
from paywire.codec import decode, encode
from paywire.exceptions import (
    ConflictIdempotency,
    ErrorKind,
    InvalidAmount,
    LedgerDeclined,
    PayError,
    QueryTooShort,
    RecipientNotFound,
    TargetNotConfigured,
    TransportFailure,
    UnresolvableTarget,
)
from paywire.idempotency import InFlightRegistry
from paywire.orchestrator import TransferOrchestrator, select_address
from paywire.resolver import RecipientResolver
from paywire.scan import ScanIntentRouter
from paywire.types import (
    AccountBalance,
    AddressField,
    BankTarget,
    BitcoinTarget,
    EmailTarget,
    LedgerResponse,
    PaymentTarget,
    RecipientCandidate,
    ResolvedRecipient,
    Scheme,
    TransactionDirection,
    TransactionRecord,
    TransferFailure,
    TransferIntent,
    TransferMethod,
    TransferRequest,
    TransferResult,
    TransferSuccess,
    UnclassifiedTarget,
    UpiTarget,
    WalletTarget,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "PayClient",
    # Components
    "encode",
    "decode",
    "RecipientResolver",
    "TransferOrchestrator",
    "select_address",
    "InFlightRegistry",
    "ScanIntentRouter",
    # Exceptions
    "PayError",
    "ErrorKind",
    "QueryTooShort",
    "InvalidAmount",
    "RecipientNotFound",
    "UnresolvableTarget",
    "LedgerDeclined",
    "TransportFailure",
    "ConflictIdempotency",
    "TargetNotConfigured",
    # Types
    "PaymentTarget",
    "WalletTarget",
    "EmailTarget",
    "UpiTarget",
    "BankTarget",
    "BitcoinTarget",
    "UnclassifiedTarget",
    "Scheme",
    "AddressField",
    "RecipientCandidate",
    "ResolvedRecipient",
    "TransferMethod",
    "TransferRequest",
    "LedgerResponse",
    "TransferResult",
    "TransferSuccess",
    "TransferFailure",
    "TransferIntent",
    "AccountBalance",
    "TransactionDirection",
    "TransactionRecord",
]
