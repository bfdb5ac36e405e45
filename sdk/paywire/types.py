"""Type definitions for the Paywire SDK."""

import enum
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from paywire.exceptions import ErrorKind

# Currency minor unit: amounts always carry two fractional digits.
AMOUNT_QUANTUM = Decimal("0.01")

# Bitcoin addresses never contain whitespace or the URI query separator.
BITCOIN_ADDRESS_PATTERN = r"^[^\s?]+$"


class Scheme(str, enum.Enum):
    """Address scheme of a payment target."""

    WALLET = "wallet"
    EMAIL = "email"
    UPI = "upi"
    BANK = "bank"
    BITCOIN = "bitcoin"
    UNCLASSIFIED = "unclassified"


class TransferMethod(str, enum.Enum):
    """Settlement rail requested from the ledger."""

    BANK = "bank"
    BITCOIN = "bitcoin"


class AddressField(str, enum.Enum):
    """Directory field used to address a recipient."""

    WALLET_ID = "wallet_id"
    EMAIL = "email"
    UPI_ID = "upi_id"
    BITCOIN_ADDRESS = "bitcoin_address"


class _Target(BaseModel):
    model_config = ConfigDict(frozen=True)

    @property
    def primary(self) -> str:
        """The identifier a lookup or display would use."""
        raise NotImplementedError


class WalletTarget(_Target):
    """Internal wallet id."""

    scheme: Literal["wallet"] = "wallet"
    wallet_id: str = Field(..., min_length=1)

    @property
    def primary(self) -> str:
        return self.wallet_id


class EmailTarget(_Target):
    """Email address registered on an account."""

    scheme: Literal["email"] = "email"
    address: str = Field(..., min_length=1)

    @property
    def primary(self) -> str:
        return self.address


class UpiTarget(_Target):
    """UPI virtual payment address, with the payee name from ``pn``."""

    scheme: Literal["upi"] = "upi"
    handle: str = Field(..., min_length=1)
    display_name: Optional[str] = None

    @property
    def primary(self) -> str:
        return self.handle


class BankTarget(_Target):
    """Bank account number and IFSC routing code."""

    scheme: Literal["bank"] = "bank"
    account: str = Field(..., min_length=1)
    ifsc: str = Field(..., min_length=1)

    @property
    def primary(self) -> str:
        return f"{self.account}/{self.ifsc}"


class BitcoinTarget(_Target):
    """On-chain bitcoin address."""

    scheme: Literal["bitcoin"] = "bitcoin"
    address: str = Field(..., min_length=1, pattern=BITCOIN_ADDRESS_PATTERN)

    @property
    def primary(self) -> str:
        return self.address


class UnclassifiedTarget(_Target):
    """Decoded text that matched no known scheme."""

    scheme: Literal["unclassified"] = "unclassified"
    raw: str

    @property
    def primary(self) -> str:
        return self.raw


PaymentTarget = Annotated[
    Union[
        WalletTarget,
        EmailTarget,
        UpiTarget,
        BankTarget,
        BitcoinTarget,
        UnclassifiedTarget,
    ],
    Field(discriminator="scheme"),
]


class RecipientCandidate(BaseModel):
    """Directory entry for a potential recipient."""

    model_config = ConfigDict(extra="ignore")

    user_id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    upi_id: Optional[str] = None
    wallet_id: Optional[str] = None
    created_rank: int = 0  # position in the directory's result order


class ResolvedRecipient(BaseModel):
    """A candidate together with the one field used to address it."""

    candidate: RecipientCandidate
    field: AddressField
    value: str


class TransferRequest(BaseModel):
    """Canonical transfer request sent to the ledger."""

    recipient_wallet_id: Optional[str] = None
    recipient_email: Optional[str] = None
    recipient_upi: Optional[str] = None
    amount: Decimal
    method: TransferMethod = TransferMethod.BANK
    idempotency_key: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_invariants(self) -> "TransferRequest":
        selectors = [
            self.recipient_wallet_id,
            self.recipient_email,
            self.recipient_upi,
        ]
        if sum(1 for value in selectors if value) > 1:
            raise ValueError("at most one recipient identifier may be set")
        if not self.amount.is_finite() or self.amount <= 0:
            raise ValueError("amount must be positive")
        try:
            quantized = self.amount.quantize(AMOUNT_QUANTUM)
        except InvalidOperation:
            raise ValueError("amount is out of range")
        if self.amount != quantized:
            raise ValueError("amount must have at most two decimal places")
        self.amount = quantized
        return self

    def to_rpc_params(self) -> dict[str, Any]:
        """Parameters of the ledger's ``transfer_money`` call."""
        return {
            "p_recipient_wallet_id": self.recipient_wallet_id,
            "p_recipient_email": self.recipient_email,
            "p_recipient_upi": self.recipient_upi,
            "p_amount": str(self.amount),
            "p_method": self.method.value,
            "p_idempotency_key": self.idempotency_key,
        }

    def fingerprint(self) -> tuple[Any, ...]:
        return (
            self.recipient_wallet_id,
            self.recipient_email,
            self.recipient_upi,
            self.amount,
            self.method,
        )


class LedgerResponse(BaseModel):
    """Structured payload returned by the ledger's transfer call."""

    model_config = ConfigDict(extra="ignore")

    success: bool
    recipient_name: Optional[str] = None
    new_balance: Optional[Decimal] = None
    error_reason: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("error", "error_reason"),
    )


class TransferSuccess(BaseModel):
    """Settled transfer; cached balance and history must be refreshed."""

    status: Literal["success"] = "success"
    idempotency_key: str
    recipient_display_name: str
    new_balance: Optional[Decimal] = None
    should_refresh: Literal[True] = True


class TransferFailure(BaseModel):
    """Transfer that did not settle, or whose outcome is unknown."""

    status: Literal["failure"] = "failure"
    idempotency_key: str
    kind: ErrorKind
    reason: str
    should_refresh: bool = False
    should_reconcile: bool = False


TransferResult = Annotated[
    Union[TransferSuccess, TransferFailure],
    Field(discriminator="status"),
]


class TransferIntent(BaseModel):
    """Pre-filled send form produced from a scanned code."""

    scheme: Scheme
    address: str
    method: Optional[TransferMethod] = None
    recipient_name: Optional[str] = None

    @property
    def needs_method(self) -> bool:
        return self.method is None


class TransactionDirection(str, enum.Enum):
    """Side of a transfer as seen by the account holder."""

    SENT = "sent"
    RECEIVED = "received"


class AccountBalance(BaseModel):
    """Spendable balance of the signed-in user."""

    model_config = ConfigDict(extra="ignore")

    user_id: str
    balance: Decimal = Field(validation_alias=AliasChoices("balance", "daily_balance"))


class TransactionRecord(BaseModel):
    """One line of the signed-in user's transaction history."""

    model_config = ConfigDict(extra="ignore")

    id: str
    type: TransactionDirection
    method: str
    amount: Decimal
    recipient_name: Optional[str] = None
    created_at: datetime
