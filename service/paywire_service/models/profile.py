"""Profile model."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, Index, Numeric, String, func
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from paywire_service.db.session import Base


class Profile(Base):
    """Per-user payment identifiers.

    Rows are owned by the account store; this service only reads them.
    """

    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(
        PGUUID(as_uuid=False),
        primary_key=True,
    )
    display_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    upi_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    wallet_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        unique=True,
        nullable=True,
    )
    bank_account: Mapped[Optional[str]] = mapped_column(String(34), nullable=True)
    bank_ifsc: Mapped[Optional[str]] = mapped_column(String(11), nullable=True)
    bank_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    bitcoin_address: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    daily_balance: Mapped[Decimal] = mapped_column(
        Numeric(18, 2),
        nullable=False,
        server_default="200",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_profiles_created_at", "created_at"),
        Index("ix_profiles_email", "email"),
        Index("ix_profiles_upi_id", "upi_id"),
    )

    def __repr__(self) -> str:
        return f"<Profile(user_id={self.user_id}, wallet_id={self.wallet_id})>"
