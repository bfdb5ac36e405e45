"""SQLAlchemy models for the Paywire service."""

from paywire_service.models.profile import Profile
from paywire_service.models.transaction import Transaction

__all__ = ["Profile", "Transaction"]
