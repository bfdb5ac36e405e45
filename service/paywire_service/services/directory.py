"""Account directory backed by the profiles table."""

import logging
from typing import Optional

from sqlalchemy import Result, Select, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from paywire.exceptions import TransportFailure
from paywire.types import AddressField, RecipientCandidate
from paywire_service.models import Profile

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"

SEARCH_COLUMNS = (Profile.email, Profile.upi_id, Profile.wallet_id)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input only matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def build_search_statement(
    pattern: str,
    exclude_user_id: str,
    limit: int,
) -> Select:
    """Case-insensitive substring match on email, UPI handle and wallet id."""
    needle = f"%{escape_like(pattern)}%"
    return (
        select(Profile)
        .where(or_(*(column.ilike(needle, escape=LIKE_ESCAPE) for column in SEARCH_COLUMNS)))
        .where(Profile.user_id != exclude_user_id)
        .order_by(Profile.created_at, Profile.user_id)
        .limit(limit)
    )


def to_candidate(profile: Profile, rank: int = 0) -> RecipientCandidate:
    """Map a profile row to a directory candidate."""
    return RecipientCandidate(
        user_id=str(profile.user_id),
        display_name=profile.display_name,
        email=profile.email,
        upi_id=profile.upi_id,
        wallet_id=profile.wallet_id,
        created_rank=rank,
    )


class SqlAccountDirectory:
    """``AccountDirectory`` reading the profiles table."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _execute(self, statement: Select) -> Result:
        try:
            return await self.db.execute(statement)
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Directory read failed: {type(e).__name__}")
            raise TransportFailure(details={"error": type(e).__name__})

    async def search(
        self,
        pattern: str,
        exclude_user_id: str,
        limit: int,
    ) -> list[RecipientCandidate]:
        result = await self._execute(
            build_search_statement(pattern, exclude_user_id, limit)
        )
        profiles = result.scalars().all()
        return [to_candidate(profile, rank) for rank, profile in enumerate(profiles)]

    async def lookup(
        self,
        field: AddressField,
        value: str,
    ) -> Optional[RecipientCandidate]:
        column = getattr(Profile, field.value)
        result = await self._execute(
            select(Profile).where(column == value).limit(1)
        )
        profile = result.scalars().first()
        if profile is None:
            logger.debug(f"No profile with {field.value} matching lookup")
            return None
        return to_candidate(profile)

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        """Load the profile of ``user_id``."""
        result = await self._execute(
            select(Profile).where(Profile.user_id == user_id)
        )
        return result.scalar_one_or_none()
