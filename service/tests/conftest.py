"""Test configuration and fixtures."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from paywire_service.api.deps import get_account_state, get_directory, get_ledger
from paywire_service.main import app
from paywire_service.models import Profile

from service_doubles import (
    ALICE_ID,
    BOB_ID,
    CAROL_ID,
    AccountHistory,
    ProfileDirectory,
    RecordingLedger,
)


@pytest.fixture
def profiles() -> list[Profile]:
    """Create test profiles."""
    return [
        Profile(
            user_id=ALICE_ID,
            display_name="Alice",
            email="alice@example.com",
            upi_id="alice@okbank",
            wallet_id="WAL-ALICE01",
            bank_account="001234567890",
            bank_ifsc="SBIN0001234",
            bank_name="State Bank",
            bitcoin_address=None,
        ),
        Profile(
            user_id=BOB_ID,
            display_name="Bob",
            email="bob@example.com",
            upi_id="bob@okbank",
            wallet_id="WAL-BOB0001",
        ),
        Profile(
            user_id=CAROL_ID,
            display_name="Carol",
            email="carol@example.com",
            upi_id=None,
            wallet_id=None,
        ),
    ]


@pytest.fixture
def directory(profiles: list[Profile]) -> ProfileDirectory:
    return ProfileDirectory(profiles)


@pytest.fixture
def ledger() -> RecordingLedger:
    return RecordingLedger()


@pytest.fixture
def account() -> AccountHistory:
    return AccountHistory()


@pytest.fixture
def alice() -> dict[str, str]:
    """Headers of a request made by Alice."""
    return {"X-User-Id": ALICE_ID}


@pytest_asyncio.fixture
async def client(
    directory: ProfileDirectory, ledger: RecordingLedger, account: AccountHistory
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client with in-memory adapters."""

    async def override_directory() -> ProfileDirectory:
        return directory

    async def override_ledger() -> RecordingLedger:
        return ledger

    async def override_account_state() -> AccountHistory:
        return account

    app.dependency_overrides[get_directory] = override_directory
    app.dependency_overrides[get_ledger] = override_ledger
    app.dependency_overrides[get_account_state] = override_account_state

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
