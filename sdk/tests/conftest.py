"""Test configuration and fixtures for SDK tests."""

import pytest

from paywire.exceptions import LedgerDeclined, TransportFailure
from paywire.types import RecipientCandidate

from sdk_doubles import FakeDirectory, FakeLedger


@pytest.fixture
def accounts() -> list[RecipientCandidate]:
    """Return a small directory of accounts."""
    return [
        RecipientCandidate(
            user_id="u-alice",
            display_name="Alice",
            email="alice@example.com",
            upi_id="alice@okbank",
            wallet_id="WAL-ALICE01",
        ),
        RecipientCandidate(
            user_id="u-bob",
            display_name="Bob",
            email="bob@example.com",
            upi_id="bob@okbank",
            wallet_id="WAL-BOB0001",
        ),
        RecipientCandidate(
            user_id="u-carol",
            display_name="Carol",
            email="carol@example.com",
            upi_id=None,
            wallet_id="WAL-CAROL01",
        ),
    ]


@pytest.fixture
def directory(accounts: list[RecipientCandidate]) -> FakeDirectory:
    return FakeDirectory(accounts)


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def declining_ledger() -> FakeLedger:
    return FakeLedger(error=LedgerDeclined(message="Insufficient balance"))


@pytest.fixture
def unreachable_ledger() -> FakeLedger:
    return FakeLedger(error=TransportFailure())
