"""Tests for the REST gateway adapters and the PayClient."""

import json

import httpx
import pytest

from paywire import PayClient
from paywire.exceptions import (
    ErrorKind,
    LedgerDeclined,
    QueryTooShort,
    RecipientNotFound,
    TransportFailure,
    UnresolvableTarget,
)
from paywire.rest import (
    GatewayClient,
    RestAccountDirectory,
    RestAccountState,
    RestLedgerService,
)
from paywire.types import (
    AddressField,
    RecipientCandidate,
    TransactionDirection,
    TransferFailure,
    TransferRequest,
    TransferSuccess,
    UpiTarget,
)

PROFILE_ROWS = [
    {
        "user_id": "u-bob",
        "display_name": "Bob",
        "email": "bob@example.com",
        "upi_id": None,
        "wallet_id": "WAL-BOB0001",
    },
    {
        "user_id": "u-carol",
        "display_name": "Carol",
        "email": None,
        "upi_id": "carol@okbank",
        "wallet_id": "WAL-CAROL01",
    },
]


def _gateway(handler, max_retries: int = 0) -> GatewayClient:
    return GatewayClient(
        base_url="http://gateway.test/",
        api_key="anon-key",
        access_token="user-token",
        max_retries=max_retries,
        transport=httpx.MockTransport(handler),
    )


def _request(**overrides) -> TransferRequest:
    fields = {"recipient_wallet_id": "WAL-BOB0001", "amount": "25.00", "idempotency_key": "k-1"}
    fields.update(overrides)
    return TransferRequest(**fields)


@pytest.mark.asyncio
async def test_search_builds_postgrest_query():
    """Test the profiles query sent for a recipient search."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=PROFILE_ROWS)

    async with _gateway(handler) as gateway:
        results = await RestAccountDirectory(gateway).search("bob", "u-alice", 5)

    params = seen[0].url.params
    assert seen[0].url.path == "/rest/v1/profiles"
    assert params["or"] == (
        '(email.ilike."*bob*",upi_id.ilike."*bob*",wallet_id.ilike."*bob*")'
    )
    assert params["user_id"] == "neq.u-alice"
    assert params["limit"] == "5"
    assert params["select"] == "user_id,display_name,email,upi_id,wallet_id"
    assert seen[0].headers["apikey"] == "anon-key"
    assert seen[0].headers["authorization"] == "Bearer user-token"
    assert [c.user_id for c in results] == ["u-bob", "u-carol"]
    assert [c.created_rank for c in results] == [0, 1]


@pytest.mark.asyncio
async def test_search_quotes_filter_syntax():
    """Test that commas and quotes cannot break out of the or-filter."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    async with _gateway(handler) as gateway:
        await RestAccountDirectory(gateway).search('a,b"c', "u-alice", 5)

    assert 'email.ilike."*a,b\\"c*"' in seen[0].url.params["or"]


@pytest.mark.asyncio
async def test_search_escapes_wildcards():
    """Test that % and _ in the query match literally."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    async with _gateway(handler) as gateway:
        await RestAccountDirectory(gateway).search("50%_off", "u-alice", 5)

    assert 'email.ilike."*50\\\\%\\\\_off*"' in seen[0].url.params["or"]


@pytest.mark.asyncio
async def test_search_star_matches_literally():
    """Test that a * in the query is not a wildcard."""
    seen = []
    rows = [
        {"user_id": "u-star", "email": "a*b@example.com", "wallet_id": "WAL-STAR001"},
        {"user_id": "u-axb", "email": "axb@example.com", "wallet_id": "WAL-AXB0001"},
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=rows)

    async with _gateway(handler) as gateway:
        results = await RestAccountDirectory(gateway).search("a*b", "u-alice", 5)

    assert 'email.ilike."*a_b*"' in seen[0].url.params["or"]
    assert [c.user_id for c in results] == ["u-star"]


@pytest.mark.asyncio
async def test_non_json_read_is_transport_failure():
    async with _gateway(lambda request: httpx.Response(200, text="<html>")) as gateway:
        with pytest.raises(TransportFailure):
            await RestAccountDirectory(gateway).search("bob", "u-alice", 5)


@pytest.mark.asyncio
async def test_lookup_exact_match():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=PROFILE_ROWS[1:])

    async with _gateway(handler) as gateway:
        candidate = await RestAccountDirectory(gateway).lookup(
            AddressField.UPI_ID, "carol@okbank"
        )

    assert seen[0].url.params["upi_id"] == "eq.carol@okbank"
    assert candidate.user_id == "u-carol"


@pytest.mark.asyncio
async def test_lookup_no_match():
    async with _gateway(lambda request: httpx.Response(200, json=[])) as gateway:
        assert await RestAccountDirectory(gateway).lookup(AddressField.EMAIL, "x@y.z") is None


@pytest.mark.asyncio
async def test_reads_are_retried_on_bad_gateway():
    """Test that a directory read survives one 502."""
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            return httpx.Response(502, text="bad gateway")
        return httpx.Response(200, json=PROFILE_ROWS)

    async with _gateway(handler, max_retries=1) as gateway:
        results = await RestAccountDirectory(gateway).search("bob", "u-alice", 5)

    assert calls == 2
    assert len(results) == 2


@pytest.mark.asyncio
async def test_unreachable_directory_raises_transport_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    async with _gateway(handler) as gateway:
        with pytest.raises(TransportFailure):
            await RestAccountDirectory(gateway).search("bob", "u-alice", 5)


@pytest.mark.asyncio
async def test_ledger_call_sends_rpc_params_and_key():
    """Test the transfer_money call made for a request."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200, json={"success": True, "recipient_name": "Bob", "new_balance": 975}
        )

    async with _gateway(handler) as gateway:
        response = await RestLedgerService(gateway).transfer(_request())

    assert seen[0].method == "POST"
    assert seen[0].url.path == "/rest/v1/rpc/transfer_money"
    assert seen[0].headers["idempotency-key"] == "k-1"
    assert json.loads(seen[0].content) == {
        "p_recipient_wallet_id": "WAL-BOB0001",
        "p_recipient_email": None,
        "p_recipient_upi": None,
        "p_amount": "25.00",
        "p_method": "bank",
        "p_idempotency_key": "k-1",
    }
    assert response.success is True
    assert response.recipient_name == "Bob"


@pytest.mark.asyncio
async def test_ledger_error_body_is_a_decline():
    """Test that a structured 4xx from the procedure is a business decline."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400, json={"code": "P0001", "message": "Insufficient balance", "hint": None}
        )

    async with _gateway(handler) as gateway:
        with pytest.raises(LedgerDeclined) as exc_info:
            await RestLedgerService(gateway).transfer(_request())

    assert exc_info.value.message == "Insufficient balance"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"message": "internal"}),
        httpx.Response(502, text="<html>bad gateway</html>"),
        httpx.Response(200, text="not json"),
    ],
)
async def test_ledger_without_structured_payload_is_transport_failure(response):
    async with _gateway(lambda request: response) as gateway:
        with pytest.raises(TransportFailure):
            await RestLedgerService(gateway).transfer(_request())


@pytest.mark.asyncio
async def test_ledger_write_is_never_retried():
    """Test that a timed-out transfer is sent once."""
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ReadTimeout("slow", request=request)

    async with _gateway(handler, max_retries=3) as gateway:
        with pytest.raises(TransportFailure):
            await RestLedgerService(gateway).transfer(_request())

    assert calls == 1


def _pay_client(handler) -> PayClient:
    return PayClient(
        base_url="http://gateway.test",
        api_key="anon-key",
        user_id="u-alice",
        access_token="user-token",
        max_retries=0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_pay_client_search_and_send():
    """Test the send flow end to end against a fake gateway."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/rest/v1/profiles":
            return httpx.Response(200, json=PROFILE_ROWS)
        return httpx.Response(
            200, json={"success": True, "recipient_name": "Bob", "new_balance": "75.00"}
        )

    async with _pay_client(handler) as client:
        candidates = await client.search("example")
        request = client.prepare_transfer(candidates[0], "25")
        result = await client.send(request)

    assert isinstance(result, TransferSuccess)
    assert result.recipient_display_name == "Bob"
    assert result.should_refresh is True


@pytest.mark.asyncio
async def test_pay_client_short_search_makes_no_request():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json=[])

    async with _pay_client(handler) as client:
        with pytest.raises(QueryTooShort):
            await client.search("ab")

    assert calls == 0


@pytest.mark.asyncio
async def test_pay_client_send_reports_unknown_outcome():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async with _pay_client(handler) as client:
        request = client.prepare_transfer(
            RecipientCandidate(user_id="u-bob", wallet_id="WAL-BOB0001"), "10"
        )
        result = await client.send(request)

    assert isinstance(result, TransferFailure)
    assert result.kind == ErrorKind.TRANSPORT_FAILURE
    assert result.should_reconcile is True


@pytest.mark.asyncio
async def test_pay_client_receive_and_scan():
    async with _pay_client(lambda request: httpx.Response(200, json=[])) as client:
        code = client.receive_code(UpiTarget(handle="alice@okbank", display_name="Alice"))
        intent = client.scan(code)

        with pytest.raises(UnresolvableTarget):
            await client.resolve_code("bank://0012/SBIN0001")

    assert code == "upi://pay?pa=alice@okbank&pn=Alice"
    assert intent.address == "alice@okbank"
    assert intent.recipient_name == "Alice"


@pytest.mark.asyncio
async def test_balance_reads_daily_balance():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"user_id": "u-alice", "daily_balance": "175.50"}])

    async with _gateway(handler) as gateway:
        balance = await RestAccountState(gateway).balance("u-alice")

    assert seen[0].url.path == "/rest/v1/profiles"
    assert seen[0].url.params["user_id"] == "eq.u-alice"
    assert seen[0].url.params["select"] == "user_id,daily_balance"
    assert str(balance.balance) == "175.50"


@pytest.mark.asyncio
async def test_balance_for_missing_account():
    async with _gateway(lambda request: httpx.Response(200, json=[])) as gateway:
        with pytest.raises(RecipientNotFound):
            await RestAccountState(gateway).balance("u-ghost")


@pytest.mark.asyncio
async def test_pay_client_balance_and_transactions():
    """Test the reconciliation reads after a send."""
    seen = []
    rows = [
        {
            "id": "t-2",
            "type": "sent",
            "method": "upi",
            "amount": "25.00",
            "recipient_name": "Bob",
            "created_at": "2024-05-02T10:00:00+00:00",
        },
        {
            "id": "t-1",
            "type": "received",
            "method": "bank",
            "amount": 40,
            "recipient_name": None,
            "created_at": "2024-05-01T09:30:00+00:00",
        },
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/rest/v1/transactions":
            return httpx.Response(200, json=rows)
        return httpx.Response(200, json=[{"user_id": "u-alice", "daily_balance": 200}])

    async with _pay_client(handler) as client:
        balance = await client.balance()
        history = await client.transactions(limit=2)

    assert balance.user_id == "u-alice"
    assert balance.balance == 200
    params = seen[1].url.params
    assert params["user_id"] == "eq.u-alice"
    assert params["order"] == "created_at.desc"
    assert params["limit"] == "2"
    assert [t.id for t in history] == ["t-2", "t-1"]
    assert history[0].type == TransactionDirection.SENT
    assert history[1].recipient_name is None
