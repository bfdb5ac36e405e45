"""REST adapters for the account directory and the ledger.

The gateway speaks the PostgREST dialect: profiles are read from
``/rest/v1/profiles`` and transfers go through the ``transfer_money``
remote procedure. Balance and history are read from ``profiles`` and
``transactions``.
"""

import logging
from typing import Any, Optional

import httpx

from paywire.exceptions import (
    LedgerDeclined,
    RecipientNotFound,
    TransportFailure,
    raise_for_error_response,
)
from paywire.retry import retry_async
from paywire.types import (
    AccountBalance,
    AddressField,
    LedgerResponse,
    RecipientCandidate,
    TransactionRecord,
    TransferRequest,
)

logger = logging.getLogger(__name__)

PROFILES_PATH = "/rest/v1/profiles"
TRANSFER_RPC_PATH = "/rest/v1/rpc/transfer_money"
TRANSACTIONS_PATH = "/rest/v1/transactions"
CANDIDATE_COLUMNS = "user_id,display_name,email,upi_id,wallet_id"
SEARCH_COLUMNS = ("email", "upi_id", "wallet_id")
TRANSACTION_COLUMNS = "id,type,method,amount,recipient_name,created_at"


class GatewayClient:
    """Async HTTP client for the data gateway.

    Args:
        base_url: Base URL of the gateway
        api_key: Project API key sent as ``apikey``
        access_token: The signed-in user's token; the API key is used when omitted
        timeout: Request timeout in seconds
        max_retries: Maximum number of retry attempts for read requests
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        max_retries: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {access_token or api_key}",
                "Content-Type": "application/json",
            },
        )

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def get(self, path: str, params: dict[str, Any]) -> Any:
        """GET with retry on transient errors.

        Raises:
            PayError: If the gateway returns an error body
            TransportFailure: If no answer could be obtained
        """

        async def make_request() -> httpx.Response:
            response = await self._client.request("GET", path, params=params)
            if response.status_code in (502, 503, 504):
                response.raise_for_status()
            return response

        try:
            response = await retry_async(make_request, max_retries=self.max_retries)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportFailure(details={"error": type(e).__name__})

        if response.status_code >= 400:
            raise_for_error_response(response.status_code, _error_body(response))
        try:
            return response.json()
        except ValueError:
            logger.warning(f"Gateway answered {response.status_code} with a non-JSON body")
            raise TransportFailure(details={"status_code": response.status_code})

    async def post(
        self,
        path: str,
        json: dict[str, Any],
        idempotency_key: Optional[str] = None,
    ) -> httpx.Response:
        """POST exactly once; the caller interprets the response.

        Raises:
            TransportFailure: If the request failed without a response
        """
        headers = {}
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key

        try:
            return await self._client.request("POST", path, json=json, headers=headers)
        except httpx.HTTPError as e:
            raise TransportFailure(details={"error": type(e).__name__})


def _error_body(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        data = None
    if not isinstance(data, dict):
        return {"message": response.text, "error_code": "UNKNOWN_ERROR"}
    return data


def escape_ilike(value: str) -> str:
    """Make user input match literally inside an ``ilike`` pattern.

    ``%``, ``_`` and the escape character are backslash-escaped. The gateway
    turns every ``*`` into ``%``, so a literal ``*`` becomes the single
    character wildcard ``_`` and callers re-check matches locally.
    """
    return (
        value.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
        .replace("*", "_")
    )


def _contains(row: dict[str, Any], pattern: str) -> bool:
    needle = pattern.lower()
    return any(needle in (row.get(column) or "").lower() for column in SEARCH_COLUMNS)


def _quote_filter_value(value: str) -> str:
    """Double-quote a value for use inside a PostgREST ``or=(...)`` filter."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class RestAccountDirectory:
    """``AccountDirectory`` over the gateway's ``profiles`` resource."""

    def __init__(self, gateway: GatewayClient) -> None:
        self.gateway = gateway

    async def search(
        self,
        pattern: str,
        exclude_user_id: str,
        limit: int,
    ) -> list[RecipientCandidate]:
        needle = _quote_filter_value(f"*{escape_ilike(pattern)}*")
        params = {
            "select": CANDIDATE_COLUMNS,
            "or": "(" + ",".join(f"{column}.ilike.{needle}" for column in SEARCH_COLUMNS) + ")",
            "user_id": f"neq.{exclude_user_id}",
            "order": "created_at.asc",
            "limit": str(limit),
        }
        rows = await self.gateway.get(PROFILES_PATH, params)
        if "*" in pattern:
            rows = [row for row in rows if _contains(row, pattern)]
        return [
            RecipientCandidate(**row, created_rank=rank)
            for rank, row in enumerate(rows)
        ]

    async def lookup(
        self,
        field: AddressField,
        value: str,
    ) -> Optional[RecipientCandidate]:
        params = {
            "select": CANDIDATE_COLUMNS,
            field.value: f"eq.{value}",
            "limit": "1",
        }
        rows = await self.gateway.get(PROFILES_PATH, params)
        if not rows:
            return None
        return RecipientCandidate(**rows[0])



class RestAccountState:
    """``AccountState`` over the gateway's ``profiles`` and ``transactions``."""

    def __init__(self, gateway: GatewayClient) -> None:
        self.gateway = gateway

    async def balance(self, user_id: str) -> AccountBalance:
        params = {
            "select": "user_id,daily_balance",
            "user_id": f"eq.{user_id}",
            "limit": "1",
        }
        rows = await self.gateway.get(PROFILES_PATH, params)
        if not rows:
            raise RecipientNotFound(
                message="Account not found",
                details={"user_id": user_id},
            )
        return AccountBalance.model_validate(rows[0])

    async def transactions(self, user_id: str, limit: int) -> list[TransactionRecord]:
        params = {
            "select": TRANSACTION_COLUMNS,
            "user_id": f"eq.{user_id}",
            "order": "created_at.desc",
            "limit": str(limit),
        }
        rows = await self.gateway.get(TRANSACTIONS_PATH, params)
        return [TransactionRecord.model_validate(row) for row in rows]


class RestLedgerService:
    """``LedgerService`` calling the gateway's ``transfer_money`` procedure."""

    def __init__(self, gateway: GatewayClient) -> None:
        self.gateway = gateway

    async def transfer(self, request: TransferRequest) -> LedgerResponse:
        response = await self.gateway.post(
            TRANSFER_RPC_PATH,
            json=request.to_rpc_params(),
            idempotency_key=request.idempotency_key,
        )

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code < 400 and isinstance(data, dict):
            return LedgerResponse.model_validate(data)

        if 400 <= response.status_code < 500 and isinstance(data, dict) and data.get("message"):
            raise LedgerDeclined(
                message=data["message"],
                details={"code": data.get("code"), "hint": data.get("hint")},
            )

        logger.warning(f"Ledger answered {response.status_code} without a usable payload")
        raise TransportFailure(details={"status_code": response.status_code})
