"""JSON-RPC over HTTP(S) for the handful of Solana methods the workload needs.

One ``RpcTransport`` (one ``httpx.AsyncClient``, one connection pool) is shared
by every concurrent transfer in a batch. No retries and no caching: each call
is exactly one POST.
"""
import itertools
import logging
from typing import Any

import httpx

import solana_workload.constants as C
from solana_workload.errors import RpcEmptyResult, RpcProtocolError, RpcTransportError
from solana_workload.models import FreshnessToken, SignatureStatus

log = logging.getLogger("solana_workload.rpc")

_UNSET: Any = object()


def _decode_error(method: str, err: Any) -> tuple[int, str]:
    """``(code, message)`` from an ``error`` member; a malformed one is a transport error."""
    if not isinstance(err, dict):
        return 0, str(err)
    try:
        return int(err.get("code", 0)), str(err.get("message", ""))
    except (TypeError, ValueError) as e:
        raise RpcTransportError(f"{method}: malformed error object {err!r}") from e


class RpcTransport:
    def __init__(
        self,
        url: str,
        *,
        auth_token: str | None = None,
        timeout: float | None = C.RPC_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self._headers = {"Content-Type": "application/json"}
        if auth_token:
            self._headers["x-token"] = auth_token
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._ids = itertools.count(1)

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            if self._timeout is None:
                self._client = httpx.AsyncClient()
            else:
                self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "RpcTransport":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def call(self, method: str, params: list) -> Any:
        """Issue one JSON-RPC request and return its ``result`` payload.

        Raises:
            RpcTransportError: network failure, non-2xx status or undecodable body.
            RpcProtocolError: the server answered with an ``error`` object.
            RpcEmptyResult: the response had neither ``result`` nor ``error``.
        """
        request_id = next(self._ids)
        payload = {
            "jsonrpc": C.JSONRPC_VERSION,
            "id": request_id,
            "method": method,
            "params": params,
        }
        log.debug("rpc -> %s id=%s", method, request_id)
        try:
            r = await self.client.post(self.url, json=payload, headers=self._headers)
        except httpx.HTTPError as e:
            log.debug("rpc <- %s id=%s transport error: %s", method, request_id, e)
            raise RpcTransportError(f"{method}: {e.__class__.__name__}: {e}") from e

        # Non-2xx replies may still carry a JSON-RPC error object (e.g. 429)
        try:
            body = r.json()
        except ValueError as e:
            if r.is_error:
                raise RpcTransportError(f"{method}: HTTP {r.status_code}") from e
            raise RpcTransportError(f"{method}: undecodable response: {e}") from e

        if isinstance(body, dict) and (err := body.get("error")) is not None:
            code, message = _decode_error(method, err)
            log.debug("rpc <- %s id=%s error %s %s", method, request_id, code, message)
            raise RpcProtocolError(code, message)

        if r.is_error:
            raise RpcTransportError(f"{method}: HTTP {r.status_code}")
        if not isinstance(body, dict):
            raise RpcTransportError(f"{method}: expected a JSON object, got {type(body).__name__}")

        result = body.get("result", _UNSET)
        if result is _UNSET or result is None:
            raise RpcEmptyResult(f"{method}: no result in response")
        log.debug("rpc <- %s id=%s ok", method, request_id)
        return result

    async def get_latest_blockhash(self, commitment: str = C.Commitment.CONFIRMED) -> FreshnessToken:
        result = await self.call(C.RpcMethod.GET_LATEST_BLOCKHASH, [{"commitment": str(commitment)}])
        try:
            return FreshnessToken.from_rpc_result(result)
        except (KeyError, TypeError, ValueError) as e:
            raise RpcTransportError(f"malformed blockhash result: {e!r}") from e

    async def send_transaction(self, encoded: str) -> str:
        """Submit a base64 transaction; returns the signature string."""
        result = await self.call(
            C.RpcMethod.SEND_TRANSACTION,
            [
                encoded,
                {
                    "encoding": "base64",
                    "preflightCommitment": str(C.Commitment.CONFIRMED),
                    "skipPreflight": False,
                },
            ],
        )
        if not isinstance(result, str):
            raise RpcTransportError(f"expected signature string, got {type(result).__name__}")
        return result

    async def get_signature_status(self, signature: str) -> SignatureStatus | None:
        """Status of one signature, or None if the node has not seen it."""
        result = await self.call(
            C.RpcMethod.GET_SIGNATURE_STATUSES,
            [[signature], {"searchTransactionHistory": True}],
        )
        try:
            value = result["value"]
            # getSignatureStatuses answers with a list, one entry per signature
            if isinstance(value, list):
                value = value[0] if value else None
            if value is None:
                return None
            return SignatureStatus.from_rpc_value(value)
        except (KeyError, TypeError, ValueError, IndexError) as e:
            raise RpcTransportError(f"malformed signature status: {e!r}") from e
