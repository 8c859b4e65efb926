"""Shared fixtures: a scripted JSON-RPC node behind ``httpx.MockTransport``."""
from __future__ import annotations

import itertools
import json
from collections import Counter
from collections.abc import AsyncIterator, Callable

import base58
import httpx
import pytest
import pytest_asyncio
from solders.hash import Hash
from solders.keypair import Keypair

from solana_workload.config import SenderWallet
from solana_workload.rpc import RpcTransport

RPC_URL = "https://rpc.test"
BLOCKHASH = str(Hash(bytes(range(32))))


def secret_of(kp: Keypair) -> str:
    return base58.b58encode(bytes(kp)).decode()


def sender_for(kp: Keypair) -> SenderWallet:
    return SenderWallet(address=str(kp.pubkey()), private_key=secret_of(kp))


def ok(result) -> dict:
    return {"result": result}


class FakeRpc:
    """Answers the methods the workload uses; any of them can be overridden.

    ``handlers[method]`` receives the decoded request body and returns either a
    response dict (``id``/``jsonrpc`` are filled in) or an ``httpx.Response``.
    """

    def __init__(self) -> None:
        self.requests: list[dict] = []
        self.headers: list[httpx.Headers] = []
        self._sigs = (f"SIG_{n}" for n in itertools.count(1))
        self.handlers: dict[str, Callable[[dict], dict | httpx.Response]] = {
            "getLatestBlockhash": lambda body: ok(
                {"context": {"slot": 1}, "value": {"blockhash": BLOCKHASH, "lastValidBlockHeight": 150}}
            ),
            "getSlot": lambda body: ok(1),
            "sendTransaction": lambda body: ok(next(self._sigs)),
            "getSignatureStatuses": lambda body: ok(
                {
                    "context": {"slot": 9},
                    "value": [{"slot": 9, "confirmations": 1, "err": None, "confirmationStatus": "confirmed"}],
                }
            ),
        }

    @property
    def method_counts(self) -> Counter:
        return Counter(r["method"] for r in self.requests)

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        self.headers.append(request.headers)
        handle = self.handlers.get(body["method"])
        if handle is None:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"],
                                             "error": {"code": -32601, "message": "Method not found"}})
        out = handle(body)
        if isinstance(out, httpx.Response):
            return out
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], **out})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def transport(self, **kwargs) -> RpcTransport:
        return RpcTransport(RPC_URL, client=self.client(), **kwargs)


@pytest.fixture()
def fake_rpc() -> FakeRpc:
    return FakeRpc()


@pytest_asyncio.fixture
async def transport(fake_rpc: FakeRpc) -> AsyncIterator[RpcTransport]:
    rpc = fake_rpc.transport()
    try:
        yield rpc
    finally:
        await rpc.client.aclose()


@pytest.fixture()
def keypairs() -> list[Keypair]:
    return [Keypair() for _ in range(3)]
