import pytest
from fastapi.testclient import TestClient
from solders.keypair import Keypair

from solana_workload.app import create_app
from solana_workload.config import Settings

from conftest import RPC_URL, sender_for


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        rpc_url=RPC_URL,
        sender_wallets=[sender_for(Keypair())],
        recipient_addresses=[str(Keypair().pubkey()), str(Keypair().pubkey())],
        amount_sol=0.001,
        confirm_delay=0,
    )


@pytest.fixture()
def client(settings, fake_rpc):
    with TestClient(create_app(settings, fake_rpc.transport())) as c:
        yield c


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_run_batch_and_fetch_last(client, fake_rpc):
    assert client.get("/transfers/last").status_code == 404

    r = client.post("/transfers")
    assert r.status_code == 200
    report = r.json()
    assert report["stats"]["total"] == 2
    assert report["stats"]["successful"] == 2
    assert {x["status_label"] for x in report["results"]} == {"success"}
    assert fake_rpc.method_counts["sendTransaction"] == 2

    assert client.get("/transfers/last").json() == report


def test_run_batch_with_overrides(client, fake_rpc):
    r = client.post("/transfers", json={"amount_sol": 0.5, "recipients": ["invalid_pubkey"]})
    assert r.status_code == 200
    report = r.json()
    assert report["stats"]["failed"] == 1
    assert report["results"][0]["error_kind"] == "RecipientError"
    assert fake_rpc.method_counts["sendTransaction"] == 0


def test_blockhash_failure_is_bad_gateway(client, fake_rpc):
    fake_rpc.handlers["getLatestBlockhash"] = lambda body: {"error": {"code": -32000, "message": "down"}}
    r = client.post("/transfers")
    assert r.status_code == 502
    assert fake_rpc.method_counts["sendTransaction"] == 0


@pytest.mark.parametrize("amount", [1e11, -0.5])
def test_out_of_range_amount_is_rejected_before_any_rpc(client, fake_rpc, amount):
    r = client.post("/transfers", json={"amount_sol": amount})
    assert r.status_code == 422
    assert fake_rpc.method_counts["getLatestBlockhash"] == 0
    assert fake_rpc.method_counts["sendTransaction"] == 0
