import io
import json

import pytest
from rich.console import Console

import solana_workload.constants as C
from solana_workload.errors import InvalidAddressError, RecipientError
from solana_workload.models import SignatureStatus, TransferResult
from solana_workload.stats import compute_stats, render_report, report_as_dict, status_label


def _ok(t, status=None, sig="SIG"):
    return TransferResult(from_address="A", to_address=f"B{t}", processing_time=t, signature=sig, status=status)


def _failed(t):
    return TransferResult(
        from_address="A",
        to_address="bad",
        processing_time=t,
        failure=RecipientError(InvalidAddressError("'bad' is not valid base58")),
        stage=C.TransferState.KEYPAIR_PARSED,
    )


CONFIRMED = SignatureStatus(slot=10, confirmations=2, confirmation_status="confirmed")
ON_CHAIN_ERR = SignatureStatus(slot=11, err={"InstructionError": [0, "Custom"]}, confirmation_status="processed")


@pytest.fixture()
def results():
    return [_ok(2.0, CONFIRMED), _ok(4.0, ON_CHAIN_ERR), _ok(3.0), _failed(0.1)]


def test_compute_stats(results):
    stats = compute_stats(results)
    assert stats.total == 4
    assert stats.successful == 3
    assert stats.failed == 1
    assert stats.successful + stats.failed == stats.total
    assert stats.confirmed_ok == 1
    assert stats.on_chain_failures == 1
    assert stats.pending == 1
    assert stats.min_time == 2.0
    assert stats.max_time == 4.0
    assert stats.avg_time == pytest.approx(3.0)


@pytest.mark.parametrize("batch", [[], [_failed(0.2), _failed(0.3)]])
def test_no_successes_means_no_average(batch):
    stats = compute_stats(batch)
    assert stats.successful == 0
    assert stats.failed == len(batch)
    assert stats.avg_time is None
    assert stats.min_time is None
    assert stats.max_time is None


def test_status_labels(results):
    assert [status_label(r) for r in results] == [
        C.StatusLabel.SUCCESS,
        C.StatusLabel.ON_CHAIN_FAILURE,
        C.StatusLabel.PENDING,
        C.StatusLabel.FAILED,
    ]


def test_render_plain(results):
    buf = io.StringIO()
    render_report(results, console=Console(file=buf, width=200), plain=True)
    out = buf.getvalue()
    assert "=== Transfer Results ===" in out
    assert "Status: success" in out
    assert "Status: on-chain failure" in out
    assert "Status: pending" in out
    assert "FAILED TRANSFER" in out
    assert "Error: Invalid recipient address" in out
    assert "Confirmation Status: confirmed" in out
    assert "Total transfers: 4" in out
    assert "Successful: 3" in out
    assert "Failed: 1" in out
    assert "Average processing time: 3.000s" in out


def test_render_plain_skips_timing_without_successes():
    buf = io.StringIO()
    render_report([_failed(0.1)], console=Console(file=buf, width=200), plain=True)
    assert "Average processing time" not in buf.getvalue()


def test_render_rich_table(results):
    buf = io.StringIO()
    render_report(results, console=Console(file=buf, width=240, color_system=None))
    out = buf.getvalue()
    assert "Transfer Results" in out
    assert "Statistics" in out
    assert "on-chain failure" in out
    assert "confirmed" in out


def test_report_as_dict_is_json_safe(results):
    report = report_as_dict(results)
    json.dumps(report)
    assert report["stats"]["total"] == 4
    failed = report["results"][3]
    assert failed["error_kind"] == "RecipientError"
    assert failed["stage"] == "KEYPAIR_PARSED"
    assert report["results"][0]["status"]["confirmation_status"] == "confirmed"
