"""Reduce a batch of ``TransferResult`` into counts and timing, and render them."""

from collections.abc import Sequence
from dataclasses import asdict, dataclass

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

import solana_workload.constants as C
from solana_workload.models import TransferResult


@dataclass(frozen=True, slots=True)
class BatchStats:
    total: int
    successful: int
    failed: int
    confirmed_ok: int  # successful submit, status present, no on-chain error
    on_chain_failures: int
    pending: int
    total_time: float
    min_time: float | None
    max_time: float | None
    avg_time: float | None


def status_label(result: TransferResult) -> C.StatusLabel:
    if not result.succeeded:
        return C.StatusLabel.FAILED
    if result.status is None:
        return C.StatusLabel.PENDING
    if result.status.failed_on_chain:
        return C.StatusLabel.ON_CHAIN_FAILURE
    return C.StatusLabel.SUCCESS


def compute_stats(results: Sequence[TransferResult]) -> BatchStats:
    ok = [r for r in results if r.succeeded]
    times = [r.processing_time for r in ok]
    labels = [status_label(r) for r in ok]
    total_time = sum(times)
    return BatchStats(
        total=len(results),
        successful=len(ok),
        failed=len(results) - len(ok),
        confirmed_ok=labels.count(C.StatusLabel.SUCCESS),
        on_chain_failures=labels.count(C.StatusLabel.ON_CHAIN_FAILURE),
        pending=labels.count(C.StatusLabel.PENDING),
        total_time=total_time,
        min_time=min(times) if times else None,
        max_time=max(times) if times else None,
        avg_time=total_time / len(ok) if ok else None,
    )


def _fmt_secs(t: float | None) -> str:
    return "-" if t is None else f"{t:.3f}s"


def result_as_dict(r: TransferResult) -> dict:
    return {
        "from_address": r.from_address,
        "to_address": r.to_address,
        "signature": r.signature,
        "status_label": str(status_label(r)),
        "status": r.status.to_dict() if r.status is not None else None,
        "processing_time": r.processing_time,
        "error": r.error,
        "error_kind": type(r.failure).__name__ if r.failure is not None else None,
        "status_error": r.status_error,
        "stage": str(r.stage),
    }


def report_as_dict(results: Sequence[TransferResult], stats: BatchStats | None = None) -> dict:
    stats = stats or compute_stats(results)
    return {
        "results": [result_as_dict(r) for r in results],
        "stats": asdict(stats),
    }


def render_plain(results: Sequence[TransferResult], stats: BatchStats, console: Console) -> None:
    console.print("\n=== Transfer Results ===\n", markup=False, highlight=False)
    for r in results:
        label = status_label(r)
        lines = [f"From: {r.from_address}", f"To: {r.to_address}"]
        if label is C.StatusLabel.FAILED:
            lines.insert(0, "FAILED TRANSFER")
            lines.append(f"Error: {r.error}")
        else:
            lines.append(f"Signature: {r.signature}")
            lines.append(f"Status: {label}")
        lines.append(f"Processing Time: {_fmt_secs(r.processing_time)}")
        if r.status is not None:
            lines.append(f"Slot: {r.status.slot}")
            if r.status.confirmations is not None:
                lines.append(f"Confirmations: {r.status.confirmations}")
            if r.status.confirmation_status is not None:
                lines.append(f"Confirmation Status: {r.status.confirmation_status}")
        lines.append("---")
        console.print("\n".join(lines), markup=False, highlight=False)

    summary = [
        "\n=== Statistics ===",
        f"Total transfers: {stats.total}",
        f"Successful: {stats.successful}",
        f"Failed: {stats.failed}",
    ]
    if stats.successful:
        summary += [
            f"Average processing time: {_fmt_secs(stats.avg_time)}",
            f"Min processing time: {_fmt_secs(stats.min_time)}",
            f"Max processing time: {_fmt_secs(stats.max_time)}",
        ]
    console.print("\n".join(summary), markup=False, highlight=False)


_LABEL_STYLE = {
    C.StatusLabel.SUCCESS: "green",
    C.StatusLabel.ON_CHAIN_FAILURE: "red",
    C.StatusLabel.PENDING: "yellow",
    C.StatusLabel.FAILED: "bold red",
}


def render_report(
    results: Sequence[TransferResult],
    stats: BatchStats | None = None,
    console: Console | None = None,
    *,
    plain: bool = False,
) -> None:
    """Print every result, then the aggregate summary."""
    stats = stats or compute_stats(results)
    console = console or Console()
    if plain:
        render_plain(results, stats, console)
        return

    table = Table(
        title="[bold underline bright_white]Transfer Results[/]",
        show_header=True,
        header_style="bold",
        expand=False,
    )
    table.add_column("From", no_wrap=True)
    table.add_column("To", no_wrap=True)
    table.add_column("Signature / Error", overflow="fold")
    table.add_column("Status")
    table.add_column("Time", justify="right")
    table.add_column("Slot", justify="right")
    table.add_column("Conf.", justify="right")
    table.add_column("Tier")

    for r in results:
        label = status_label(r)
        s = r.status
        # addresses and error text are data, not markup
        table.add_row(
            Text(r.from_address),
            Text(r.to_address),
            Text(r.signature if r.succeeded else (r.error or "")),
            Text(str(label), style=_LABEL_STYLE[label]),
            _fmt_secs(r.processing_time),
            str(s.slot) if s else "",
            str(s.confirmations) if s and s.confirmations is not None else "",
            (s.confirmation_status or "") if s else "",
        )
    console.print(table)

    summary = Table.grid(padding=(0, 2))
    summary.add_row("Total transfers", str(stats.total))
    summary.add_row("Successful", f"[green]{stats.successful}[/]")
    summary.add_row("Failed", f"[red]{stats.failed}[/]")
    if stats.successful:
        summary.add_row("  on-chain failures", str(stats.on_chain_failures))
        summary.add_row("  pending", str(stats.pending))
        summary.add_row("Average processing time", _fmt_secs(stats.avg_time))
        summary.add_row("Min processing time", _fmt_secs(stats.min_time))
        summary.add_row("Max processing time", _fmt_secs(stats.max_time))
    console.print(Panel(summary, title="Statistics", expand=False))
