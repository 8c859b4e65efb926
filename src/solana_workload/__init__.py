"""Concurrent SOL transfer workload: fan out, submit, check status, report."""

from solana_workload.codec import lamports_to_sol, parse_address, parse_keypair, sol_to_lamports
from solana_workload.models import FreshnessToken, SignatureStatus, TransferResult
from solana_workload.rpc import RpcTransport
from solana_workload.stats import BatchStats, compute_stats, render_report
from solana_workload.workload import TransferWorkload

__all__ = [
    "BatchStats",
    "FreshnessToken",
    "RpcTransport",
    "SignatureStatus",
    "TransferResult",
    "TransferWorkload",
    "compute_stats",
    "lamports_to_sol",
    "parse_address",
    "parse_keypair",
    "render_report",
    "sol_to_lamports",
]
