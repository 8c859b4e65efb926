import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from rich.console import Console

import solana_workload.constants as C
from solana_workload.codec import sol_to_lamports
from solana_workload.config import Settings, load_config
from solana_workload.errors import ConfigError
from solana_workload.logging_config import setup_logging
from solana_workload.rpc import RpcTransport
from solana_workload.stats import compute_stats, render_report, report_as_dict
from solana_workload.workload import TransferWorkload

log = logging.getLogger("solana_workload.main")

EXIT_CONFIG = 1
EXIT_NO_BLOCKHASH = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="solana-workload")
    parser.add_argument("command", nargs="?", choices=["run", "serve"], default="run",
                        help="run one batch (default) or serve the HTTP API")
    parser.add_argument("-c", "--config", type=Path, default=Path(C.DEFAULT_CONFIG_FILE),
                        help="Path to the TOML config file.")
    parser.add_argument("-u", "--rpc-url", help="Override the RPC endpoint.")
    parser.add_argument("-a", "--amount", type=float, dest="amount_sol",
                        help="SOL per transfer.")
    parser.add_argument("-m", "--max-concurrency", type=int,
                        help="Cap on in-flight transfers (default: all at once).")
    parser.add_argument("-d", "--confirm-delay", type=float,
                        help="Seconds to wait after submitting before checking status.")
    parser.add_argument("-l", "--log-level", help="Logging level.")
    out = parser.add_mutually_exclusive_group()
    out.add_argument("-p", "--plain", action="store_true", help="Plain text report.")
    out.add_argument("-j", "--json", action="store_true", help="JSON report.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def overrides(a: argparse.Namespace) -> dict:
    return {
        "rpc_url": a.rpc_url,
        "amount_sol": a.amount_sol,
        "max_concurrency": a.max_concurrency,
        "confirm_delay": a.confirm_delay,
        "log_level": a.log_level,
    }


async def run_batch(settings: Settings, transport: RpcTransport | None = None):
    lamports = sol_to_lamports(settings.amount_sol)
    log.info("Sender wallets: %s", len(settings.sender_wallets))
    log.info("Recipients: %s", len(settings.recipient_addresses))
    log.info("Amount per transfer: %s SOL (%s lamports)", settings.amount_sol, lamports)
    log.info("Total transfers: %s", settings.transfer_count)

    rpc = transport or RpcTransport(
        settings.rpc_url,
        auth_token=settings.auth_token.get_secret_value() if settings.auth_token else None,
        timeout=settings.rpc_timeout,
    )
    async with rpc:
        w = TransferWorkload.from_settings(settings, rpc)
        return await w.run_settings(settings, lamports)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = load_config(args.config, **overrides(args))
    except ConfigError as e:
        print(f"config error: {e}", file=sys.stderr)
        return EXIT_CONFIG
    setup_logging(settings.log_level, settings.log_file)

    if args.command == "serve":
        import uvicorn
        from solana_workload.app import create_app

        uvicorn.run(create_app(settings), host=args.host, port=args.port, log_config=None)
        return 0

    results = asyncio.run(run_batch(settings))
    stats = compute_stats(results)
    if args.json:
        print(json.dumps(report_as_dict(results, stats), indent=2))
    else:
        render_report(results, stats, Console(), plain=args.plain)

    if settings.transfer_count and not results:
        return EXIT_NO_BLOCKHASH
    log.info("Transfer process completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
