import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, HTTPException, Request
from pydantic import BaseModel, NonNegativeFloat, field_validator

from solana_workload.codec import sol_to_lamports
from solana_workload.config import Settings
from solana_workload.rpc import RpcTransport
from solana_workload.stats import compute_stats, report_as_dict
from solana_workload.workload import TransferWorkload

log = logging.getLogger("solana_workload.app")


class TransferBatchReq(BaseModel):
    amount_sol: NonNegativeFloat | None = None
    recipients: list[str] | None = None

    @field_validator("amount_sol")
    @classmethod
    def _fits_lamports(cls, v: float | None) -> float | None:
        if v is not None:
            sol_to_lamports(v)
        return v


def create_app(settings: Settings, transport: RpcTransport | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        rpc = transport or RpcTransport(
            settings.rpc_url,
            auth_token=settings.auth_token.get_secret_value() if settings.auth_token else None,
            timeout=settings.rpc_timeout,
        )
        app.state.settings = settings
        app.state.workload = TransferWorkload.from_settings(settings, rpc)
        app.state.last_report = None
        log.info("Ready: %s senders, %s recipients via %s",
                 len(settings.sender_wallets), len(settings.recipient_addresses), settings.rpc_url)
        try:
            yield
        finally:
            log.info("Shutting down...")
            await rpc.aclose()

    app = FastAPI(
        title="Solana Transfer Workload",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Transfers", "description": "Run and inspect transfer batches"},
        ],
    )
    r_transfers = APIRouter(prefix="/transfers", tags=["Transfers"])

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @r_transfers.post("")
    async def run_batch(request: Request, req: TransferBatchReq | None = None):
        """Run one batch over the configured senders and return the report."""
        s: Settings = request.app.state.settings
        w: TransferWorkload = request.app.state.workload
        req = req or TransferBatchReq()

        amount = req.amount_sol if req.amount_sol is not None else s.amount_sol
        recipients = req.recipients if req.recipients is not None else s.recipient_addresses
        results = await w.run(s.sender_wallets, recipients, sol_to_lamports(amount))

        expected = len(s.sender_wallets) * len(recipients)
        if expected and not results:
            raise HTTPException(status_code=502, detail="Failed to get blockhash; no transfers attempted")

        report = report_as_dict(results, compute_stats(results))
        request.app.state.last_report = report
        return report

    @r_transfers.get("/last")
    async def last_batch(request: Request):
        if request.app.state.last_report is None:
            raise HTTPException(status_code=404, detail="No batch has run yet")
        return request.app.state.last_report

    app.include_router(r_transfers)
    return app
