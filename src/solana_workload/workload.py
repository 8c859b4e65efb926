"""Transfer executor and batch coordinator.

``TransferWorkload.run`` fetches one recent blockhash, fans out one task per
(sender, recipient) pair and waits for all of them. Each task walks the
linear state machine

    CREATED -> KEYPAIR_PARSED -> RECIPIENT_PARSED -> SIGNED -> SUBMITTED
            -> STATUS_CHECKED -> DONE

and always ends with exactly one ``TransferResult``. Local failures stop the
walk early and are stored on the result; they never reach sibling tasks or
the coordinator. Nothing is retried.
"""
import asyncio
import contextlib
import logging
import time
from collections.abc import Sequence

import solana_workload.constants as C
from solana_workload.codec import parse_address, parse_keypair
from solana_workload.config import SenderWallet, Settings
from solana_workload.errors import (
    CodecError,
    KeypairError,
    RecipientError,
    RpcFailure,
    SubmitError,
    TransferError,
)
from solana_workload.models import FreshnessToken, SignatureStatus, TransferRequest, TransferResult
from solana_workload.rpc import RpcTransport
from solana_workload.txn_factory import build_and_sign, encode_transaction

log = logging.getLogger("solana_workload.workload")


def cross_product(
    senders: Sequence[SenderWallet],
    recipients: Sequence[str],
    lamports: int,
) -> list[TransferRequest]:
    """Sender-major, recipient-minor, in input order."""
    return [
        TransferRequest(
            from_address=s.address,
            private_key=s.private_key.get_secret_value(),
            to_address=r,
            lamports=lamports,
        )
        for s in senders
        for r in recipients
    ]


class TransferWorkload:
    def __init__(
        self,
        transport: RpcTransport,
        *,
        confirm_delay: float = C.CONFIRM_DELAY,
        max_concurrency: int | None = None,
    ) -> None:
        self.transport = transport
        self.confirm_delay = confirm_delay
        self.max_concurrency = max_concurrency

    @classmethod
    def from_settings(cls, settings: Settings, transport: RpcTransport) -> "TransferWorkload":
        return cls(
            transport,
            confirm_delay=settings.confirm_delay,
            max_concurrency=settings.max_concurrency,
        )

    async def execute_transfer(self, req: TransferRequest, token: FreshnessToken) -> TransferResult:
        start = time.perf_counter()
        state = C.TransferState.CREATED

        def advance(new_state: C.TransferState) -> None:
            nonlocal state
            log.debug("%s -> %s: %s -> %s", req.from_address, req.to_address, state, new_state)
            state = new_state

        def finish(failure: TransferError) -> TransferResult:
            log.warning("transfer %s -> %s failed at %s: %s", req.from_address, req.to_address, state, failure)
            return TransferResult(
                from_address=req.from_address,
                to_address=req.to_address,
                processing_time=time.perf_counter() - start,
                failure=failure,
                stage=state,
            )

        try:
            try:
                keypair = parse_keypair(req.private_key)
            except CodecError as e:
                return finish(KeypairError(e))
            advance(C.TransferState.KEYPAIR_PARSED)

            try:
                recipient = parse_address(req.to_address)
            except CodecError as e:
                return finish(RecipientError(e))
            advance(C.TransferState.RECIPIENT_PARSED)

            tx = build_and_sign(keypair, recipient, req.lamports, token)
            del keypair
            advance(C.TransferState.SIGNED)

            try:
                signature = await self.transport.send_transaction(encode_transaction(tx))
            except RpcFailure as e:
                return finish(SubmitError(e))
            advance(C.TransferState.SUBMITTED)

            await asyncio.sleep(self.confirm_delay)

            status: SignatureStatus | None = None
            status_error: str | None = None
            try:
                status = await self.transport.get_signature_status(signature)
            except RpcFailure as e:
                # pending/unknown, not a transfer failure
                status_error = str(e)
                log.warning("Failed to get status for %s: %s", signature, e)
            advance(C.TransferState.STATUS_CHECKED)
        except Exception as e:
            # one pair's bug must not cancel the TaskGroup siblings
            log.exception("transfer %s -> %s: unexpected error at %s", req.from_address, req.to_address, state)
            return finish(TransferError(e))

        elapsed = time.perf_counter() - start
        advance(C.TransferState.DONE)
        return TransferResult(
            from_address=req.from_address,
            to_address=req.to_address,
            processing_time=elapsed,
            signature=signature,
            status=status,
            status_error=status_error,
        )

    async def _bounded(self, sem: asyncio.Semaphore | None, req: TransferRequest, token: FreshnessToken) -> TransferResult:
        async with sem if sem is not None else contextlib.nullcontext():
            return await self.execute_transfer(req, token)

    async def run(
        self,
        senders: Sequence[SenderWallet],
        recipients: Sequence[str],
        lamports: int,
    ) -> list[TransferResult]:
        """Run every sender x recipient transfer concurrently.

        Returns one result per pair in launch order (sender-major), or an empty
        list without submitting anything if the blockhash cannot be fetched.
        Match results by ``(from_address, to_address)`` rather than position.
        """
        try:
            token = await self.transport.get_latest_blockhash()
        except RpcFailure as e:
            log.error("Failed to get blockhash: %s", e)
            return []

        requests = cross_product(senders, recipients, lamports)
        log.info("Using blockhash: %s (valid until height %s)", token.blockhash, token.last_valid_block_height)
        log.info(
            "Starting %s transfers (concurrency=%s)...",
            len(requests),
            self.max_concurrency or "unbounded",
        )

        sem = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        async with asyncio.TaskGroup() as tg:
            tasks = [
                tg.create_task(self._bounded(sem, req, token), name=f"transfer-{i}")
                for i, req in enumerate(requests)
            ]
        return [t.result() for t in tasks]

    async def run_settings(self, settings: Settings, lamports: int) -> list[TransferResult]:
        return await self.run(settings.sender_wallets, settings.recipient_addresses, lamports)
