"""Transfer workload data structures."""

from dataclasses import dataclass, field
from typing import Any

from solders.hash import Hash

import solana_workload.constants as C
from solana_workload.errors import TransferError


@dataclass(frozen=True, slots=True)
class FreshnessToken:
    """Recent blockhash and the last block height at which it is still accepted.

    Fetched once per batch and shared read-only by every transfer in it.
    """

    blockhash: Hash
    last_valid_block_height: int

    @classmethod
    def from_rpc_result(cls, result: dict) -> "FreshnessToken":
        """Parse a ``getLatestBlockhash`` result.

        Raises:
            KeyError, TypeError, ValueError: if the payload is not the expected shape.
        """
        value = result["value"]
        return cls(
            blockhash=Hash.from_string(value["blockhash"]),
            last_valid_block_height=int(value["lastValidBlockHeight"]),
        )


@dataclass(frozen=True, slots=True)
class SignatureStatus:
    slot: int
    confirmations: int | None = None
    err: Any | None = None
    confirmation_status: str | None = None

    @classmethod
    def from_rpc_value(cls, value: dict) -> "SignatureStatus":
        confirmations = value.get("confirmations")
        return cls(
            slot=int(value["slot"]),
            confirmations=int(confirmations) if confirmations is not None else None,
            err=value.get("err"),
            confirmation_status=value.get("confirmationStatus"),
        )

    @property
    def failed_on_chain(self) -> bool:
        return self.err is not None

    def to_dict(self) -> dict:
        return {
            "slot": self.slot,
            "confirmations": self.confirmations,
            "err": self.err,
            "confirmation_status": self.confirmation_status,
        }


@dataclass(frozen=True, slots=True)
class TransferResult:
    """Outcome of one (sender, recipient) transfer.

    ``error`` is set only for local failures (parse, submit). A status query
    that fails after a successful submit leaves ``status`` empty and puts the
    reason in ``status_error`` instead.
    """

    from_address: str
    to_address: str
    processing_time: float  # seconds
    signature: str = ""
    status: SignatureStatus | None = None
    failure: TransferError | None = None
    status_error: str | None = None
    stage: C.TransferState = C.TransferState.DONE

    @property
    def error(self) -> str | None:
        return str(self.failure) if self.failure is not None else None

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def pair(self) -> tuple[str, str]:
        return self.from_address, self.to_address

    def __str__(self):
        return f"{self.from_address} -> {self.to_address} -- {self.signature or '-'}"


@dataclass(slots=True)
class TransferRequest:
    """One cell of the sender x recipient cross product."""

    from_address: str
    private_key: str = field(repr=False)
    to_address: str
    lamports: int
