from typing import Final
from enum import StrEnum

LAMPORTS_PER_SOL: Final = 1_000_000_000
MAX_LAMPORTS: Final = 2**64 - 1  # u64 in the system transfer instruction

# Decoded sizes in bytes
KEYPAIR_LENGTH: Final = 64
PUBKEY_LENGTH: Final = 32

JSONRPC_VERSION: Final = "2.0"


class RpcMethod(StrEnum):
    GET_LATEST_BLOCKHASH      = "getLatestBlockhash"
    SEND_TRANSACTION          = "sendTransaction"
    GET_SIGNATURE_STATUSES    = "getSignatureStatuses"


class Commitment(StrEnum):
    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"


class TransferState(StrEnum):
    CREATED          = "CREATED"
    KEYPAIR_PARSED   = "KEYPAIR_PARSED"
    RECIPIENT_PARSED = "RECIPIENT_PARSED"
    SIGNED           = "SIGNED"
    SUBMITTED        = "SUBMITTED"
    STATUS_CHECKED   = "STATUS_CHECKED"
    DONE             = "DONE"


class StatusLabel(StrEnum):
    SUCCESS          = "success"
    ON_CHAIN_FAILURE = "on-chain failure"
    PENDING          = "pending"
    FAILED           = "failed"


CONFIRM_DELAY = 2.0  # seconds between submit and the single status query
RPC_TIMEOUT = None   # None -> httpx default
DEFAULT_CONFIG_FILE = "config.toml"

__all__ = [
    "CONFIRM_DELAY",
    "DEFAULT_CONFIG_FILE",
    "JSONRPC_VERSION",
    "KEYPAIR_LENGTH",
    "LAMPORTS_PER_SOL",
    "MAX_LAMPORTS",
    "PUBKEY_LENGTH",
    "RPC_TIMEOUT",

    ######
    "Commitment",
    "RpcMethod",
    "StatusLabel",
    "TransferState",
]
