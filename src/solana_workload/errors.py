"""Exception hierarchy for the transfer workload.

Codec and RPC errors are raised by the leaf modules. The transfer executor
never lets them escape: it wraps them in a ``TransferError`` variant and
stores that on the result.
"""
from __future__ import annotations


class SolanaWorkloadError(Exception):
    """Base exception for everything raised by this package."""


class ConfigError(SolanaWorkloadError):
    """Raised when the configuration file is missing or invalid."""


# ---------------------------------------------------------------- codec

class CodecError(SolanaWorkloadError):
    """Malformed secret-key or address encoding."""


class EncodingError(CodecError):
    """The text is not valid base-58, or the bytes are not a usable keypair."""


class LengthError(CodecError):
    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Invalid key length: expected {expected} bytes, got {actual}")


class InvalidAddressError(CodecError):
    """The text does not decode to a 32 byte account identifier."""


# ---------------------------------------------------------------- rpc

class RpcFailure(SolanaWorkloadError):
    """Any failure of a single JSON-RPC call."""


class RpcTransportError(RpcFailure):
    """Network error, non-2xx status, or an undecodable response body."""


class RpcProtocolError(RpcFailure):
    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"RPC Error: {code} - {message}")


class RpcEmptyResult(RpcFailure):
    """Response carried neither ``result`` nor ``error``."""


# ---------------------------------------------------------------- transfer

class TransferError(SolanaWorkloadError):
    """Terminal error of one transfer. ``cause`` is the underlying codec/RPC error."""

    prefix = "Transfer failed"

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"{self.prefix}: {cause}")


class KeypairError(TransferError):
    prefix = "Failed to parse keypair"


class RecipientError(TransferError):
    prefix = "Invalid recipient address"


class SubmitError(TransferError):
    prefix = "Failed to send transaction"


__all__ = [
    "CodecError",
    "ConfigError",
    "EncodingError",
    "InvalidAddressError",
    "KeypairError",
    "LengthError",
    "RecipientError",
    "RpcEmptyResult",
    "RpcFailure",
    "RpcProtocolError",
    "RpcTransportError",
    "SolanaWorkloadError",
    "SubmitError",
    "TransferError",
]
