"""Secret-key, address and amount conversions. Pure, no I/O."""

from decimal import Decimal

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey

import solana_workload.constants as C
from solana_workload.errors import EncodingError, InvalidAddressError, LengthError


def _b58decode(text: str) -> bytes:
    return base58.b58decode(text.strip())


def parse_keypair(secret: str) -> Keypair:
    """Decode a base-58 encoded 64 byte secret (32 byte seed + 32 byte public key).

    Raises:
        EncodingError: not base-58, or the public half does not belong to the seed.
        LengthError: decodes to anything other than 64 bytes.
    """
    try:
        raw = _b58decode(secret)
    except ValueError as e:
        raise EncodingError(f"secret key is not valid base58: {e}") from e

    if len(raw) != C.KEYPAIR_LENGTH:
        raise LengthError(expected=C.KEYPAIR_LENGTH, actual=len(raw))

    try:
        keypair = Keypair.from_bytes(raw)
    except ValueError as e:
        raise EncodingError(f"secret key bytes are not a valid keypair: {e}") from e

    if bytes(keypair.pubkey()) != raw[C.PUBKEY_LENGTH:]:
        raise EncodingError("public key half does not match the secret key")
    return keypair


def parse_address(text: str) -> Pubkey:
    """Decode a base-58 account address into a ``Pubkey``.

    Raises:
        InvalidAddressError: invalid characters or not exactly 32 bytes.
    """
    try:
        raw = _b58decode(text)
    except ValueError as e:
        raise InvalidAddressError(f"{text!r} is not valid base58") from e
    if len(raw) != C.PUBKEY_LENGTH:
        raise InvalidAddressError(
            f"{text!r} decodes to {len(raw)} bytes, expected {C.PUBKEY_LENGTH}"
        )
    return Pubkey(raw)


def sol_to_lamports(sol: float | int | str | Decimal) -> int:
    """SOL -> lamports, truncating toward zero.

    Raises ValueError for negative or non-finite amounts and for anything that
    does not fit the u64 lamports field of a transfer.
    """
    amount = Decimal(str(sol))
    if not amount.is_finite():
        raise ValueError(f"amount must be finite, got {sol}")
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {sol}")
    lamports = int(amount * C.LAMPORTS_PER_SOL)
    if lamports > C.MAX_LAMPORTS:
        raise ValueError(f"amount {sol} SOL exceeds the maximum of {C.MAX_LAMPORTS} lamports")
    return lamports


def lamports_to_sol(lamports: int) -> float:
    return lamports / C.LAMPORTS_PER_SOL
