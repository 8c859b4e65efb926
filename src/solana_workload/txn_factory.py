import base64

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction

import solana_workload.constants as C
from solana_workload.models import FreshnessToken


def build_and_sign(
    sender: Keypair,
    recipient: Pubkey,
    lamports: int,
    token: FreshnessToken,
) -> Transaction:
    """Single system-program transfer, fee paid by the sender, signed by the sender."""
    if not 0 <= lamports <= C.MAX_LAMPORTS:
        raise ValueError(f"lamports out of u64 range: {lamports}")
    ix = transfer(
        TransferParams(
            from_pubkey=sender.pubkey(),
            to_pubkey=recipient,
            lamports=lamports,
        )
    )
    return Transaction.new_signed_with_payer(
        [ix],
        sender.pubkey(),
        [sender],
        token.blockhash,
    )


def encode_transaction(tx: Transaction) -> str:
    """Wire form for ``sendTransaction``: bincode bytes, then base64."""
    return base64.b64encode(bytes(tx)).decode("ascii")
