"""Transaction building, simulation, submission and confirmation."""

import asyncio
import logging
import re
import time
from typing import List, Optional, Sequence, Tuple

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed, Finalized
from solana.rpc.types import TxOpts
from solders.address_lookup_table_account import AddressLookupTableAccount
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.signature import Signature
from solders.transaction import VersionedTransaction
from solders.transaction_status import TransactionConfirmationStatus

from ..errors import (
    ConfirmationTimeoutError,
    SimulationError,
    TransactionFailedError,
)
from .constants import PROGRAM_ERRORS

logger = logging.getLogger(__name__)

# A blockhash stays usable for a while past its reported last valid height.
BLOCKHASH_EXPIRY_MARGIN = 150
DEFAULT_POLL_INTERVAL = 0.3

DEFAULT_TX_OPTS = TxOpts(
    skip_preflight=False,
    preflight_commitment=Confirmed,
    max_retries=5,
)

_ERROR_LINE = re.compile(r"Error: (.*)")
_CUSTOM_ERROR = re.compile(r"custom program error: (0x[0-9a-fA-F]+)")

_CONFIRMED_STATUSES = (
    TransactionConfirmationStatus.Confirmed,
    TransactionConfirmationStatus.Finalized,
)


def extract_simulation_error(logs: Sequence[str]) -> str:
    """Pick the most useful error message out of simulation logs.

    Prefers the first ``Error: ...`` line, then a known program error code,
    and falls back to the joined logs.
    """
    joined = "\n".join(logs)
    match = _ERROR_LINE.search(joined)
    if match:
        return match.group(1)

    match = _CUSTOM_ERROR.search(joined)
    if match:
        code = int(match.group(1), 16)
        if code in PROGRAM_ERRORS:
            name, message = PROGRAM_ERRORS[code]
            return f"{message} ({name}, code {code})"

    return joined


async def build_transaction(
    connection: AsyncClient,
    payer: Keypair,
    instructions: List[Instruction],
    lookup_tables: Optional[List[AddressLookupTableAccount]] = None,
) -> Tuple[VersionedTransaction, int]:
    """Build and sign a v0 transaction paid for by ``payer``.

    Returns:
        The signed transaction and the last block height at which its
        blockhash is valid
    """
    response = await connection.get_latest_blockhash()
    blockhash = response.value.blockhash
    last_valid_block_height = response.value.last_valid_block_height

    message = MessageV0.try_compile(
        payer.pubkey(),
        instructions,
        lookup_tables or [],
        blockhash,
    )
    tx = VersionedTransaction(message, [payer])
    return tx, last_valid_block_height


async def simulate(connection: AsyncClient, tx: VersionedTransaction) -> List[str]:
    """Simulate a transaction and return its logs.

    Raises:
        SimulationError: If the simulation reports an error
    """
    response = await connection.simulate_transaction(tx)
    logs = list(response.value.logs or [])
    if response.value.err is not None:
        logger.debug("Simulation error %s, logs:\n%s", response.value.err, "\n".join(logs))
        raise SimulationError(extract_simulation_error(logs), logs=logs)
    return logs


async def _blockhash_expired(
    connection: AsyncClient, last_valid_block_height: int
) -> bool:
    response = await connection.get_block_height(Finalized)
    return response.value > last_valid_block_height + BLOCKHASH_EXPIRY_MARGIN


async def confirm_transaction(
    connection: AsyncClient,
    signature: Signature,
    last_valid_block_height: int,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> Signature:
    """Poll until the transaction is confirmed or its blockhash expires.

    Raises:
        TransactionFailedError: If the transaction landed with an error
        ConfirmationTimeoutError: If the blockhash expired first
    """
    start = time.monotonic()

    while True:
        response = await connection.get_signature_statuses([signature])
        statuses = response.value
        if not statuses:
            raise TransactionFailedError(str(signature), "no signature status returned")

        status = statuses[0]
        if status is not None:
            if status.err is not None:
                raise TransactionFailedError(str(signature), status.err)
            if status.confirmation_status in _CONFIRMED_STATUSES:
                logger.info(
                    "Transaction %s confirmed in %.1fs",
                    signature,
                    time.monotonic() - start,
                )
                return signature

        if await _blockhash_expired(connection, last_valid_block_height):
            elapsed = time.monotonic() - start
            logger.warning("Blockhash expired for %s after %.1fs", signature, elapsed)
            raise ConfirmationTimeoutError(
                str(signature), last_valid_block_height, elapsed
            )

        await asyncio.sleep(poll_interval)


async def sign_and_send(
    connection: AsyncClient,
    payer: Keypair,
    instructions: List[Instruction],
    simulate_first: bool = True,
    lookup_tables: Optional[List[AddressLookupTableAccount]] = None,
    opts: TxOpts = DEFAULT_TX_OPTS,
) -> Signature:
    """Build, optionally simulate, send and confirm a transaction."""
    tx, last_valid_block_height = await build_transaction(
        connection, payer, instructions, lookup_tables
    )

    if simulate_first:
        await simulate(connection, tx)

    response = await connection.send_transaction(tx, opts=opts)
    signature = response.value
    logger.info("Sent transaction %s", signature)

    return await confirm_transaction(connection, signature, last_valid_block_height)


def explorer_url(signature: Signature, network: str = "mainnet-beta") -> str:
    """Return a Solana Explorer link for a transaction."""
    url = f"https://explorer.solana.com/tx/{signature}"
    if network != "mainnet-beta":
        url += f"?cluster={network}"
    return url
