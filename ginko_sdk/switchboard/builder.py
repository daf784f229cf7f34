"""Switchboard oracle feed instructions for Ginko assets."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Protocol, Tuple

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Processed
from solders.address_lookup_table_account import AddressLookupTableAccount
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from ..errors import BuildError, EncodingError
from ..program.constants import PROGRAM_ID
from ..program.instructions import (
    FEED_HASH_SIZE,
    build_switchboard_pull_feed_init_instruction,
)
from ..program.pda import get_authority_token_account, get_oracle_feed_pda
from .crossbar import DEFAULT_SIMULATION_URL, CrossbarClient
from .jobs import price_job
from .queue import SwitchboardQueue, default_devnet_queue, default_queue

if TYPE_CHECKING:
    from ..api.asset import AssetResolver

logger = logging.getLogger(__name__)

DEFAULT_PRICE_TASK_URL = "https://go-ginko-prices.fly.dev/api/price"
DEFAULT_PRICE_JSON_PATH = "price"

DEFAULT_MAX_VARIANCE = 10_000_000_000  # 10%
DEFAULT_MIN_RESPONSES = 1
DEFAULT_MIN_SAMPLE_SIZE = 3
DEFAULT_MAX_STALENESS = 3600


class FeedUpdater(Protocol):
    """Oracle network client that builds feed update instructions."""

    async def fetch_update_ix(
        self, feed: Pubkey, payer: Pubkey
    ) -> Tuple[Optional[Instruction], List[AddressLookupTableAccount]]:
        """Return the submit instruction (None if none can be built) and its LUTs."""
        ...


@dataclass
class PullFeedInitParams:
    """Parameters for creating an asset's price feed.

    ``feed_hash`` is the ``0x``-prefixed hex hash returned by crossbar.
    ``feed_authority`` defaults to ``signer``. When
    ``permit_write_by_authority`` is set, only the feed authority may push
    values, bypassing oracle requirements.
    """

    signer: Pubkey
    asset_nonce: bytes
    payment_mint: Pubkey
    feed_hash: str
    name: str
    feed_authority: Optional[Pubkey] = None
    max_variance: int = DEFAULT_MAX_VARIANCE
    min_responses: int = DEFAULT_MIN_RESPONSES
    min_sample_size: int = DEFAULT_MIN_SAMPLE_SIZE
    max_staleness: int = DEFAULT_MAX_STALENESS
    permit_write_by_authority: Optional[bool] = None


@dataclass
class FeedHashConfig:
    """Where a feed's price job fetches from and where it is simulated."""

    price_task_url: str = DEFAULT_PRICE_TASK_URL
    price_task_json_path: str = DEFAULT_PRICE_JSON_PATH
    simulation_url: str = DEFAULT_SIMULATION_URL
    simulation_cluster: str = "Mainnet"


def decode_feed_hash(feed_hash: str) -> bytes:
    """Decode a ``0x``-prefixed 32-byte hex feed hash.

    Raises:
        EncodingError: If the string is not ``0x`` followed by 64 hex digits
    """
    if not feed_hash.startswith("0x"):
        raise EncodingError("feed hash must start with 0x", value=feed_hash)
    try:
        raw = bytes.fromhex(feed_hash[2:])
    except ValueError:
        raise EncodingError("feed hash is not valid hex", value=feed_hash)
    if len(raw) != FEED_HASH_SIZE:
        raise EncodingError(
            f"feed hash must be {FEED_HASH_SIZE} bytes, got {len(raw)}", value=feed_hash
        )
    return raw


class SwitchboardInstructionBuilder:
    """Builds oracle feed instructions.

    ``feed_updater`` is only needed for :meth:`update`.
    """

    def __init__(
        self,
        connection: AsyncClient,
        crossbar: CrossbarClient,
        queue: SwitchboardQueue,
        feed_updater: Optional[FeedUpdater] = None,
        program_id: Pubkey = PROGRAM_ID,
    ):
        self.connection = connection
        self.crossbar = crossbar
        self.queue = queue
        self.feed_updater = feed_updater
        self.program_id = program_id

    async def pull_feed_init(self, params: PullFeedInitParams) -> List[Instruction]:
        """Build the instruction creating a pull feed for an asset.

        The feed's lookup table address is derived from the current slot, so
        two calls at different slots produce different instructions. A
        transaction built from a stale slot fails and must be rebuilt, not
        resent.

        Raises:
            EncodingError: If the feed hash, name or nonce do not fit
        """
        feed_hash = decode_feed_hash(params.feed_hash)

        response = await self.connection.get_slot(Processed)
        recent_slot = response.value

        ix = build_switchboard_pull_feed_init_instruction(
            payer=params.signer,
            feed_authority=params.feed_authority or params.signer,
            ginko_authority=get_authority_token_account(params.signer),
            queue=self.queue.pubkey,
            asset_nonce=params.asset_nonce,
            payment_mint=params.payment_mint,
            recent_slot=recent_slot,
            feed_hash=feed_hash,
            name=params.name,
            max_variance=params.max_variance,
            min_responses=params.min_responses,
            min_sample_size=params.min_sample_size,
            max_staleness=params.max_staleness,
            permit_write_by_authority=params.permit_write_by_authority,
            oracle_program_id=self.queue.program_id,
            program_id=self.program_id,
        )

        logger.debug(
            "Pull feed init for %s at slot %d",
            ix.accounts[0].pubkey,
            recent_slot,
        )
        return [ix]

    async def update(
        self, feed: Pubkey, signer: Pubkey
    ) -> Tuple[List[Instruction], List[AddressLookupTableAccount]]:
        """Build the instruction submitting a fresh value to a feed.

        Raises:
            BuildError: If no updater is configured or it produced no instruction
        """
        if self.feed_updater is None:
            raise BuildError("no feed updater configured")

        ix, lookup_tables = await self.feed_updater.fetch_update_ix(feed, signer)
        if ix is None:
            raise BuildError(f"failed to create update instruction for feed {feed}")
        return [ix], list(lookup_tables)

    async def get_feed_hash(
        self, ticker: str, config: Optional[FeedHashConfig] = None
    ) -> str:
        """Simulate and store the price job for ``ticker``.

        Returns:
            The ``0x``-prefixed content hash of the stored job

        Raises:
            ServiceError: If the simulator or crossbar fails
            SimulationError: If the simulated job produced no result
        """
        config = config or FeedHashConfig()
        jobs = [price_job(config.price_task_url, ticker, config.price_task_json_path)]

        await self.crossbar.simulate_jobs(
            jobs,
            cluster=config.simulation_cluster,
            simulation_url=config.simulation_url,
        )

        stored = await self.crossbar.store(self.queue, jobs)
        logger.debug("Stored job for %s as %s (cid %s)", ticker, stored.feed_hash, stored.cid)
        return stored.feed_hash


async def prepare_create_oracle_instructions(
    connection: AsyncClient,
    signer: Pubkey,
    ticker: str,
    payment_mint: Pubkey,
    resolver: "AssetResolver",
    price_url: str,
    is_devnet: bool = False,
    crossbar: Optional[CrossbarClient] = None,
    simulation_url: str = DEFAULT_SIMULATION_URL,
) -> List[Instruction]:
    """Create the price feed instructions for a ticker end to end.

    Computes the feed hash for ``{price_url}/price/{ticker}``, resolves the
    ticker's asset nonce and builds the feed init instruction named
    ``"<ticker> / USD"``.
    """
    if crossbar is None:
        async with CrossbarClient() as owned:
            return await prepare_create_oracle_instructions(
                connection,
                signer,
                ticker,
                payment_mint,
                resolver,
                price_url,
                is_devnet=is_devnet,
                crossbar=owned,
                simulation_url=simulation_url,
            )

    queue = default_devnet_queue() if is_devnet else default_queue()
    builder = SwitchboardInstructionBuilder(
        connection, crossbar, queue, program_id=resolver.program_id
    )

    feed_hash = await builder.get_feed_hash(
        ticker,
        FeedHashConfig(
            price_task_url=f"{price_url}/price",
            simulation_url=simulation_url,
            simulation_cluster="Devnet" if is_devnet else "Mainnet",
        ),
    )

    asset_nonce = await resolver.derive_nonce(ticker)
    feed, _ = get_oracle_feed_pda(asset_nonce, payment_mint, resolver.program_id)
    logger.info("Feed public key: %s", feed)

    return await builder.pull_feed_init(
        PullFeedInitParams(
            signer=signer,
            asset_nonce=asset_nonce,
            payment_mint=payment_mint,
            feed_hash=feed_hash,
            name=f"{ticker} / USD",
            feed_authority=signer,
        )
    )
