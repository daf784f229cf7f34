"""Switchboard oracle feeds for Ginko assets.

Feeds are created from a price job: the job is simulated, stored on crossbar
to obtain its hash, and the hash is used to initialize a pull feed owned by
the asset's feed PDA.
"""

from .builder import (
    FeedHashConfig,
    FeedUpdater,
    PullFeedInitParams,
    SwitchboardInstructionBuilder,
    decode_feed_hash,
    prepare_create_oracle_instructions,
)
from .crossbar import (
    DEFAULT_CROSSBAR_URL,
    DEFAULT_SIMULATION_URL,
    CrossbarClient,
    StoreResponse,
)
from .jobs import (
    AggregationMethod,
    HttpMethod,
    HttpTask,
    JsonParseTask,
    OracleJob,
    price_job,
)
from .queue import SwitchboardQueue, default_devnet_queue, default_queue

__all__ = [
    # Builder
    "SwitchboardInstructionBuilder",
    "PullFeedInitParams",
    "FeedHashConfig",
    "FeedUpdater",
    "decode_feed_hash",
    "prepare_create_oracle_instructions",
    # Services
    "CrossbarClient",
    "StoreResponse",
    "DEFAULT_CROSSBAR_URL",
    "DEFAULT_SIMULATION_URL",
    # Jobs
    "OracleJob",
    "HttpTask",
    "JsonParseTask",
    "HttpMethod",
    "AggregationMethod",
    "price_job",
    # Queues
    "SwitchboardQueue",
    "default_queue",
    "default_devnet_queue",
]
