"""Ginko SDK - Python SDK for the Ginko trading protocol on Solana.

This SDK provides four main modules:
- `program`: Address derivation, instruction builders, account readers and
  transaction helpers for the on-chain program
- `api`: OpenFIGI identifier resolution and asset identities
- `switchboard`: Oracle price feed creation and updates
- `shared`: Nonce and fixed-point price codecs

Example:
    from ginko_sdk import AssetResolver, OpenFIGIClient, PublicInstructionBuilder

    # Or import from specific modules
    from ginko_sdk.program import get_asset_pda
    from ginko_sdk.shared import encode_nonce
"""

__version__ = "0.1.0"

# ============================================================================
# MODULE IMPORTS
# ============================================================================

from . import api
from . import program
from . import shared
from . import switchboard

# ============================================================================
# CONVENIENCE RE-EXPORTS
# ============================================================================

from .api import (
    AssetResolver,
    FigiItem,
    OpenFIGIAsset,
    OpenFIGIClient,
    RetryConfig,
)
from .config import GinkoConfig
from .errors import (
    AccountNotFoundError,
    BuildError,
    ChainReadError,
    ConfigError,
    ConfirmationTimeoutError,
    EncodingError,
    GinkoError,
    InvalidAccountDataError,
    InvalidDiscriminatorError,
    ParseError,
    SimulationError,
    TransactionFailedError,
    ValidationError,
)
from .api.error import ApiError, NotFoundError, ServiceError
from .keypair import keypair_from_base58, keypair_from_json_file
from .program import (
    PROGRAM_ID,
    AccountData,
    AdminInstructionBuilder,
    Asset,
    AssetCreatorInstructionBuilder,
    AssetRef,
    InitAssetParams,
    Order,
    OrderDirection,
    OrderType,
    PlaceOrderParams,
    PublicInstructionBuilder,
    UpdateAssetParams,
    get_asset_mint_pda,
    get_asset_pda,
    get_oracle_feed_pda,
    get_order_input_holder,
    get_order_pda,
    sign_and_send,
)
from .shared import (
    DEFAULT_NONCE_PREFIX,
    Price,
    decode_nonce,
    encode_nonce,
    format_price,
    parse_price,
)
from .switchboard import (
    CrossbarClient,
    PullFeedInitParams,
    SwitchboardInstructionBuilder,
)

__all__ = [
    # Version
    "__version__",
    # Submodules
    "api",
    "program",
    "shared",
    "switchboard",
    # Config
    "GinkoConfig",
    "keypair_from_json_file",
    "keypair_from_base58",
    # Codecs
    "DEFAULT_NONCE_PREFIX",
    "encode_nonce",
    "decode_nonce",
    "Price",
    "parse_price",
    "format_price",
    # Identity
    "OpenFIGIClient",
    "AssetResolver",
    "OpenFIGIAsset",
    "FigiItem",
    "RetryConfig",
    # Program
    "PROGRAM_ID",
    "Asset",
    "AssetRef",
    "Order",
    "OrderDirection",
    "OrderType",
    "PlaceOrderParams",
    "UpdateAssetParams",
    "InitAssetParams",
    "get_asset_pda",
    "get_asset_mint_pda",
    "get_order_pda",
    "get_order_input_holder",
    "get_oracle_feed_pda",
    "AccountData",
    "PublicInstructionBuilder",
    "AdminInstructionBuilder",
    "AssetCreatorInstructionBuilder",
    "sign_and_send",
    # Oracle
    "CrossbarClient",
    "SwitchboardInstructionBuilder",
    "PullFeedInitParams",
    # Errors
    "GinkoError",
    "ValidationError",
    "EncodingError",
    "ParseError",
    "ChainReadError",
    "AccountNotFoundError",
    "InvalidAccountDataError",
    "InvalidDiscriminatorError",
    "SimulationError",
    "TransactionFailedError",
    "ConfirmationTimeoutError",
    "BuildError",
    "ConfigError",
    "ApiError",
    "ServiceError",
    "NotFoundError",
]
