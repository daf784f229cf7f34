"""On-chain program interaction module for Ginko.

This module provides address derivation, instruction builders, account
readers and transaction helpers for the Ginko program on Solana.
"""

from .account_data import AccountData
from .accounts import deserialize_asset, deserialize_order
from .admin import AdminInstructionBuilder
from .asset_creator import AssetCreatorInstructionBuilder
from .constants import (
    ASSET_DISCRIMINATOR,
    AUTH_MINT,
    INSTRUCTION_DISCRIMINATORS,
    ORDER_DISCRIMINATOR,
    PROGRAM_ERRORS,
    PROGRAM_ID,
    QUOTA_MINT,
    SWITCHBOARD_PROGRAM_ID,
)
from .instructions import (
    build_cancel_order_instruction,
    build_init_asset_instruction,
    build_place_order_instruction,
    build_switchboard_pull_feed_init_instruction,
    build_update_asset_instruction,
)
from .pda import (
    get_asset_mint_pda,
    get_asset_pda,
    get_authority_token_account,
    get_lookup_table_address,
    get_lut_signer_pda,
    get_oracle_feed_pda,
    get_order_input_holder,
    get_order_pda,
    get_switchboard_state_pda,
)
from .public import PublicInstructionBuilder, validate_place_order_params
from .token import (
    build_create_associated_token_account_instruction,
    get_or_create_associated_token_account_ix,
)
from .transaction import (
    build_transaction,
    confirm_transaction,
    explorer_url,
    extract_simulation_error,
    sign_and_send,
    simulate,
)
from .types import (
    Asset,
    AssetRef,
    InitAssetParams,
    Order,
    OrderDirection,
    OrderType,
    PlaceOrderParams,
    UpdateAssetParams,
)

__all__ = [
    # Constants
    "PROGRAM_ID",
    "AUTH_MINT",
    "QUOTA_MINT",
    "SWITCHBOARD_PROGRAM_ID",
    "ASSET_DISCRIMINATOR",
    "ORDER_DISCRIMINATOR",
    "INSTRUCTION_DISCRIMINATORS",
    "PROGRAM_ERRORS",
    # Types
    "Asset",
    "AssetRef",
    "Order",
    "OrderDirection",
    "OrderType",
    "PlaceOrderParams",
    "UpdateAssetParams",
    "InitAssetParams",
    # Account Deserialization
    "deserialize_asset",
    "deserialize_order",
    "AccountData",
    # PDA Functions
    "get_asset_pda",
    "get_asset_mint_pda",
    "get_order_pda",
    "get_order_input_holder",
    "get_oracle_feed_pda",
    "get_authority_token_account",
    "get_lookup_table_address",
    "get_lut_signer_pda",
    "get_switchboard_state_pda",
    # Instruction Builders
    "build_place_order_instruction",
    "build_cancel_order_instruction",
    "build_init_asset_instruction",
    "build_update_asset_instruction",
    "build_switchboard_pull_feed_init_instruction",
    "build_create_associated_token_account_instruction",
    "get_or_create_associated_token_account_ix",
    "PublicInstructionBuilder",
    "AdminInstructionBuilder",
    "AssetCreatorInstructionBuilder",
    "validate_place_order_params",
    # Transactions
    "build_transaction",
    "simulate",
    "confirm_transaction",
    "sign_and_send",
    "extract_simulation_error",
    "explorer_url",
]
