"""Program IDs, seeds, discriminators and account layout constants."""

import hashlib

from solders.pubkey import Pubkey

# ============================================================================
# PROGRAM IDS
# ============================================================================

PROGRAM_ID = Pubkey.from_string("GinKo7e13rZF9PmvNnejkexYE37kggTcdpkFMTyNVjke")

TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
TOKEN_2022_PROGRAM_ID = Pubkey.from_string("TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb")
ASSOCIATED_TOKEN_PROGRAM_ID = Pubkey.from_string(
    "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"
)
SYSTEM_PROGRAM_ID = Pubkey.from_string("11111111111111111111111111111111")
RENT_SYSVAR_ID = Pubkey.from_string("SysvarRent111111111111111111111111111111111")
ALT_PROGRAM_ID = Pubkey.from_string("AddressLookupTab1e1111111111111111111111111")
NATIVE_MINT = Pubkey.from_string("So11111111111111111111111111111111111111112")

# Holding a token of this mint (Token-2022) grants admin / asset-creator rights.
AUTH_MINT = Pubkey.from_string("AUTHFNLJwJgscANs8Un8fPKm6ccZUxysQs94kQY1UutR")
QUOTA_MINT = Pubkey.from_string("quotRVKVgQHPwgeEMyqrYMH6ytb1RaazxDsiRTL6Xn5")

# Switchboard on-demand oracle program
SWITCHBOARD_PROGRAM_ID = Pubkey.from_string("SBondMDrcV3K4kxZR1HNVT7osZxAHVHgYXL5Ze1oMUv")

# ============================================================================
# PDA SEEDS
# ============================================================================

ASSET_SEED = b"asset"
ASSET_MINT_SEED = b"asset_mint"
ORDER_SEED = b"order"
SWITCHBOARD_PULL_FEED_SEED = b"switchboard_pull_feed"
SWITCHBOARD_STATE_SEED = b"STATE"
LUT_SIGNER_SEED = b"LutSigner"

# ============================================================================
# SCHEMA
# ============================================================================

# Instruction names as the program declares them. Discriminators
# below are derived from these, so the two can not drift apart.
INSTRUCTION_NAMES = (
    "cancel_order",
    "fill_order",
    "gc_order",
    "init_asset",
    "mint_or_burn_asset",
    "place_order",
    "switchboard_pull_feed_init",
    "update_asset",
)


def instruction_discriminator(name: str) -> bytes:
    """Anchor instruction discriminator: sha256("global:<snake_name>")[:8]."""
    return hashlib.sha256(f"global:{name}".encode()).digest()[:8]


def account_discriminator(name: str) -> bytes:
    """Anchor account discriminator: sha256("account:<Name>")[:8]."""
    return hashlib.sha256(f"account:{name}".encode()).digest()[:8]


INSTRUCTION_DISCRIMINATORS = {
    name: instruction_discriminator(name) for name in INSTRUCTION_NAMES
}

INSTRUCTION_CANCEL_ORDER = INSTRUCTION_DISCRIMINATORS["cancel_order"]
INSTRUCTION_INIT_ASSET = INSTRUCTION_DISCRIMINATORS["init_asset"]
INSTRUCTION_PLACE_ORDER = INSTRUCTION_DISCRIMINATORS["place_order"]
INSTRUCTION_SWITCHBOARD_PULL_FEED_INIT = INSTRUCTION_DISCRIMINATORS[
    "switchboard_pull_feed_init"
]
INSTRUCTION_UPDATE_ASSET = INSTRUCTION_DISCRIMINATORS["update_asset"]

ASSET_DISCRIMINATOR = account_discriminator("Asset")
ORDER_DISCRIMINATOR = account_discriminator("Order")

# Custom error codes returned by the program (Anchor offsets them from 6000).
PROGRAM_ERRORS = {
    6000: ("invalid_params", "Invalid params"),
    6001: ("invalid_expiration", "Invalid expiration"),
    6002: ("invalid_price", "Invalid price"),
    6003: ("order_expired", "Order expired"),
    6004: ("exceeds_ceiling", "Exceeds ceiling"),
    6005: ("invalid_slippage", "Invalid slippage"),
    6006: ("unauthorized", "unauthorized"),
    6007: ("trading_paused", "Trading paused"),
    6008: ("invalid_order_size", "Invalid order size"),
    6009: ("order_already_canceled", "Order already canceled"),
    6010: ("order_already_filled", "Order already filled"),
    6011: ("order_not_ready_for_gc", "Order not ready for GC"),
    6012: ("math_overflow", "Math overflow"),
}

# ============================================================================
# ACCOUNT LAYOUTS
# ============================================================================

DISCRIMINATOR_SIZE = 8
PUBKEY_SIZE = 32
NONCE_SIZE = 32

# Asset: discriminator | nonce | bump | mint | min_order_size | ceiling |
#        quota_price_oracle | paused
ASSET_NONCE_OFFSET = DISCRIMINATOR_SIZE
ASSET_BUMP_OFFSET = ASSET_NONCE_OFFSET + NONCE_SIZE
ASSET_MINT_OFFSET = ASSET_BUMP_OFFSET + 1
ASSET_MIN_ORDER_SIZE_OFFSET = ASSET_MINT_OFFSET + PUBKEY_SIZE
ASSET_CEILING_OFFSET = ASSET_MIN_ORDER_SIZE_OFFSET + 8
ASSET_QUOTA_PRICE_ORACLE_OFFSET = ASSET_CEILING_OFFSET + 8
ASSET_PAUSED_OFFSET = ASSET_QUOTA_PRICE_ORACLE_OFFSET + PUBKEY_SIZE
ASSET_SIZE = ASSET_PAUSED_OFFSET + 1

# Order: fixed-width prefix; fields after `typ` follow borsh option encoding
ORDER_OWNER_OFFSET = DISCRIMINATOR_SIZE
ORDER_ASSET_OFFSET = ORDER_OWNER_OFFSET + PUBKEY_SIZE
ORDER_NONCE_OFFSET = ORDER_ASSET_OFFSET + PUBKEY_SIZE
ORDER_BUMP_OFFSET = ORDER_NONCE_OFFSET + NONCE_SIZE
ORDER_INPUT_HOLDER_OFFSET = ORDER_BUMP_OFFSET + 1
ORDER_PAYMENT_MINT_OFFSET = ORDER_INPUT_HOLDER_OFFSET + PUBKEY_SIZE
ORDER_PRICE_ORACLE_OFFSET = ORDER_PAYMENT_MINT_OFFSET + PUBKEY_SIZE
ORDER_DIRECTION_OFFSET = ORDER_PRICE_ORACLE_OFFSET + PUBKEY_SIZE
ORDER_TYPE_OFFSET = ORDER_DIRECTION_OFFSET + 1
ORDER_LIMIT_PRICE_OFFSET = ORDER_TYPE_OFFSET + 1
# Shortest encoding: both options None
ORDER_MIN_SIZE = ORDER_LIMIT_PRICE_OFFSET + 1 + 8 + 2 + 8 + 8 + 1 + 8 + 8 + 8

# ============================================================================
# ORDER DEFAULTS
# ============================================================================

DEFAULT_ORDER_EXPIRE_SECS = 3 * 3600
DEFAULT_TOKEN_DECIMALS = 6
MAX_SLIPPAGE_BPS = 65535
