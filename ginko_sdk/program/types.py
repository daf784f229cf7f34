"""Type definitions for the Ginko program module."""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Optional

from solders.pubkey import Pubkey

from ..shared.price import Price
from .constants import DEFAULT_ORDER_EXPIRE_SECS, DEFAULT_TOKEN_DECIMALS


class OrderDirection(IntEnum):
    """Direction of an order relative to the asset."""

    BUY = 0  # Spends the trade token, receives the asset
    SELL = 1  # Spends the asset, receives the trade token


class OrderType(IntEnum):
    """Execution type of an order."""

    MARKET = 0
    LIMIT = 1


# ============================================================================
# ACCOUNT DATA
# ============================================================================


@dataclass
class Asset:
    """Asset account data."""

    public_key: Pubkey
    nonce: bytes
    bump: int
    mint: Pubkey
    min_order_size: int
    ceiling: int
    quota_price_oracle: Pubkey
    paused: bool


@dataclass
class Order:
    """Order account data."""

    public_key: Pubkey
    owner: Pubkey
    asset: Pubkey
    nonce: bytes
    bump: int
    input_holder: Pubkey
    payment_mint: Pubkey
    price_oracle: Pubkey
    direction: OrderDirection
    order_type: OrderType
    limit_price: Optional[Price]
    input_quantity: int
    slippage_bps: int
    created_at: datetime
    expire_at: datetime
    canceled_at: Optional[datetime]
    filled_quantity: int
    filled_output_quantity: int
    last_fill_slot: int


@dataclass(frozen=True)
class AssetRef:
    """The address pair needed to trade an asset."""

    public_key: Pubkey
    mint: Pubkey


# ============================================================================
# INSTRUCTION PARAMS
# ============================================================================


@dataclass
class PlaceOrderParams:
    """Parameters for placing an order.

    ``trade_mint`` is the token traded against the asset: the input mint for
    buys and the output mint for sells. Limit orders need ``limit_price`` and
    zero slippage; market orders need no ``limit_price`` and non-zero
    slippage.
    """

    owner: Pubkey
    asset: AssetRef
    direction: OrderDirection
    order_type: OrderType
    quantity: int
    price_oracle: Pubkey
    trade_mint: Pubkey
    limit_price: Optional[Price] = None
    slippage_bps: int = 0
    expire_time: int = DEFAULT_ORDER_EXPIRE_SECS


@dataclass
class UpdateAssetParams:
    """Parameters for updating an asset. ``None`` leaves a field unchanged."""

    signer: Pubkey
    asset: Pubkey
    min_order_size: Optional[int] = None
    ceiling: Optional[int] = None
    paused: Optional[bool] = None
    quota_price_oracle: Optional[Pubkey] = None


@dataclass
class InitAssetParams:
    """Parameters for creating an asset.

    ``public_key`` and ``mint`` are derived from ``nonce`` when omitted.
    """

    signer: Pubkey
    nonce: bytes
    min_order_size: int
    ceiling: int
    quota_price_oracle: Pubkey
    token_decimals: int = DEFAULT_TOKEN_DECIMALS
    public_key: Optional[Pubkey] = None
    mint: Optional[Pubkey] = None
