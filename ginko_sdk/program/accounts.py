"""Account deserialization for the Ginko SDK."""

import struct
from datetime import datetime, timezone
from typing import Optional

from solders.pubkey import Pubkey

from ..errors import InvalidAccountDataError, InvalidDiscriminatorError
from ..shared.price import Price
from .constants import (
    ASSET_BUMP_OFFSET,
    ASSET_CEILING_OFFSET,
    ASSET_DISCRIMINATOR,
    ASSET_MIN_ORDER_SIZE_OFFSET,
    ASSET_MINT_OFFSET,
    ASSET_NONCE_OFFSET,
    ASSET_PAUSED_OFFSET,
    ASSET_QUOTA_PRICE_ORACLE_OFFSET,
    ASSET_SIZE,
    NONCE_SIZE,
    ORDER_ASSET_OFFSET,
    ORDER_BUMP_OFFSET,
    ORDER_DIRECTION_OFFSET,
    ORDER_DISCRIMINATOR,
    ORDER_INPUT_HOLDER_OFFSET,
    ORDER_LIMIT_PRICE_OFFSET,
    ORDER_MIN_SIZE,
    ORDER_NONCE_OFFSET,
    ORDER_OWNER_OFFSET,
    ORDER_PAYMENT_MINT_OFFSET,
    ORDER_PRICE_ORACLE_OFFSET,
    ORDER_TYPE_OFFSET,
)
from .types import Asset, Order, OrderDirection, OrderType
from .utils import (
    decode_bool,
    decode_i64,
    decode_pubkey,
    decode_u16,
    decode_u64,
    decode_u8,
)


def _validate_discriminator(data: bytes, expected: bytes, name: str) -> None:
    """Validate account discriminator."""
    if len(data) < 8:
        raise InvalidAccountDataError(f"{name} data too short: {len(data)} bytes")
    actual = bytes(data[:8])
    if actual != expected:
        raise InvalidDiscriminatorError(expected, actual)


def _timestamp(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def deserialize_asset(data: bytes, public_key: Pubkey) -> Asset:
    """Deserialize an Asset account.

    Layout (122 bytes):
    - [0..8]: discriminator
    - [8..40]: nonce (32 bytes)
    - [40]: bump (u8)
    - [41..73]: mint (Pubkey)
    - [73..81]: min_order_size (u64 LE)
    - [81..89]: ceiling (u64 LE)
    - [89..121]: quota_price_oracle (Pubkey)
    - [121]: paused (bool)
    """
    data = bytes(data)
    _validate_discriminator(data, ASSET_DISCRIMINATOR, "Asset")

    if len(data) < ASSET_SIZE:
        raise InvalidAccountDataError(
            f"Asset {public_key} data too short: {len(data)} bytes (expected {ASSET_SIZE})"
        )

    return Asset(
        public_key=public_key,
        nonce=data[ASSET_NONCE_OFFSET : ASSET_NONCE_OFFSET + NONCE_SIZE],
        bump=decode_u8(data, ASSET_BUMP_OFFSET),
        mint=decode_pubkey(data, ASSET_MINT_OFFSET),
        min_order_size=decode_u64(data, ASSET_MIN_ORDER_SIZE_OFFSET),
        ceiling=decode_u64(data, ASSET_CEILING_OFFSET),
        quota_price_oracle=decode_pubkey(data, ASSET_QUOTA_PRICE_ORACLE_OFFSET),
        paused=decode_bool(data, ASSET_PAUSED_OFFSET),
    )


def deserialize_order(data: bytes, public_key: Pubkey) -> Order:
    """Deserialize an Order account.

    Layout:
    - [0..8]: discriminator
    - [8..40]: owner (Pubkey)
    - [40..72]: asset (Pubkey)
    - [72..104]: nonce (32 bytes)
    - [104]: bump (u8)
    - [105..137]: input_holder (Pubkey)
    - [137..169]: payment_mint (Pubkey)
    - [169..201]: price_oracle (Pubkey)
    - [201]: direction (u8: 0=Buy, 1=Sell)
    - [202]: typ (u8: 0=Market, 1=Limit)
    - [203..]: limit_price (Option<Price>), input_qty (u64), slippage_bps (u16),
      created_at (i64), expire_at (i64), canceled_at (Option<i64>),
      filled_qty (u64), filled_output_qty (u64), last_fill_slot (u64)

    Options are variable-width, so everything after ``typ`` is read with a
    running offset.
    """
    data = bytes(data)
    _validate_discriminator(data, ORDER_DISCRIMINATOR, "Order")

    if len(data) < ORDER_MIN_SIZE:
        raise InvalidAccountDataError(
            f"Order {public_key} data too short: {len(data)} bytes "
            f"(expected at least {ORDER_MIN_SIZE})"
        )

    try:
        direction = OrderDirection(decode_u8(data, ORDER_DIRECTION_OFFSET))
        order_type = OrderType(decode_u8(data, ORDER_TYPE_OFFSET))
    except ValueError as e:
        raise InvalidAccountDataError(f"Order {public_key}: {e}")

    try:
        offset = ORDER_LIMIT_PRICE_OFFSET
        limit_price: Optional[Price] = None
        if decode_bool(data, offset):
            limit_price = Price(
                mantissa=decode_u64(data, offset + 1),
                scale=decode_u8(data, offset + 9),
            )
            offset += 10
        else:
            offset += 1

        input_quantity = decode_u64(data, offset)
        slippage_bps = decode_u16(data, offset + 8)
        created_at = decode_i64(data, offset + 10)
        expire_at = decode_i64(data, offset + 18)
        offset += 26

        canceled_at: Optional[int] = None
        if decode_bool(data, offset):
            canceled_at = decode_i64(data, offset + 1)
            offset += 9
        else:
            offset += 1

        filled_quantity = decode_u64(data, offset)
        filled_output_quantity = decode_u64(data, offset + 8)
        last_fill_slot = decode_u64(data, offset + 16)
    except (struct.error, ValueError) as e:
        raise InvalidAccountDataError(f"Order {public_key} truncated: {e}")

    return Order(
        public_key=public_key,
        owner=decode_pubkey(data, ORDER_OWNER_OFFSET),
        asset=decode_pubkey(data, ORDER_ASSET_OFFSET),
        nonce=data[ORDER_NONCE_OFFSET : ORDER_NONCE_OFFSET + NONCE_SIZE],
        bump=decode_u8(data, ORDER_BUMP_OFFSET),
        input_holder=decode_pubkey(data, ORDER_INPUT_HOLDER_OFFSET),
        payment_mint=decode_pubkey(data, ORDER_PAYMENT_MINT_OFFSET),
        price_oracle=decode_pubkey(data, ORDER_PRICE_ORACLE_OFFSET),
        direction=direction,
        order_type=order_type,
        limit_price=limit_price,
        input_quantity=input_quantity,
        slippage_bps=slippage_bps,
        created_at=_timestamp(created_at),
        expire_at=_timestamp(expire_at),
        canceled_at=_timestamp(canceled_at) if canceled_at is not None else None,
        filled_quantity=filled_quantity,
        filled_output_quantity=filled_output_quantity,
        last_fill_slot=last_fill_slot,
    )
