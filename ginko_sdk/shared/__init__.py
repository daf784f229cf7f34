"""Codecs shared by the program, API and oracle modules."""

from .nonce import (
    DEFAULT_NONCE_PREFIX,
    NONCE_FILLER,
    NONCE_SIZE,
    decode_nonce,
    encode_nonce,
)
from .price import DEFAULT_PRICE_DECIMALS, Price, format_price, parse_price

__all__ = [
    "DEFAULT_NONCE_PREFIX",
    "NONCE_FILLER",
    "NONCE_SIZE",
    "decode_nonce",
    "encode_nonce",
    "DEFAULT_PRICE_DECIMALS",
    "Price",
    "format_price",
    "parse_price",
]
