"""Borsh-style field codecs and token address derivation for the Ginko program.

All integers are little-endian. Borsh ``Option<T>`` is a one-byte tag
(0 = None, 1 = Some) followed by ``T`` when present.
"""

import struct
from typing import Callable, Dict, Optional, Tuple, TypeVar

from solders.pubkey import Pubkey

from ..errors import EncodingError
from .constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    PUBKEY_SIZE,
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)

T = TypeVar("T")

# name -> (struct format, min, max)
_INTEGER_FORMATS: Dict[str, Tuple[str, int, int]] = {
    "u8": ("<B", 0, 2**8 - 1),
    "u16": ("<H", 0, 2**16 - 1),
    "u32": ("<I", 0, 2**32 - 1),
    "u64": ("<Q", 0, 2**64 - 1),
    "i64": ("<q", -(2**63), 2**63 - 1),
}


def _pack(kind: str, value: int) -> bytes:
    fmt, low, high = _INTEGER_FORMATS[kind]
    if not low <= value <= high:
        raise ValueError(f"{kind} value out of range: {value} (must be {low}-{high})")
    return struct.pack(fmt, value)


def _unpack(kind: str, data: bytes, offset: int) -> int:
    return struct.unpack_from(_INTEGER_FORMATS[kind][0], data, offset)[0]


def encode_u8(value: int) -> bytes:
    """Raises ValueError outside 0..255."""
    return _pack("u8", value)


def encode_u16(value: int) -> bytes:
    return _pack("u16", value)


def encode_u32(value: int) -> bytes:
    return _pack("u32", value)


def encode_u64(value: int) -> bytes:
    """Raises ValueError outside 0..2**64-1."""
    return _pack("u64", value)


def encode_i64(value: int) -> bytes:
    return _pack("i64", value)


def encode_bool(value: bool) -> bytes:
    return bytes([1 if value else 0])


def encode_option(value: Optional[T], encoder: Callable[[T], bytes]) -> bytes:
    """Encode a borsh ``Option``; ``None`` is the single tag byte 0."""
    if value is None:
        return b"\x00"
    return b"\x01" + encoder(value)


def encode_fixed_bytes(value: bytes, size: int, field: str) -> bytes:
    """Check that ``value`` fills a ``[u8; size]`` field exactly.

    Raises:
        EncodingError: If the length does not match
    """
    value = bytes(value)
    if len(value) != size:
        raise EncodingError(f"{field} must be {size} bytes, got {len(value)}")
    return value


def encode_string_fixed(s: str, max_len: int, field: str = "string") -> bytes:
    """UTF-8 encode ``s`` into a ``[u8; max_len]`` field, null padded.

    Raises:
        EncodingError: If the encoded string does not fit
    """
    encoded = s.encode("utf-8")
    if len(encoded) > max_len:
        raise EncodingError(
            f"{field} too long: {len(encoded)} > {max_len} bytes", value=s
        )
    return encoded.ljust(max_len, b"\x00")


def decode_u8(data: bytes, offset: int = 0) -> int:
    return _unpack("u8", data, offset)


def decode_u16(data: bytes, offset: int = 0) -> int:
    return _unpack("u16", data, offset)


def decode_u64(data: bytes, offset: int = 0) -> int:
    return _unpack("u64", data, offset)


def decode_i64(data: bytes, offset: int = 0) -> int:
    return _unpack("i64", data, offset)


def decode_pubkey(data: bytes, offset: int = 0) -> Pubkey:
    """Read a 32-byte public key.

    Raises:
        ValueError: If fewer than 32 bytes remain at ``offset``
    """
    end = offset + PUBKEY_SIZE
    if end > len(data):
        raise ValueError(
            f"need {PUBKEY_SIZE} bytes for a public key at offset {offset}, "
            f"have {max(len(data) - offset, 0)}"
        )
    return Pubkey.from_bytes(bytes(data[offset:end]))


def decode_bool(data: bytes, offset: int = 0) -> bool:
    """Read a one-byte bool; any non-zero byte is true.

    Raises:
        ValueError: If ``offset`` is past the end of ``data``
    """
    if offset >= len(data):
        raise ValueError(f"no byte for bool at offset {offset}")
    return data[offset] != 0


def get_associated_token_address(
    owner: Pubkey,
    mint: Pubkey,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Pubkey:
    """Associated token account of ``owner`` for ``mint``.

    Seeds: [owner, token_program, mint] under the associated token program.
    The owner may itself be a PDA, such as an order account.
    """
    address, _ = Pubkey.find_program_address(
        [bytes(owner), bytes(token_program_id), bytes(mint)],
        ASSOCIATED_TOKEN_PROGRAM_ID,
    )
    return address


def get_associated_token_address_2022(owner: Pubkey, mint: Pubkey) -> Pubkey:
    """Associated token account under the Token-2022 program."""
    return get_associated_token_address(owner, mint, TOKEN_2022_PROGRAM_ID)
