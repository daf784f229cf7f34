"""Tests for the nonce codec."""

import pytest

from ginko_sdk import EncodingError
from ginko_sdk.shared import (
    DEFAULT_NONCE_PREFIX,
    NONCE_SIZE,
    decode_nonce,
    encode_nonce,
)


class TestEncodeNonce:
    def test_pads_with_spaces(self):
        nonce = encode_nonce("OpenFIGI:", "BBG000B9XRY4")
        assert len(nonce) == NONCE_SIZE
        assert nonce == b"OpenFIGI:BBG000B9XRY4" + b" " * 11

    def test_exactly_32_bytes(self):
        identifier = "X" * (NONCE_SIZE - len(DEFAULT_NONCE_PREFIX))
        nonce = encode_nonce(DEFAULT_NONCE_PREFIX, identifier)
        assert nonce == (DEFAULT_NONCE_PREFIX + identifier).encode()

    def test_too_long_raises(self):
        identifier = "X" * (NONCE_SIZE - len(DEFAULT_NONCE_PREFIX) + 1)
        with pytest.raises(EncodingError) as exc_info:
            encode_nonce(DEFAULT_NONCE_PREFIX, identifier)
        assert exc_info.value.value == identifier
        assert "33 bytes" in str(exc_info.value)

    def test_multibyte_characters_count_as_bytes(self):
        # 16 two-byte characters: 32 bytes without a prefix, 33 with one
        identifier = "é" * 16
        assert len(encode_nonce("", identifier)) == NONCE_SIZE
        with pytest.raises(EncodingError):
            encode_nonce("x", identifier)


class TestDecodeNonce:
    @pytest.mark.parametrize(
        "identifier",
        ["BBG000B9XRY4", "A", "", "BRK.B", "X" * 23],
    )
    def test_round_trip(self, identifier):
        nonce = encode_nonce(DEFAULT_NONCE_PREFIX, identifier)
        assert decode_nonce(nonce, DEFAULT_NONCE_PREFIX) == identifier
        assert encode_nonce(DEFAULT_NONCE_PREFIX, decode_nonce(nonce, DEFAULT_NONCE_PREFIX)) == nonce

    def test_wrong_prefix(self):
        nonce = encode_nonce("Other:", "BBG000B9XRY4")
        with pytest.raises(EncodingError, match="expected prefix"):
            decode_nonce(nonce, DEFAULT_NONCE_PREFIX)

    def test_wrong_length(self):
        with pytest.raises(EncodingError, match="Invalid nonce length"):
            decode_nonce(b"OpenFIGI:BBG000B9XRY4", DEFAULT_NONCE_PREFIX)

    def test_invalid_utf8(self):
        nonce = b"OpenFIGI:\xff" + b" " * 22
        with pytest.raises(EncodingError, match="UTF-8"):
            decode_nonce(nonce, DEFAULT_NONCE_PREFIX)

    def test_accepts_list_of_ints(self):
        nonce = list(encode_nonce(DEFAULT_NONCE_PREFIX, "BBG000B9XRY4"))
        assert decode_nonce(nonce, DEFAULT_NONCE_PREFIX) == "BBG000B9XRY4"
