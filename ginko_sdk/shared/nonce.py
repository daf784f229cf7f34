"""Nonce encoding for asset and oracle feed identities.

A nonce is the 32-byte identity the Ginko program uses as a PDA seed. It holds
a namespaced identifier such as ``"OpenFIGI:BBG000B9XRY4"`` right-padded with
spaces.
"""

from ..errors import EncodingError

NONCE_SIZE = 32
NONCE_FILLER = b" "
DEFAULT_NONCE_PREFIX = "OpenFIGI:"


def encode_nonce(prefix: str, identifier: str) -> bytes:
    """Encode ``prefix + identifier`` into a 32-byte space-padded nonce.

    Raises:
        EncodingError: If the encoded string is longer than 32 bytes
    """
    raw = f"{prefix}{identifier}".encode("utf-8")
    if len(raw) > NONCE_SIZE:
        raise EncodingError(
            f"Nonce too long for {identifier!r}: {len(raw)} bytes "
            f"(maximum {NONCE_SIZE} including prefix {prefix!r})",
            value=identifier,
        )
    return raw + NONCE_FILLER * (NONCE_SIZE - len(raw))


def decode_nonce(nonce: bytes, prefix: str) -> str:
    """Decode a nonce and return the identifier that follows ``prefix``.

    Raises:
        EncodingError: If the nonce is not 32 bytes, is not UTF-8, or does
            not start with ``prefix``
    """
    nonce = bytes(nonce)
    if len(nonce) != NONCE_SIZE:
        raise EncodingError(
            f"Invalid nonce length: {len(nonce)} (expected {NONCE_SIZE})"
        )

    try:
        text = nonce.rstrip(NONCE_FILLER).decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"Nonce is not valid UTF-8: {nonce!r} ({e})")

    if not text.startswith(prefix):
        raise EncodingError(
            f"Unsupported nonce {text!r}: expected prefix {prefix!r}",
            value=text,
        )
    return text[len(prefix):]
