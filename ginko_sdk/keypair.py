"""Keypair loading helpers."""

import json
import logging
from pathlib import Path
from typing import Union

import base58
from solders.keypair import Keypair

logger = logging.getLogger(__name__)


def keypair_from_json_file(path: Union[str, Path]) -> Keypair:
    """Load a keypair from a JSON array of secret key bytes (solana-keygen format)."""
    with open(path, "r", encoding="utf-8") as f:
        secret = json.load(f)
    return Keypair.from_bytes(bytes(secret))


def keypair_from_base58(secret: str) -> Keypair:
    """Load a keypair from a base58-encoded 64-byte secret key."""
    try:
        return Keypair.from_bytes(base58.b58decode(secret))
    except Exception as e:
        logger.error("Error constructing keypair: %s", e)
        raise
