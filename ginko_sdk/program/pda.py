"""PDA (Program Derived Address) derivation functions for the Ginko SDK."""

from typing import Tuple

from solders.pubkey import Pubkey

from ..errors import EncodingError
from .constants import (
    ALT_PROGRAM_ID,
    ASSET_MINT_SEED,
    ASSET_SEED,
    AUTH_MINT,
    LUT_SIGNER_SEED,
    NONCE_SIZE,
    ORDER_SEED,
    PROGRAM_ID,
    SWITCHBOARD_PROGRAM_ID,
    SWITCHBOARD_PULL_FEED_SEED,
    SWITCHBOARD_STATE_SEED,
    TOKEN_PROGRAM_ID,
)
from .utils import (
    encode_u64,
    get_associated_token_address,
    get_associated_token_address_2022,
)


def _check_nonce(nonce: bytes, name: str = "nonce") -> bytes:
    nonce = bytes(nonce)
    if len(nonce) != NONCE_SIZE:
        raise EncodingError(
            f"Invalid {name} length: {len(nonce)} (expected {NONCE_SIZE})"
        )
    return nonce


def get_asset_pda(
    nonce: bytes,
    program_id: Pubkey = PROGRAM_ID,
) -> Tuple[Pubkey, int]:
    """Derive the asset PDA for an asset nonce.

    Seeds: ["asset", nonce]
    """
    return Pubkey.find_program_address(
        [ASSET_SEED, _check_nonce(nonce)],
        program_id,
    )


def get_asset_mint_pda(
    nonce: bytes,
    program_id: Pubkey = PROGRAM_ID,
) -> Tuple[Pubkey, int]:
    """Derive the asset token mint PDA for an asset nonce.

    Seeds: ["asset_mint", nonce]
    """
    return Pubkey.find_program_address(
        [ASSET_MINT_SEED, _check_nonce(nonce)],
        program_id,
    )


def get_order_pda(
    owner: Pubkey,
    order_nonce: bytes,
    program_id: Pubkey = PROGRAM_ID,
) -> Tuple[Pubkey, int]:
    """Derive the order PDA.

    Seeds: ["order", owner, order_nonce]
    """
    return Pubkey.find_program_address(
        [ORDER_SEED, bytes(owner), _check_nonce(order_nonce, "order nonce")],
        program_id,
    )


def get_order_input_holder(
    order: Pubkey,
    input_mint: Pubkey,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Pubkey:
    """Derive the escrow account holding an order's input tokens.

    This is the associated token account of the (off-curve) order PDA.
    """
    return get_associated_token_address(order, input_mint, token_program_id)


def get_oracle_feed_pda(
    asset_nonce: bytes,
    payment_mint: Pubkey,
    program_id: Pubkey = PROGRAM_ID,
) -> Tuple[Pubkey, int]:
    """Derive the Switchboard pull feed PDA for an asset priced in a payment mint.

    Seeds: ["switchboard_pull_feed", asset_nonce, payment_mint]
    """
    return Pubkey.find_program_address(
        [
            SWITCHBOARD_PULL_FEED_SEED,
            _check_nonce(asset_nonce, "asset nonce"),
            bytes(payment_mint),
        ],
        program_id,
    )


def get_authority_token_account(signer: Pubkey) -> Pubkey:
    """Derive the Token-2022 account proving the signer holds ``AUTH_MINT``."""
    return get_associated_token_address_2022(signer, AUTH_MINT)


def get_lookup_table_address(
    authority: Pubkey,
    recent_slot: int,
) -> Tuple[Pubkey, int]:
    """Derive an Address Lookup Table address.

    Seeds: [authority, recent_slot (u64 LE)]
    Uses the ALT_PROGRAM_ID as the program.
    """
    return Pubkey.find_program_address(
        [bytes(authority), encode_u64(recent_slot)],
        ALT_PROGRAM_ID,
    )


def get_lut_signer_pda(
    feed: Pubkey,
    oracle_program_id: Pubkey = SWITCHBOARD_PROGRAM_ID,
) -> Tuple[Pubkey, int]:
    """Derive the signer PDA that owns a pull feed's lookup table.

    Seeds: ["LutSigner", feed]
    """
    return Pubkey.find_program_address(
        [LUT_SIGNER_SEED, bytes(feed)],
        oracle_program_id,
    )


def get_switchboard_state_pda(
    oracle_program_id: Pubkey = SWITCHBOARD_PROGRAM_ID,
) -> Tuple[Pubkey, int]:
    """Derive the oracle program's global state account.

    Seeds: ["STATE"]
    """
    return Pubkey.find_program_address([SWITCHBOARD_STATE_SEED], oracle_program_id)
