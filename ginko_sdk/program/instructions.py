"""Instruction builders for the Ginko SDK.

This module provides functions to build each Ginko program instruction from
explicit accounts and arguments. Every instruction is laid out as an 8-byte
discriminator followed by little-endian borsh arguments.
"""

from typing import Optional

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from ..shared.price import Price
from .constants import (
    ALT_PROGRAM_ID,
    ASSOCIATED_TOKEN_PROGRAM_ID,
    INSTRUCTION_CANCEL_ORDER,
    INSTRUCTION_INIT_ASSET,
    INSTRUCTION_PLACE_ORDER,
    INSTRUCTION_SWITCHBOARD_PULL_FEED_INIT,
    INSTRUCTION_UPDATE_ASSET,
    NATIVE_MINT,
    NONCE_SIZE,
    PROGRAM_ID,
    RENT_SYSVAR_ID,
    SWITCHBOARD_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from .pda import (
    get_lookup_table_address,
    get_lut_signer_pda,
    get_oracle_feed_pda,
    get_switchboard_state_pda,
)
from .types import OrderDirection, OrderType
from .utils import (
    encode_bool,
    encode_fixed_bytes,
    encode_i64,
    encode_option,
    encode_string_fixed,
    encode_u16,
    encode_u32,
    encode_u64,
    encode_u8,
    get_associated_token_address,
)

FEED_HASH_SIZE = 32
FEED_NAME_SIZE = 32


def _encode_price(price: Price) -> bytes:
    return encode_u64(price.mantissa) + encode_u8(price.scale)


def _encode_pubkey(pubkey: Pubkey) -> bytes:
    return bytes(pubkey)


def build_place_order_instruction(
    owner: Pubkey,
    order: Pubkey,
    asset: Pubkey,
    input_mint: Pubkey,
    output_mint: Optional[Pubkey],
    order_input_holder: Pubkey,
    user_input_holder: Pubkey,
    price_oracle: Pubkey,
    nonce: bytes,
    direction: OrderDirection,
    order_type: OrderType,
    limit_price: Optional[Price],
    input_quantity: int,
    slippage_bps: int,
    expire_at: int,
    program_id: Pubkey = PROGRAM_ID,
) -> Instruction:
    """Build the place_order instruction.

    Accounts:
    0. owner (signer, writable)
    1. order (writable)
    2. asset
    3. input_mint
    4. order_input_holder (writable)
    5. user_input_holder (writable)
    6. price_oracle
    7. token_program
    8. associated_token_program
    9. system_program
    10. rent
    11. output_mint (optional; the program id stands in when absent)

    Data: [discriminator (8), nonce (32), direction (u8), typ (u8),
           limit_price (Option<Price>), input_qty (u64), slippage_bps (u16),
           expire_at (i64)]
    """
    data = bytearray(INSTRUCTION_PLACE_ORDER)
    data.extend(encode_fixed_bytes(nonce, NONCE_SIZE, "order nonce"))
    data.extend(encode_u8(OrderDirection(direction).value))
    data.extend(encode_u8(OrderType(order_type).value))
    data.extend(encode_option(limit_price, _encode_price))
    data.extend(encode_u64(input_quantity))
    data.extend(encode_u16(slippage_bps))
    data.extend(encode_i64(expire_at))

    accounts = [
        AccountMeta(pubkey=owner, is_signer=True, is_writable=True),
        AccountMeta(pubkey=order, is_signer=False, is_writable=True),
        AccountMeta(pubkey=asset, is_signer=False, is_writable=False),
        AccountMeta(pubkey=input_mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=order_input_holder, is_signer=False, is_writable=True),
        AccountMeta(pubkey=user_input_holder, is_signer=False, is_writable=True),
        AccountMeta(pubkey=price_oracle, is_signer=False, is_writable=False),
        AccountMeta(pubkey=TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(
            pubkey=ASSOCIATED_TOKEN_PROGRAM_ID, is_signer=False, is_writable=False
        ),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=RENT_SYSVAR_ID, is_signer=False, is_writable=False),
        AccountMeta(
            pubkey=output_mint if output_mint is not None else program_id,
            is_signer=False,
            is_writable=False,
        ),
    ]

    return Instruction(program_id=program_id, accounts=accounts, data=bytes(data))


def build_cancel_order_instruction(
    owner: Pubkey,
    order: Pubkey,
    order_input_holder: Pubkey,
    refund_receiver: Pubkey,
    program_id: Pubkey = PROGRAM_ID,
) -> Instruction:
    """Build the cancel_order instruction.

    Accounts:
    0. owner (signer)
    1. order (writable)
    2. order_input_holder (writable)
    3. refund_receiver (writable)
    4. token_program

    Data: [discriminator (8)]
    """
    accounts = [
        AccountMeta(pubkey=owner, is_signer=True, is_writable=False),
        AccountMeta(pubkey=order, is_signer=False, is_writable=True),
        AccountMeta(pubkey=order_input_holder, is_signer=False, is_writable=True),
        AccountMeta(pubkey=refund_receiver, is_signer=False, is_writable=True),
        AccountMeta(pubkey=TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
    ]

    return Instruction(
        program_id=program_id, accounts=accounts, data=INSTRUCTION_CANCEL_ORDER
    )


def build_init_asset_instruction(
    signer: Pubkey,
    authority: Pubkey,
    asset: Pubkey,
    mint: Pubkey,
    nonce: bytes,
    token_decimals: int,
    min_order_size: int,
    ceiling: int,
    quota_price_oracle: Pubkey,
    program_id: Pubkey = PROGRAM_ID,
) -> Instruction:
    """Build the init_asset instruction.

    Accounts:
    0. signer (signer, writable)
    1. authority (signer's AUTH_MINT token account)
    2. asset (writable)
    3. mint (writable)
    4. system_program
    5. token_program
    6. associated_token_program
    7. rent

    Data: [discriminator (8), nonce (32), token_decimals (u8),
           min_order_size (u64), ceiling (u64), quota_price_oracle (32)]
    """
    data = bytearray(INSTRUCTION_INIT_ASSET)
    data.extend(encode_fixed_bytes(nonce, NONCE_SIZE, "asset nonce"))
    data.extend(encode_u8(token_decimals))
    data.extend(encode_u64(min_order_size))
    data.extend(encode_u64(ceiling))
    data.extend(bytes(quota_price_oracle))

    accounts = [
        AccountMeta(pubkey=signer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=authority, is_signer=False, is_writable=False),
        AccountMeta(pubkey=asset, is_signer=False, is_writable=True),
        AccountMeta(pubkey=mint, is_signer=False, is_writable=True),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(
            pubkey=ASSOCIATED_TOKEN_PROGRAM_ID, is_signer=False, is_writable=False
        ),
        AccountMeta(pubkey=RENT_SYSVAR_ID, is_signer=False, is_writable=False),
    ]

    return Instruction(program_id=program_id, accounts=accounts, data=bytes(data))


def build_update_asset_instruction(
    signer: Pubkey,
    authority: Pubkey,
    asset: Pubkey,
    min_order_size: Optional[int] = None,
    ceiling: Optional[int] = None,
    paused: Optional[bool] = None,
    quota_price_oracle: Optional[Pubkey] = None,
    program_id: Pubkey = PROGRAM_ID,
) -> Instruction:
    """Build the update_asset instruction.

    Every field is optional. ``None`` is sent as ``Option::None`` and leaves
    the on-chain value untouched; it is never sent as zero or false.

    Accounts:
    0. signer (signer, writable)
    1. authority (signer's AUTH_MINT token account)
    2. asset (writable)

    Data: [discriminator (8), min_order_size (Option<u64>),
           ceiling (Option<u64>), paused (Option<bool>),
           quota_price_oracle (Option<Pubkey>)]
    """
    data = bytearray(INSTRUCTION_UPDATE_ASSET)
    data.extend(encode_option(min_order_size, encode_u64))
    data.extend(encode_option(ceiling, encode_u64))
    data.extend(encode_option(paused, encode_bool))
    data.extend(encode_option(quota_price_oracle, _encode_pubkey))

    accounts = [
        AccountMeta(pubkey=signer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=authority, is_signer=False, is_writable=False),
        AccountMeta(pubkey=asset, is_signer=False, is_writable=True),
    ]

    return Instruction(program_id=program_id, accounts=accounts, data=bytes(data))


def build_switchboard_pull_feed_init_instruction(
    payer: Pubkey,
    feed_authority: Pubkey,
    ginko_authority: Pubkey,
    queue: Pubkey,
    asset_nonce: bytes,
    payment_mint: Pubkey,
    recent_slot: int,
    feed_hash: bytes,
    name: str,
    max_variance: int,
    min_responses: int,
    min_sample_size: int,
    max_staleness: int,
    permit_write_by_authority: Optional[bool] = None,
    oracle_program_id: Pubkey = SWITCHBOARD_PROGRAM_ID,
    program_id: Pubkey = PROGRAM_ID,
) -> Instruction:
    """Build the switchboard_pull_feed_init instruction.

    The pull feed, its lookup-table signer, the lookup table for
    ``recent_slot``, the oracle state account and the wrapped-SOL reward
    escrow are all derived here.

    Accounts:
    0. pull_feed (writable)
    1. queue
    2. authority (feed authority)
    3. payer (signer, writable)
    4. system_program
    5. program_state
    6. reward_escrow (writable)
    7. token_program
    8. associated_token_program
    9. wrapped_sol_mint
    10. lut_signer
    11. lut (writable)
    12. address_lookup_table_program
    13. ginko_authority
    14. switchboard_program
    15. payment_mint

    Data: [discriminator (8), asset_nonce (32), feed_hash (32),
           max_variance (u64), min_responses (u32), name (32),
           recent_slot (u64), ipfs_hash (32, unused), min_sample_size (u8),
           max_staleness (u32), permit_write_by_authority (Option<bool>)]
    """
    pull_feed, _ = get_oracle_feed_pda(asset_nonce, payment_mint, program_id)
    lut_signer, _ = get_lut_signer_pda(pull_feed, oracle_program_id)
    lut, _ = get_lookup_table_address(lut_signer, recent_slot)
    program_state, _ = get_switchboard_state_pda(oracle_program_id)
    reward_escrow = get_associated_token_address(pull_feed, NATIVE_MINT)

    data = bytearray(INSTRUCTION_SWITCHBOARD_PULL_FEED_INIT)
    data.extend(encode_fixed_bytes(asset_nonce, NONCE_SIZE, "asset nonce"))
    data.extend(encode_fixed_bytes(feed_hash, FEED_HASH_SIZE, "feed hash"))
    data.extend(encode_u64(max_variance))
    data.extend(encode_u32(min_responses))
    data.extend(encode_string_fixed(name, FEED_NAME_SIZE, "feed name"))
    data.extend(encode_u64(recent_slot))
    data.extend(bytes(32))
    data.extend(encode_u8(min_sample_size))
    data.extend(encode_u32(max_staleness))
    data.extend(encode_option(permit_write_by_authority, encode_bool))

    accounts = [
        AccountMeta(pubkey=pull_feed, is_signer=False, is_writable=True),
        AccountMeta(pubkey=queue, is_signer=False, is_writable=False),
        AccountMeta(pubkey=feed_authority, is_signer=False, is_writable=False),
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=program_state, is_signer=False, is_writable=False),
        AccountMeta(pubkey=reward_escrow, is_signer=False, is_writable=True),
        AccountMeta(pubkey=TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(
            pubkey=ASSOCIATED_TOKEN_PROGRAM_ID, is_signer=False, is_writable=False
        ),
        AccountMeta(pubkey=NATIVE_MINT, is_signer=False, is_writable=False),
        AccountMeta(pubkey=lut_signer, is_signer=False, is_writable=False),
        AccountMeta(pubkey=lut, is_signer=False, is_writable=True),
        AccountMeta(pubkey=ALT_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=ginko_authority, is_signer=False, is_writable=False),
        AccountMeta(pubkey=oracle_program_id, is_signer=False, is_writable=False),
        AccountMeta(pubkey=payment_mint, is_signer=False, is_writable=False),
    ]

    return Instruction(program_id=program_id, accounts=accounts, data=bytes(data))
