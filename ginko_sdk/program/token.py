"""Associated token account helpers."""

import logging
from typing import List, Optional, Tuple

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from .constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from .utils import get_associated_token_address

logger = logging.getLogger(__name__)


def build_create_associated_token_account_instruction(
    payer: Pubkey,
    associated_token: Pubkey,
    owner: Pubkey,
    mint: Pubkey,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    """Build the associated token program's create instruction.

    Accounts:
    0. payer (signer, writable)
    1. associated_token (writable)
    2. owner
    3. mint
    4. system_program
    5. token_program

    Data: empty (legacy ``Create``)
    """
    accounts = [
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=associated_token, is_signer=False, is_writable=True),
        AccountMeta(pubkey=owner, is_signer=False, is_writable=False),
        AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=token_program_id, is_signer=False, is_writable=False),
    ]

    return Instruction(
        program_id=ASSOCIATED_TOKEN_PROGRAM_ID, accounts=accounts, data=b""
    )


async def get_or_create_associated_token_account_ix(
    connection: AsyncClient,
    payer: Pubkey,
    mint: Pubkey,
    owner: Pubkey,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
    commitment: Optional[Commitment] = None,
) -> Tuple[List[Instruction], Pubkey]:
    """Return the owner's associated token account for ``mint``.

    The instruction list holds a create instruction when the account is
    missing or is not owned by ``token_program_id``, and is empty otherwise.
    """
    associated_token = get_associated_token_address(owner, mint, token_program_id)

    response = await connection.get_account_info(associated_token, commitment)
    account = response.value

    if account is not None and account.owner == token_program_id:
        return [], associated_token

    logger.debug(
        "Associated token account %s for owner %s and mint %s will be created",
        associated_token,
        owner,
        mint,
    )
    ix = build_create_associated_token_account_instruction(
        payer, associated_token, owner, mint, token_program_id
    )
    return [ix], associated_token
