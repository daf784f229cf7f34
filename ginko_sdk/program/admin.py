"""Asset administration instructions."""

from typing import List

from solana.rpc.async_api import AsyncClient
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from .constants import PROGRAM_ID
from .instructions import build_update_asset_instruction
from .pda import get_authority_token_account
from .types import UpdateAssetParams


class AdminInstructionBuilder:
    """Builds instructions reserved for holders of the authority token."""

    def __init__(
        self,
        connection: AsyncClient,
        program_id: Pubkey = PROGRAM_ID,
    ):
        self.connection = connection
        self.program_id = program_id

    async def update_asset(self, params: UpdateAssetParams) -> List[Instruction]:
        """Build the update_asset instruction.

        Fields left as ``None`` are sent as "no change".
        """
        ix = build_update_asset_instruction(
            signer=params.signer,
            authority=get_authority_token_account(params.signer),
            asset=params.asset,
            min_order_size=params.min_order_size,
            ceiling=params.ceiling,
            paused=params.paused,
            quota_price_oracle=params.quota_price_oracle,
            program_id=self.program_id,
        )
        return [ix]
