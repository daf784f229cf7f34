"""Asset creation instructions."""

import logging
from typing import TYPE_CHECKING, List

from solana.rpc.async_api import AsyncClient
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from .constants import DEFAULT_TOKEN_DECIMALS, PROGRAM_ID
from .instructions import build_init_asset_instruction
from .pda import get_asset_mint_pda, get_asset_pda, get_authority_token_account
from .types import InitAssetParams

if TYPE_CHECKING:
    from ..api.asset import OpenFIGIAsset

logger = logging.getLogger(__name__)


class AssetCreatorInstructionBuilder:
    """Builds instructions that create new assets."""

    def __init__(
        self,
        connection: AsyncClient,
        program_id: Pubkey = PROGRAM_ID,
    ):
        self.connection = connection
        self.program_id = program_id

    async def init_asset(self, params: InitAssetParams) -> List[Instruction]:
        """Build the init_asset instruction.

        The asset and mint addresses are derived from the nonce unless the
        caller supplies them.

        Raises:
            EncodingError: If the nonce is not 32 bytes
        """
        asset = params.public_key
        if asset is None:
            asset, _ = get_asset_pda(params.nonce, self.program_id)
        mint = params.mint
        if mint is None:
            mint, _ = get_asset_mint_pda(params.nonce, self.program_id)

        ix = build_init_asset_instruction(
            signer=params.signer,
            authority=get_authority_token_account(params.signer),
            asset=asset,
            mint=mint,
            nonce=params.nonce,
            token_decimals=params.token_decimals,
            min_order_size=params.min_order_size,
            ceiling=params.ceiling,
            quota_price_oracle=params.quota_price_oracle,
            program_id=self.program_id,
        )

        logger.debug("Initializing asset %s with mint %s", asset, mint)
        return [ix]

    async def init_asset_from_identity(
        self,
        signer: Pubkey,
        asset: "OpenFIGIAsset",
        min_order_size: int,
        ceiling: int,
        quota_price_oracle: Pubkey,
        token_decimals: int = DEFAULT_TOKEN_DECIMALS,
    ) -> List[Instruction]:
        """Build init_asset for an asset resolved through OpenFIGI."""
        return await self.init_asset(
            InitAssetParams(
                signer=signer,
                nonce=asset.nonce,
                min_order_size=min_order_size,
                ceiling=ceiling,
                quota_price_oracle=quota_price_oracle,
                token_decimals=token_decimals,
                public_key=asset.public_key,
                mint=asset.mint,
            )
        )
