"""Fetch and decode Ginko program accounts."""

import logging
from typing import List, Optional

import base58
from solana.rpc.async_api import AsyncClient
from solana.rpc.types import MemcmpOpts
from solders.pubkey import Pubkey

from ..errors import AccountNotFoundError
from .accounts import deserialize_asset, deserialize_order
from .constants import (
    ASSET_DISCRIMINATOR,
    ASSET_PAUSED_OFFSET,
    ORDER_ASSET_OFFSET,
    ORDER_DISCRIMINATOR,
    ORDER_OWNER_OFFSET,
    ORDER_PAYMENT_MINT_OFFSET,
    PROGRAM_ID,
)
from .types import Asset, Order

logger = logging.getLogger(__name__)


def _memcmp(offset: int, value: bytes) -> MemcmpOpts:
    return MemcmpOpts(offset=offset, bytes=base58.b58encode(value).decode("ascii"))


class AccountData:
    """Reader for Asset and Order accounts.

    Filtered queries use getProgramAccounts with memcmp filters at the fixed
    layout offsets, so filtering happens on the node.
    """

    def __init__(
        self,
        connection: AsyncClient,
        program_id: Pubkey = PROGRAM_ID,
    ):
        self.connection = connection
        self.program_id = program_id

    async def asset(self, public_key: Pubkey) -> Asset:
        """Fetch and decode an asset account.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        asset = await self.asset_or_none(public_key)
        if asset is None:
            raise AccountNotFoundError(str(public_key), kind="Asset")
        return asset

    async def asset_or_none(self, public_key: Pubkey) -> Optional[Asset]:
        """Fetch and decode an asset account, or None if it does not exist."""
        response = await self.connection.get_account_info(public_key)
        if response.value is None:
            return None
        return deserialize_asset(response.value.data, public_key)

    async def asset_exists(self, public_key: Pubkey) -> bool:
        """Check whether an account exists at ``public_key``."""
        response = await self.connection.get_account_info(public_key)
        return response.value is not None

    async def order(self, public_key: Pubkey) -> Order:
        """Fetch and decode an order account.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        response = await self.connection.get_account_info(public_key)
        if response.value is None:
            raise AccountNotFoundError(str(public_key), kind="Order")
        return deserialize_order(response.value.data, public_key)

    async def assets(self, paused: Optional[bool] = None) -> List[Asset]:
        """Fetch all asset accounts, optionally only paused or unpaused ones."""
        filters = [_memcmp(0, ASSET_DISCRIMINATOR)]
        if paused is not None:
            filters.append(_memcmp(ASSET_PAUSED_OFFSET, b"\x01" if paused else b"\x00"))

        response = await self.connection.get_program_accounts(
            self.program_id,
            encoding="base64",
            filters=filters,
        )
        assets = [
            deserialize_asset(keyed.account.data, keyed.pubkey)
            for keyed in response.value
        ]
        logger.debug("Fetched %d asset accounts (paused=%s)", len(assets), paused)
        return assets

    async def orders(
        self,
        owner: Optional[Pubkey] = None,
        asset: Optional[Pubkey] = None,
        payment_mint: Optional[Pubkey] = None,
    ) -> List[Order]:
        """Fetch order accounts matching every given field."""
        filters = [_memcmp(0, ORDER_DISCRIMINATOR)]
        if owner is not None:
            filters.append(_memcmp(ORDER_OWNER_OFFSET, bytes(owner)))
        if asset is not None:
            filters.append(_memcmp(ORDER_ASSET_OFFSET, bytes(asset)))
        if payment_mint is not None:
            filters.append(_memcmp(ORDER_PAYMENT_MINT_OFFSET, bytes(payment_mint)))

        response = await self.connection.get_program_accounts(
            self.program_id,
            encoding="base64",
            filters=filters,
        )
        orders = [
            deserialize_order(keyed.account.data, keyed.pubkey)
            for keyed in response.value
        ]
        logger.debug("Fetched %d order accounts", len(orders))
        return orders
