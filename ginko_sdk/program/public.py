"""Order placement and cancellation for regular users."""

import logging
import secrets
import time
from typing import List, Tuple

from solana.rpc.async_api import AsyncClient
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from ..errors import ValidationError
from .account_data import AccountData
from .constants import MAX_SLIPPAGE_BPS, NONCE_SIZE, PROGRAM_ID
from .instructions import build_cancel_order_instruction, build_place_order_instruction
from .pda import get_order_input_holder, get_order_pda
from .token import get_or_create_associated_token_account_ix
from .types import Order, OrderDirection, OrderType, PlaceOrderParams
from .utils import get_associated_token_address

logger = logging.getLogger(__name__)


def validate_place_order_params(params: PlaceOrderParams) -> None:
    """Check order parameters against the program's rules.

    Raises:
        ValidationError: If any parameter is inconsistent
    """
    if params.trade_mint == params.asset.mint:
        raise ValidationError("trade_mint", "cannot be the same as the asset mint")

    if params.order_type == OrderType.LIMIT:
        if params.limit_price is None:
            raise ValidationError("limit_price", "limit orders require a limit price")
        if params.slippage_bps != 0:
            raise ValidationError("slippage_bps", "limit orders must have zero slippage")
    elif params.order_type == OrderType.MARKET:
        if params.limit_price is not None:
            raise ValidationError(
                "limit_price", "market orders must not have a limit price"
            )
        if params.slippage_bps == 0:
            raise ValidationError(
                "slippage_bps", "market orders must have non-zero slippage"
            )
    else:
        raise ValidationError("order_type", f"unknown order type {params.order_type!r}")

    if params.quantity <= 0:
        raise ValidationError("quantity", "must be positive")
    if not 0 <= params.slippage_bps <= MAX_SLIPPAGE_BPS:
        raise ValidationError(
            "slippage_bps", f"must be between 0 and {MAX_SLIPPAGE_BPS}"
        )
    if params.expire_time <= 0:
        raise ValidationError("expire_time", "must be positive")


class PublicInstructionBuilder:
    """Builds order placement and cancellation instructions."""

    def __init__(
        self,
        connection: AsyncClient,
        program_id: Pubkey = PROGRAM_ID,
    ):
        """Initialize the builder.

        Args:
            connection: Solana RPC async client
            program_id: Ginko program ID
        """
        self.connection = connection
        self.program_id = program_id
        self.accounts = AccountData(connection, program_id)

    async def place_order(self, params: PlaceOrderParams) -> List[Instruction]:
        """Build the instructions to place an order.

        ``trade_mint`` is spent on a buy and received on a sell. Selling
        prepends an instruction creating the owner's trade-mint token account
        when it does not exist yet. Each call uses a fresh random order
        nonce, so identical parameters still produce distinct orders.

        Returns:
            Optional account creation instructions followed by place_order

        Raises:
            ValidationError: Before any RPC call, if params are inconsistent
        """
        instructions, _ = await self.place_order_with_address(params)
        return instructions

    async def place_order_with_address(
        self, params: PlaceOrderParams
    ) -> Tuple[List[Instruction], Pubkey]:
        """Like :meth:`place_order`, also returning the new order's address."""
        validate_place_order_params(params)

        create_ixs: List[Instruction] = []
        if params.direction == OrderDirection.SELL:
            create_ixs, _ = await get_or_create_associated_token_account_ix(
                self.connection, params.owner, params.trade_mint, params.owner
            )

        nonce = secrets.token_bytes(NONCE_SIZE)
        expire_at = int(time.time()) + params.expire_time
        order, _ = get_order_pda(params.owner, nonce, self.program_id)

        asset_exists = await self.accounts.asset_exists(params.asset.public_key)

        if params.direction == OrderDirection.BUY:
            input_mint = params.trade_mint
            output_mint = params.asset.mint if asset_exists else None
        else:
            input_mint = params.asset.mint
            output_mint = params.trade_mint

        ix = build_place_order_instruction(
            owner=params.owner,
            order=order,
            asset=params.asset.public_key,
            input_mint=input_mint,
            output_mint=output_mint,
            order_input_holder=get_order_input_holder(order, input_mint),
            user_input_holder=get_associated_token_address(params.owner, input_mint),
            price_oracle=params.price_oracle,
            nonce=nonce,
            direction=params.direction,
            order_type=params.order_type,
            limit_price=params.limit_price,
            input_quantity=params.quantity,
            slippage_bps=params.slippage_bps,
            expire_at=expire_at,
            program_id=self.program_id,
        )

        logger.debug(
            "Placing %s %s order %s on asset %s (asset exists: %s)",
            params.order_type.name.lower(),
            params.direction.name.lower(),
            order,
            params.asset.public_key,
            asset_exists,
        )
        return [*create_ixs, ix], order

    async def cancel_order(self, order: Order) -> List[Instruction]:
        """Build the instructions to cancel an order.

        Sell orders escrow the asset, so the asset account is read to find
        its mint. Buy orders escrow the payment mint recorded on the order.

        Returns:
            Optional refund account creation instructions followed by
            cancel_order
        """
        input_mint = order.payment_mint
        if order.direction == OrderDirection.SELL:
            asset = await self.accounts.asset(order.asset)
            input_mint = asset.mint

        order_input_holder = get_order_input_holder(order.public_key, input_mint)

        create_ixs, refund_receiver = await get_or_create_associated_token_account_ix(
            self.connection, order.owner, input_mint, order.owner
        )

        ix = build_cancel_order_instruction(
            owner=order.owner,
            order=order.public_key,
            order_input_holder=order_input_holder,
            refund_receiver=refund_receiver,
            program_id=self.program_id,
        )

        logger.debug("Cancelling order %s (refund to %s)", order.public_key, refund_receiver)
        return [*create_ixs, ix]
