"""Tests for the account reader."""

import struct

import base58
import pytest
from solders.pubkey import Pubkey

from ginko_sdk import AccountNotFoundError
from ginko_sdk.program import (
    ASSET_DISCRIMINATOR,
    ORDER_DISCRIMINATOR,
    PROGRAM_ID,
    AccountData,
)
from ginko_sdk.program.constants import (
    ASSET_PAUSED_OFFSET,
    ORDER_ASSET_OFFSET,
    ORDER_OWNER_OFFSET,
    ORDER_PAYMENT_MINT_OFFSET,
)


class MockResponse:
    def __init__(self, value):
        self.value = value


class MockAccount:
    def __init__(self, data):
        self.data = data
        self.owner = PROGRAM_ID


class MockKeyedAccount:
    def __init__(self, pubkey, data):
        self.pubkey = pubkey
        self.account = MockAccount(data)


class MockConnection:
    """Mock Solana connection recording program account queries."""

    def __init__(self, accounts=None, program_accounts=None):
        self.accounts = dict(accounts or {})
        self.program_accounts = list(program_accounts or [])
        self.queries = []

    async def get_account_info(self, pubkey, commitment=None):
        return MockResponse(self.accounts.get(pubkey))

    async def get_program_accounts(self, program_id, encoding=None, filters=None):
        self.queries.append((program_id, encoding, filters))
        return MockResponse(self.program_accounts)


def asset_data(paused=False):
    return (
        ASSET_DISCRIMINATOR
        + b"A" * 32
        + bytes([255])
        + bytes(Pubkey.new_unique())
        + struct.pack("<QQ", 10, 1_000)
        + bytes(Pubkey.new_unique())
        + bytes([1 if paused else 0])
    )


def order_data(owner, asset, payment_mint):
    return (
        ORDER_DISCRIMINATOR
        + bytes(owner)
        + bytes(asset)
        + b"o" * 32
        + bytes([255])
        + bytes(Pubkey.new_unique())
        + bytes(payment_mint)
        + bytes(Pubkey.new_unique())
        + bytes([0, 0])
        + b"\x00"
        + struct.pack("<QHqq", 5, 100, 1_700_000_000, 1_700_010_800)
        + b"\x00"
        + struct.pack("<QQQ", 0, 0, 0)
    )


def decoded_filters(filters):
    return [(f.offset, base58.b58decode(f.bytes)) for f in filters]


class TestSingleAccounts:
    @pytest.mark.asyncio
    async def test_asset(self):
        key = Pubkey.new_unique()
        reader = AccountData(MockConnection({key: MockAccount(asset_data())}))

        asset = await reader.asset(key)

        assert asset.public_key == key
        assert asset.min_order_size == 10
        assert await reader.asset_exists(key)

    @pytest.mark.asyncio
    async def test_missing_asset(self):
        reader = AccountData(MockConnection())
        key = Pubkey.new_unique()

        assert await reader.asset_or_none(key) is None
        assert not await reader.asset_exists(key)
        with pytest.raises(AccountNotFoundError) as exc_info:
            await reader.asset(key)
        assert exc_info.value.kind == "Asset"

    @pytest.mark.asyncio
    async def test_order(self):
        key = Pubkey.new_unique()
        owner = Pubkey.new_unique()
        data = order_data(owner, Pubkey.new_unique(), Pubkey.new_unique())
        reader = AccountData(MockConnection({key: MockAccount(data)}))

        order = await reader.order(key)

        assert order.public_key == key
        assert order.owner == owner
        assert order.input_quantity == 5

    @pytest.mark.asyncio
    async def test_missing_order(self):
        reader = AccountData(MockConnection())
        with pytest.raises(AccountNotFoundError) as exc_info:
            await reader.order(Pubkey.new_unique())
        assert exc_info.value.kind == "Order"


class TestFilteredQueries:
    @pytest.mark.asyncio
    async def test_all_assets(self):
        keys = [Pubkey.new_unique(), Pubkey.new_unique()]
        connection = MockConnection(
            program_accounts=[MockKeyedAccount(key, asset_data()) for key in keys]
        )

        assets = await AccountData(connection).assets()

        assert [asset.public_key for asset in assets] == keys
        program_id, encoding, filters = connection.queries[0]
        assert program_id == PROGRAM_ID
        assert encoding == "base64"
        assert decoded_filters(filters) == [(0, ASSET_DISCRIMINATOR)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("paused,flag", [(True, b"\x01"), (False, b"\x00")])
    async def test_assets_by_paused(self, paused, flag):
        connection = MockConnection()
        await AccountData(connection).assets(paused=paused)

        filters = decoded_filters(connection.queries[0][2])
        assert filters == [(0, ASSET_DISCRIMINATOR), (ASSET_PAUSED_OFFSET, flag)]

    @pytest.mark.asyncio
    async def test_orders_with_all_filters(self):
        owner = Pubkey.new_unique()
        asset = Pubkey.new_unique()
        payment_mint = Pubkey.new_unique()
        order_key = Pubkey.new_unique()
        connection = MockConnection(
            program_accounts=[
                MockKeyedAccount(order_key, order_data(owner, asset, payment_mint))
            ]
        )

        orders = await AccountData(connection).orders(
            owner=owner, asset=asset, payment_mint=payment_mint
        )

        assert [order.public_key for order in orders] == [order_key]
        assert decoded_filters(connection.queries[0][2]) == [
            (0, ORDER_DISCRIMINATOR),
            (ORDER_OWNER_OFFSET, bytes(owner)),
            (ORDER_ASSET_OFFSET, bytes(asset)),
            (ORDER_PAYMENT_MINT_OFFSET, bytes(payment_mint)),
        ]

    @pytest.mark.asyncio
    async def test_orders_by_owner_only(self):
        owner = Pubkey.new_unique()
        connection = MockConnection()

        assert await AccountData(connection).orders(owner=owner) == []
        assert decoded_filters(connection.queries[0][2]) == [
            (0, ORDER_DISCRIMINATOR),
            (ORDER_OWNER_OFFSET, bytes(owner)),
        ]

    @pytest.mark.asyncio
    async def test_custom_program_id(self):
        custom = Pubkey.new_unique()
        connection = MockConnection()
        await AccountData(connection, custom).orders()
        assert connection.queries[0][0] == custom
