"""Tests for the OpenFIGI client and asset resolver."""

import logging

import pytest
from aiohttp import web
from aiohttp import test_utils
from solders.pubkey import Pubkey

from ginko_sdk import EncodingError, encode_nonce
from ginko_sdk.api import (
    AssetResolver,
    FigiItem,
    HttpError,
    MappingJob,
    NotFoundError,
    OpenFIGIClient,
    RetryConfig,
    ServiceError,
)

AAPL_RECORD = {
    "figi": "BBG000B9XRY4",
    "ticker": "AAPL",
    "name": "APPLE INC",
    "exchCode": "US",
    "compositeFIGI": "BBG000B9XRY4",
    "securityType": "Common Stock",
    "marketSector": "Equity",
    "shareClassFIGI": "BBG001S5N8V8",
    "securityType2": "Common Stock",
    "securityDescription": "AAPL",
}
BRK_RECORD = {
    "figi": "BBG000DWG505",
    "ticker": "BRK/B",
    "name": "BERKSHIRE HATHAWAY INC-CL B",
    "exchCode": "US",
    "securityType2": "Common Stock",
}
MSFT_RECORD = {"figi": "BBG000BPH459", "ticker": "MSFT", "exchCode": "US"}

AAPL_ASSET = Pubkey.from_string("JDW8aLpX46z6ShRNJCvLhqUoHNW77zxJzFUc5Xhhsfzf")
AAPL_MINT = Pubkey.from_string("6QCxhPoWpjnKA3tRw2CzZWWeRLGpa46ibxso9sreQEPJ")


class FakeOpenFIGI:
    """In-process mapping endpoint answering from a table of records."""

    def __init__(self, records=None, errors=None, statuses=None):
        self.records = records or {}
        self.errors = errors or {}
        self.statuses = list(statuses or [])
        self.requests = []
        self.headers = []

    async def handle(self, request):
        self.headers.append(request.headers.copy())
        if self.statuses:
            status = self.statuses.pop(0)
            return web.Response(status=status, text="upstream unavailable")

        jobs = await request.json()
        self.requests.append(jobs)
        results = []
        for job in jobs:
            value = job["idValue"]
            if value in self.errors:
                results.append({"error": self.errors[value]})
            elif value in self.records:
                results.append({"data": self.records[value]})
            else:
                results.append({"warning": "No identifier found."})
        return web.json_response(results)

    def server(self):
        app = web.Application()
        app.router.add_post("/v3/mapping", self.handle)
        return test_utils.TestServer(app)


def default_records():
    return {
        "AAPL": [AAPL_RECORD],
        "BBG000B9XRY4": [AAPL_RECORD],
        "BRK/B": [BRK_RECORD],
        "MSFT": [MSFT_RECORD, {"figi": "BBG000BPHFS9", "ticker": "MSFT"}],
    }


class TestTypes:
    def test_mapping_job_translates_first_dot(self):
        job = MappingJob("TICKER", "BRK.B", {"exchCode": "US"})
        assert job.to_dict() == {"idType": "TICKER", "idValue": "BRK/B", "exchCode": "US"}

    def test_figi_item_restores_dot(self):
        item = FigiItem.from_dict(BRK_RECORD)
        assert item.ticker == "BRK.B"
        assert item.security_type2 == "Common Stock"

    def test_figi_item_null_ticker(self):
        item = FigiItem.from_dict({"figi": "BBG000000000", "ticker": None})
        assert item.ticker is None


class TestOpenFIGIClient:
    @pytest.mark.asyncio
    async def test_resolve_one(self):
        fake = FakeOpenFIGI(default_records())
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                item = await client.resolve_one("TICKER", "AAPL", {"exchCode": "US"})

        assert item.figi == "BBG000B9XRY4"
        assert item.name == "APPLE INC"
        assert fake.requests == [[{"idType": "TICKER", "idValue": "AAPL", "exchCode": "US"}]]

    @pytest.mark.asyncio
    async def test_multiple_matches_keep_first(self):
        fake = FakeOpenFIGI(default_records())
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                item = await client.resolve_one("TICKER", "MSFT")

        assert item.figi == "BBG000BPH459"

    @pytest.mark.asyncio
    async def test_not_found(self):
        fake = FakeOpenFIGI(default_records())
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                with pytest.raises(NotFoundError):
                    await client.resolve_one("TICKER", "ZZZZZ")

    @pytest.mark.asyncio
    async def test_item_error(self):
        fake = FakeOpenFIGI(errors={"AAPL": "Invalid idType."})
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                with pytest.raises(ServiceError, match="Invalid idType"):
                    await client.resolve_one("TICKER", "AAPL")

    @pytest.mark.asyncio
    async def test_non_success_status(self):
        fake = FakeOpenFIGI(default_records(), statuses=[500])
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                with pytest.raises(ServiceError) as exc_info:
                    await client.resolve_one("TICKER", "AAPL")

        assert exc_info.value.status == 500

    @pytest.mark.asyncio
    async def test_retry_after_server_error(self):
        fake = FakeOpenFIGI(default_records(), statuses=[503])
        retry = RetryConfig(max_retries=2, base_delay_ms=1, max_delay_ms=5)
        async with fake.server() as server:
            async with OpenFIGIClient(
                str(server.make_url("/v3/mapping")), retry_config=retry
            ) as client:
                item = await client.resolve_one("TICKER", "AAPL")

        assert item.figi == "BBG000B9XRY4"
        assert len(fake.headers) == 2

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self):
        fake = FakeOpenFIGI(default_records(), statuses=[400])
        retry = RetryConfig(max_retries=3, base_delay_ms=1, max_delay_ms=5)
        async with fake.server() as server:
            async with OpenFIGIClient(
                str(server.make_url("/v3/mapping")), retry_config=retry
            ) as client:
                with pytest.raises(ServiceError):
                    await client.resolve_one("TICKER", "AAPL")

        assert len(fake.headers) == 1

    @pytest.mark.asyncio
    async def test_connection_failure_raises_http_error(self):
        fake = FakeOpenFIGI(default_records())
        async with fake.server() as server:
            url = str(server.make_url("/v3/mapping"))

        async with OpenFIGIClient(url) as client:
            with pytest.raises(HttpError):
                await client.resolve_one("TICKER", "AAPL")

    @pytest.mark.asyncio
    async def test_jobs_are_chunked(self):
        fake = FakeOpenFIGI(default_records())
        jobs = [MappingJob("TICKER", "AAPL") for _ in range(12)]
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                items = await client.map_jobs(jobs)

        assert len(items) == 12
        assert [len(body) for body in fake.requests] == [10, 2]

    @pytest.mark.asyncio
    async def test_api_key_header_and_larger_chunks(self):
        fake = FakeOpenFIGI(default_records())
        jobs = [MappingJob("TICKER", "AAPL") for _ in range(12)]
        async with fake.server() as server:
            async with OpenFIGIClient(
                str(server.make_url("/v3/mapping")), api_key="secret"
            ) as client:
                await client.map_jobs(jobs)

        assert [len(body) for body in fake.requests] == [12]
        assert fake.headers[0]["X-OPENFIGI-APIKEY"] == "secret"

    @pytest.mark.asyncio
    async def test_resolve_batch_drops_unmatched(self, caplog):
        fake = FakeOpenFIGI(default_records())
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                with caplog.at_level(logging.WARNING, logger="ginko_sdk.api.client"):
                    items = await client.resolve_batch(
                        ["TICKER", "TICKER", "TICKER"], ["AAPL", "NOPE", "MSFT"]
                    )

        assert [item.ticker for item in items] == ["AAPL", "MSFT"]
        assert "NOPE" in caplog.text

    @pytest.mark.asyncio
    async def test_resolve_batch_length_mismatch(self):
        client = OpenFIGIClient()
        with pytest.raises(ValueError):
            await client.resolve_batch(["TICKER"], ["AAPL", "MSFT"])


class TestAssetResolver:
    @pytest.mark.asyncio
    async def test_resolve_aapl(self):
        fake = FakeOpenFIGI(default_records())
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                asset = await AssetResolver(client).resolve("AAPL")

        assert asset.figi == "BBG000B9XRY4"
        assert asset.category == "Common Stock"
        assert asset.nonce == encode_nonce("OpenFIGI:", "BBG000B9XRY4")
        assert asset.public_key == AAPL_ASSET
        assert asset.mint == AAPL_MINT

    @pytest.mark.asyncio
    async def test_cache_avoids_second_request(self):
        fake = FakeOpenFIGI(default_records())
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                resolver = AssetResolver(client)
                first = await resolver.resolve("AAPL")
                second = await resolver.resolve("AAPL")
                nonce = await resolver.derive_nonce("AAPL")

        assert first is second
        assert nonce == first.nonce
        assert len(fake.requests) == 1

    @pytest.mark.asyncio
    async def test_share_class_ticker(self):
        fake = FakeOpenFIGI(default_records())
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                asset = await AssetResolver(client).resolve("BRK.B")

        assert fake.requests[0][0]["idValue"] == "BRK/B"
        assert asset.figi_item.ticker == "BRK.B"
        assert asset.id_value == "BRK.B"

    @pytest.mark.asyncio
    async def test_resolve_many_preserves_order_and_skips(self, caplog):
        fake = FakeOpenFIGI(default_records())
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                resolver = AssetResolver(client)
                await resolver.resolve("AAPL")
                with caplog.at_level(logging.WARNING, logger="ginko_sdk.api.asset"):
                    assets = await resolver.resolve_many(["MSFT", "NOPE", "AAPL"])

        assert [asset.id_value for asset in assets] == ["MSFT", "AAPL"]
        assert [job["idValue"] for job in fake.requests[1]] == ["MSFT", "NOPE"]
        assert "NOPE" in caplog.text

    @pytest.mark.asyncio
    async def test_resolve_many_all_cached(self):
        fake = FakeOpenFIGI(default_records())
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                resolver = AssetResolver(client)
                await resolver.resolve("AAPL")
                assets = await resolver.resolve_many(["AAPL", "AAPL"])

        assert len(assets) == 2
        assert len(fake.requests) == 1

    @pytest.mark.asyncio
    async def test_nonce_too_long(self):
        fake = FakeOpenFIGI(default_records())
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                resolver = AssetResolver(client, nonce_prefix="AVeryLongNamespacePrefix:")
                with pytest.raises(EncodingError):
                    await resolver.resolve("AAPL")

    @pytest.mark.asyncio
    async def test_from_nonce(self):
        fake = FakeOpenFIGI(default_records())
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                asset = await AssetResolver(client).from_nonce(
                    encode_nonce("OpenFIGI:", "BBG000B9XRY4")
                )

        assert fake.requests == [[{"idType": "ID_BB_GLOBAL", "idValue": "BBG000B9XRY4"}]]
        assert asset.id_value == "AAPL"
        assert asset.public_key == AAPL_ASSET

    @pytest.mark.asyncio
    async def test_from_nonce_wrong_prefix(self):
        fake = FakeOpenFIGI(default_records())
        async with fake.server() as server:
            async with OpenFIGIClient(str(server.make_url("/v3/mapping"))) as client:
                with pytest.raises(EncodingError):
                    await AssetResolver(client).from_nonce(encode_nonce("ISIN:", "US0378331005"))

        assert fake.requests == []
