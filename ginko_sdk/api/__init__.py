"""Identifier resolution through the OpenFIGI mapping API.

Example:
    ```python
    from ginko_sdk.api import AssetResolver, OpenFIGIClient

    async with OpenFIGIClient() as client:
        resolver = AssetResolver(client)
        asset = await resolver.resolve("AAPL")
        print(asset.figi, asset.public_key)
    ```
"""

from .asset import (
    DEFAULT_FIGI_PROPS,
    ID_BB_GLOBAL,
    TICKER,
    AssetResolver,
    OpenFIGIAsset,
)
from .client import DEFAULT_API_URL, OpenFIGIClient
from .error import (
    ApiError,
    DeserializeError,
    HttpError,
    NotFoundError,
    ServiceError,
)
from .retry import RetryConfig
from .types import FigiItem, MappingJob

__all__ = [
    # Client
    "OpenFIGIClient",
    "DEFAULT_API_URL",
    "RetryConfig",
    # Identity
    "AssetResolver",
    "OpenFIGIAsset",
    "DEFAULT_FIGI_PROPS",
    "TICKER",
    "ID_BB_GLOBAL",
    # Types
    "FigiItem",
    "MappingJob",
    # Errors
    "ApiError",
    "HttpError",
    "ServiceError",
    "NotFoundError",
    "DeserializeError",
]
