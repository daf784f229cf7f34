"""On-chain asset identities derived from OpenFIGI records."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from solders.pubkey import Pubkey

from ..program.constants import PROGRAM_ID
from ..program.pda import get_asset_mint_pda, get_asset_pda
from ..shared.nonce import DEFAULT_NONCE_PREFIX, decode_nonce, encode_nonce
from .client import OpenFIGIClient
from .error import NotFoundError
from .types import FigiItem, MappingJob

logger = logging.getLogger(__name__)

DEFAULT_FIGI_PROPS: Dict[str, Any] = {"exchCode": "US"}
TICKER = "TICKER"
ID_BB_GLOBAL = "ID_BB_GLOBAL"


@dataclass(frozen=True)
class OpenFIGIAsset:
    """A resolved asset: the FIGI record, its nonce and derived addresses.

    The nonce is ``<prefix><figi>`` padded to 32 bytes; the asset and mint
    addresses are program-derived from it.
    """

    id_value: str
    id_type: str
    figi_item: FigiItem
    nonce: bytes
    public_key: Pubkey
    mint: Pubkey

    @property
    def figi(self) -> str:
        return self.figi_item.figi

    @property
    def category(self) -> str:
        """The OpenFIGI ``securityType2``, e.g. ``Common Stock``."""
        return self.figi_item.security_type2 or ""

    @classmethod
    def from_figi_item(
        cls,
        item: FigiItem,
        id_value: str,
        id_type: str = TICKER,
        nonce_prefix: str = DEFAULT_NONCE_PREFIX,
        program_id: Pubkey = PROGRAM_ID,
    ) -> "OpenFIGIAsset":
        """Build the identity for a FIGI record.

        Raises:
            EncodingError: If prefix and FIGI do not fit in 32 bytes
        """
        nonce = encode_nonce(nonce_prefix, item.figi)
        public_key, _ = get_asset_pda(nonce, program_id)
        mint, _ = get_asset_mint_pda(nonce, program_id)
        return cls(
            id_value=id_value,
            id_type=id_type,
            figi_item=item,
            nonce=nonce,
            public_key=public_key,
            mint=mint,
        )


class AssetResolver:
    """Resolves identifiers to :class:`OpenFIGIAsset` values.

    Each resolver keeps its own cache keyed by ``(id_type, id_value)``; an
    entry is written once and never replaced.
    """

    def __init__(
        self,
        client: OpenFIGIClient,
        nonce_prefix: str = DEFAULT_NONCE_PREFIX,
        props: Optional[Dict[str, Any]] = None,
        program_id: Pubkey = PROGRAM_ID,
    ):
        self.client = client
        self.nonce_prefix = nonce_prefix
        self.props = dict(DEFAULT_FIGI_PROPS if props is None else props)
        self.program_id = program_id
        self._cache: Dict[Tuple[str, str], OpenFIGIAsset] = {}

    def _remember(self, key: Tuple[str, str], asset: OpenFIGIAsset) -> OpenFIGIAsset:
        return self._cache.setdefault(key, asset)

    def _identity(self, item: FigiItem, id_value: str, id_type: str) -> OpenFIGIAsset:
        return OpenFIGIAsset.from_figi_item(
            item,
            id_value=id_value,
            id_type=id_type,
            nonce_prefix=self.nonce_prefix,
            program_id=self.program_id,
        )

    async def resolve(self, id_value: str, id_type: str = TICKER) -> OpenFIGIAsset:
        """Resolve one identifier, using the cache when possible.

        Raises:
            NotFoundError: If OpenFIGI has no mapping for the identifier
            ServiceError: If OpenFIGI fails or reports an error
            EncodingError: If the nonce would exceed 32 bytes
        """
        key = (id_type, id_value)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        item = await self.client.resolve_one(id_type, id_value, self.props)
        asset = self._identity(item, id_value, id_type)
        logger.debug(
            "Resolved %s %s to FIGI %s, asset %s", id_type, id_value, item.figi, asset.public_key
        )
        return self._remember(key, asset)

    async def resolve_many(
        self,
        symbols: Sequence[str],
        id_types: Optional[Sequence[str]] = None,
    ) -> List[OpenFIGIAsset]:
        """Resolve several identifiers in batched requests.

        Identifiers without a mapping, or whose record has no ticker, are
        skipped. The result keeps the input order.

        Raises:
            ValueError: If ``id_types`` and ``symbols`` differ in length
            ServiceError: If OpenFIGI fails or reports an error for any item
        """
        if id_types is None:
            id_types = [TICKER] * len(symbols)
        if len(id_types) != len(symbols):
            raise ValueError(
                f"id_types and symbols differ in length: {len(id_types)} != {len(symbols)}"
            )

        keys = list(zip(id_types, symbols))
        missing = [key for key in dict.fromkeys(keys) if key not in self._cache]

        if missing:
            jobs = [MappingJob(id_type, value, dict(self.props)) for id_type, value in missing]
            items = await self.client.map_jobs(jobs)
            for key, item in zip(missing, items):
                if item is None:
                    logger.warning("No FIGI mapping for %s %s, skipping", *key)
                    continue
                if item.ticker is None:
                    logger.warning("FIGI %s for %s %s has no ticker, skipping", item.figi, *key)
                    continue
                self._remember(key, self._identity(item, item.ticker, TICKER))

        return [self._cache[key] for key in keys if key in self._cache]

    async def from_nonce(self, nonce: bytes) -> OpenFIGIAsset:
        """Look up the asset a nonce was derived from.

        The FIGI is read from the nonce and mapped back with ``ID_BB_GLOBAL``
        (no exchange filter).

        Raises:
            EncodingError: If the nonce is malformed or has another prefix
            NotFoundError: If the FIGI is unknown or its record has no ticker
        """
        figi = decode_nonce(nonce, self.nonce_prefix)
        item = await self.client.resolve_one(ID_BB_GLOBAL, figi)
        if item.ticker is None:
            raise NotFoundError(f"{ID_BB_GLOBAL} {figi}", "FIGI record has no ticker")

        return self._identity(item, item.ticker, TICKER)

    async def derive_nonce(self, id_value: str, id_type: str = TICKER) -> bytes:
        """Resolve an identifier and return its asset nonce."""
        asset = await self.resolve(id_value, id_type)
        return asset.nonce
