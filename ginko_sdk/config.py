"""Environment-based configuration."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.pubkey import Pubkey

from .api.client import DEFAULT_API_URL
from .errors import ConfigError
from .shared.nonce import DEFAULT_NONCE_PREFIX

NETWORKS = ("mainnet-beta", "devnet")
COMMITMENTS = ("processed", "confirmed", "finalized")


@dataclass
class GinkoConfig:
    """Settings for talking to a Solana node and the OpenFIGI API."""

    rpc_url: str
    commitment: str = "confirmed"
    network: str = "mainnet-beta"
    keypair_path: Optional[str] = None
    payment_mint: Optional[Pubkey] = None
    nonce_prefix: str = DEFAULT_NONCE_PREFIX
    openfigi_api_url: str = DEFAULT_API_URL
    openfigi_api_key: Optional[str] = None

    @property
    def is_devnet(self) -> bool:
        return self.network == "devnet"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GinkoConfig":
        """Load configuration from environment variables.

        Reads ``SOLANA_RPC_URL`` (required), ``SOLANA_RPC_COMMITMENT``,
        ``SOLANA_NETWORK``, ``SOLANA_KEYPAIR_PATH``, ``PAYMENT_MINT``,
        ``NONCE_PREFIX``, ``OPENFIGI_API_URL`` and ``OPENFIGI_API_KEY``.

        Raises:
            ConfigError: If a value is missing or invalid
        """
        env = os.environ if environ is None else environ

        rpc_url = env.get("SOLANA_RPC_URL")
        if not rpc_url:
            raise ConfigError("SOLANA_RPC_URL", "connection url is not provided")

        commitment = env.get("SOLANA_RPC_COMMITMENT") or "confirmed"
        if commitment not in COMMITMENTS:
            raise ConfigError(
                "SOLANA_RPC_COMMITMENT", f"must be one of {', '.join(COMMITMENTS)}"
            )

        network = env.get("SOLANA_NETWORK") or "mainnet-beta"
        if network not in NETWORKS:
            raise ConfigError("SOLANA_NETWORK", f"must be one of {', '.join(NETWORKS)}")

        payment_mint = None
        if env.get("PAYMENT_MINT"):
            try:
                payment_mint = Pubkey.from_string(env["PAYMENT_MINT"])
            except ValueError as e:
                raise ConfigError("PAYMENT_MINT", f"invalid public key: {e}")

        return cls(
            rpc_url=rpc_url,
            commitment=commitment,
            network=network,
            keypair_path=env.get("SOLANA_KEYPAIR_PATH") or None,
            payment_mint=payment_mint,
            nonce_prefix=env.get("NONCE_PREFIX") or DEFAULT_NONCE_PREFIX,
            openfigi_api_url=env.get("OPENFIGI_API_URL") or DEFAULT_API_URL,
            openfigi_api_key=env.get("OPENFIGI_API_KEY") or None,
        )

    def connection(self) -> AsyncClient:
        """Create an RPC client with the configured commitment."""
        return AsyncClient(self.rpc_url, commitment=Commitment(self.commitment))
