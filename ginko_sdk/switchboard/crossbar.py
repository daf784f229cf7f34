"""HTTP clients for Switchboard's job simulator and crossbar job store."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import aiohttp

from ..api.error import DeserializeError, HttpError, ServiceError
from ..api.retry import RetryConfig, call_with_retry
from ..errors import SimulationError
from .jobs import OracleJob
from .queue import SwitchboardQueue

logger = logging.getLogger(__name__)

DEFAULT_CROSSBAR_URL = "https://crossbar.switchboard.xyz"
DEFAULT_SIMULATION_URL = "https://api.switchboard.xyz/api/simulate"
DEFAULT_TIMEOUT_SECS = 30


@dataclass
class StoreResponse:
    """Result of storing jobs on crossbar."""

    cid: str
    feed_hash: str
    queue_hex: str

    @classmethod
    def from_dict(cls, data: dict) -> "StoreResponse":
        try:
            return cls(
                cid=data["cid"],
                feed_hash=data["feedHash"],
                queue_hex=data["queueHex"],
            )
        except KeyError as e:
            raise DeserializeError(f"Missing required field in StoreResponse: {e}")


class CrossbarClient:
    """Client for crossbar's content-addressed job store and the job simulator."""

    def __init__(
        self,
        base_url: str = DEFAULT_CROSSBAR_URL,
        timeout: int = DEFAULT_TIMEOUT_SECS,
        retry_config: Optional[RetryConfig] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None
        self._retry_config = retry_config or RetryConfig.default()

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "CrossbarClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _post_json(self, url: str, payload: Dict[str, Any]) -> dict:
        session = await self._ensure_session()

        async def request() -> dict:
            try:
                async with session.post(url, json=payload) as response:
                    if not 200 <= response.status < 300:
                        raise ServiceError(await response.text(), status=response.status)
                    try:
                        data = await response.json(content_type=None)
                    except (ValueError, json.JSONDecodeError) as e:
                        raise DeserializeError(f"Failed to deserialize response: {e}")
            except aiohttp.ClientError as e:
                raise HttpError(str(e))
            if not isinstance(data, dict):
                raise DeserializeError(f"Expected a JSON object, got {data!r}")
            return data

        logger.debug("POST %s", url)
        return await call_with_retry(request, self._retry_config, f"POST {url}")

    async def simulate_jobs(
        self,
        jobs: Sequence[OracleJob],
        cluster: str = "Mainnet",
        simulation_url: str = DEFAULT_SIMULATION_URL,
    ) -> Any:
        """Run jobs on the simulator and return its ``result``.

        Raises:
            ServiceError: On a non-2xx status
            SimulationError: If the simulator returned no result; carries the
                first job's error when the simulator reports one
        """
        payload = {
            "cluster": cluster,
            "jobs": [job.to_base64() for job in jobs],
        }
        data = await self._post_json(simulation_url, payload)

        if data.get("result") is None:
            results = data.get("results") or []
            first = results[0] if results else None
            if isinstance(first, dict) and first.get("error"):
                raise SimulationError(str(first["error"]))
            raise SimulationError(f"no result: {json.dumps(data)}")

        logger.debug("Simulation result: %s", data["result"])
        return data["result"]

    async def store(
        self, queue: SwitchboardQueue, jobs: Sequence[OracleJob]
    ) -> StoreResponse:
        """Store jobs for a queue and return their content hash.

        Raises:
            ServiceError: On a non-2xx status
            DeserializeError: If the response is missing fields
        """
        payload = {
            "queue": queue.hex,
            "jobs": [job.to_dict() for job in jobs],
        }
        data = await self._post_json(f"{self._base_url}/store", payload)
        return StoreResponse.from_dict(data)
