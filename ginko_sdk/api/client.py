"""OpenFIGI mapping API client implementation."""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import aiohttp

from .error import DeserializeError, HttpError, NotFoundError, ServiceError
from .retry import RetryConfig, call_with_retry
from .types import FigiItem, MappingJob

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.openfigi.com/v3/mapping"
DEFAULT_TIMEOUT_SECS = 30

# OpenFIGI caps the number of jobs in a single mapping request.
MAX_JOBS_PER_REQUEST = 10
MAX_JOBS_PER_REQUEST_WITH_KEY = 100


class OpenFIGIClient:
    """Client for the OpenFIGI v3 mapping endpoint.

    Maps external identifiers (tickers, Bloomberg global IDs, ...) to FIGI
    records.

    Example:
        ```python
        async with OpenFIGIClient() as client:
            item = await client.resolve_one("TICKER", "AAPL", {"exchCode": "US"})
            print(item.figi)
        ```
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: int = DEFAULT_TIMEOUT_SECS,
        headers: Optional[Dict[str, str]] = None,
        retry_config: Optional[RetryConfig] = None,
        api_key: Optional[str] = None,
    ):
        """Create a new client.

        Args:
            api_url: The mapping endpoint URL
            timeout: Request timeout in seconds
            headers: Optional additional headers for all requests
            retry_config: Optional retry configuration (retries are off by default)
            api_key: Optional OpenFIGI API key, raises the per-request job limit
        """
        self._api_url = api_url
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if api_key:
            self._headers["X-OPENFIGI-APIKEY"] = api_key
        if headers:
            self._headers.update(headers)
        self._session: Optional[aiohttp.ClientSession] = None
        self._retry_config = retry_config or RetryConfig.default()
        self._max_jobs = MAX_JOBS_PER_REQUEST_WITH_KEY if api_key else MAX_JOBS_PER_REQUEST

    @property
    def api_url(self) -> str:
        """Get the mapping endpoint URL."""
        return self._api_url

    async def __aenter__(self) -> "OpenFIGIClient":
        """Enter async context manager."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers=self._headers,
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _handle_response(self, response: aiohttp.ClientResponse) -> list:
        """Return the decoded result list or raise on a failed exchange."""
        if not 200 <= response.status < 300:
            error_text = await response.text()
            raise ServiceError(error_text or "Unknown error", status=response.status)

        try:
            data = await response.json()
        except (ValueError, json.JSONDecodeError, aiohttp.ContentTypeError) as e:
            raise DeserializeError(f"Failed to deserialize response: {e}")

        if not isinstance(data, list):
            raise DeserializeError(f"Expected a list of mapping results, got {data!r}")
        return data

    async def _post(self, jobs: Sequence[MappingJob]) -> list:
        session = await self._ensure_session()
        body = [job.to_dict() for job in jobs]

        async def request() -> list:
            try:
                async with session.post(self._api_url, json=body) as response:
                    return await self._handle_response(response)
            except aiohttp.ClientError as e:
                raise HttpError(str(e))

        logger.debug("POST %s with %d job(s)", self._api_url, len(body))
        return await call_with_retry(request, self._retry_config, "OpenFIGI mapping")

    async def map_jobs(self, jobs: Sequence[MappingJob]) -> List[Optional[FigiItem]]:
        """Run mapping jobs, returning one entry per job in order.

        Jobs without a match yield None. When a job matches several
        securities only the first is kept.

        Raises:
            ServiceError: On a non-2xx status or if any job reports an error
            DeserializeError: If the response is malformed
        """
        results: List[Optional[FigiItem]] = []
        for start in range(0, len(jobs), self._max_jobs):
            chunk = jobs[start : start + self._max_jobs]
            data = await self._post(chunk)
            if len(data) != len(chunk):
                raise DeserializeError(
                    f"Expected {len(chunk)} mapping results, got {len(data)}"
                )

            for job, item in zip(chunk, data):
                if not isinstance(item, dict):
                    raise DeserializeError(f"Malformed mapping result: {item!r}")
                if item.get("error"):
                    raise ServiceError(f"{job.id_type} {job.id_value}: {item['error']}")
                records = item.get("data") or []
                if not records:
                    results.append(None)
                    continue
                if len(records) > 1:
                    logger.debug(
                        "%s %s matched %d records, using the first",
                        job.id_type,
                        job.id_value,
                        len(records),
                    )
                results.append(FigiItem.from_dict(records[0]))
        return results

    async def resolve_one(
        self,
        id_type: str,
        id_value: str,
        props: Optional[Dict[str, Any]] = None,
    ) -> FigiItem:
        """Resolve a single identifier.

        Args:
            id_type: OpenFIGI identifier type, e.g. ``TICKER`` or ``ID_BB_GLOBAL``
            id_value: The identifier value
            props: Extra mapping properties such as ``{"exchCode": "US"}``

        Raises:
            NotFoundError: If the identifier has no match
            ServiceError: On a non-2xx status or a reported error
        """
        items = await self.map_jobs([MappingJob(id_type, id_value, dict(props or {}))])
        if items[0] is None:
            raise NotFoundError(f"{id_type} {id_value}", "no FIGI mapping")
        return items[0]

    async def resolve_batch(
        self,
        id_types: Sequence[str],
        id_values: Sequence[str],
        props: Optional[Dict[str, Any]] = None,
    ) -> List[FigiItem]:
        """Resolve several identifiers.

        Identifiers without a match are left out of the result and logged.

        Raises:
            ValueError: If ``id_types`` and ``id_values`` differ in length
            ServiceError: On a non-2xx status or if any job reports an error
        """
        if len(id_types) != len(id_values):
            raise ValueError(
                f"id_types and id_values differ in length: "
                f"{len(id_types)} != {len(id_values)}"
            )

        jobs = [
            MappingJob(id_type, id_value, dict(props or {}))
            for id_type, id_value in zip(id_types, id_values)
        ]
        items = await self.map_jobs(jobs)

        resolved: List[FigiItem] = []
        for job, item in zip(jobs, items):
            if item is None:
                logger.warning("No FIGI mapping for %s %s, skipping", job.id_type, job.id_value)
                continue
            resolved.append(item)
        return resolved
