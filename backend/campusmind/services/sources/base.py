"""
Base types and interfaces for data sources.

This module defines the abstract base class that every academic source
implements, and the boundary that turns any internal failure into the
"always succeeds with a possibly empty payload" contract.

To add a new source:
1. Create a class that inherits from BaseSource
2. Implement the name property and the _search method (and _get_by_id
   if the source can look up single records)
3. Register it in build_registry() in the sources __init__.py
4. Add it to the category table in services/search/router.py

Example:
    class NewSource(BaseSource):
        max_per_page = 50

        @property
        def name(self) -> str:
            return "new_source"

        async def _search(self, query: SearchQuery) -> SearchResult:
            async with self._client() as client:
                data = await self._get_json(client, URL, params={...})
            return SearchResult(...)

Subclasses raise SourceError (or let httpx errors escape) from _search;
they never build the empty result themselves.
"""
import asyncio
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from campusmind.core.config import settings
from campusmind.core.exceptions import (
    SourceError,
    SourceHTTPError,
    SourceParseError,
    SourceRateLimitError,
    SourceTimeoutError,
)
from campusmind.core.logging import get_logger
from campusmind.schemas import AcademicResource, SearchQuery, SearchResult

logger = get_logger(__name__)

BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class BaseSource(ABC):
    """
    Abstract base class for all academic sources.

    search() and get_by_id() never raise: transport errors, timeouts and
    malformed payloads are logged and surface as an empty SearchResult
    (or None for get_by_id). Each call is bounded by the provider timeout.

    A transport can be injected (httpx.MockTransport in tests); every
    client the source opens will use it.
    """

    # Largest page size the upstream accepts; larger requests are clamped.
    max_per_page: int = 100

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self._transport = transport
        self.timeout = timeout or settings.PROVIDER_TIMEOUT
        self._request_count = 0
        self._failure_count = 0
        self._counter_lock = threading.Lock()

    @property
    @abstractmethod
    def name(self) -> str:
        """Source identifier, one of AcademicSource values."""
        pass

    @abstractmethod
    async def _search(self, query: SearchQuery) -> SearchResult:
        """Query the upstream source. May raise."""
        pass

    async def _get_by_id(self, external_id: str) -> Optional[AcademicResource]:
        """Look up a single record. Sources without lookups return None."""
        return None

    # === Public contract ===

    async def search(self, query: SearchQuery) -> SearchResult:
        """
        Search this source, returning an empty result on any failure.

        Cancellation of the calling task is not a failure and propagates.
        """
        self._count_request()
        try:
            return await asyncio.wait_for(self._search(query), timeout=self.timeout)
        except asyncio.TimeoutError:
            error: Exception = SourceTimeoutError(self.name, self.timeout)
            logger.warning(str(error))
        except httpx.TimeoutException:
            error = SourceTimeoutError(self.name, self.timeout)
            logger.warning(str(error))
        except SourceError as e:
            error = e
            logger.error(f"{self.name} search failed: {e}")
        except Exception as e:
            error = e
            logger.error(f"{self.name} search failed: {type(e).__name__}: {e}")

        self._count_failure()
        self._on_search_failure(error)
        return self.empty_result(query)

    async def get_by_id(self, external_id: str) -> Optional[AcademicResource]:
        """Fetch one record by its source-scoped id, or None."""
        try:
            return await asyncio.wait_for(self._get_by_id(external_id), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{self.name} getById timed out for {external_id}")
        except Exception as e:
            logger.error(f"{self.name} getById failed for {external_id}: {e}")
        return None

    def empty_result(self, query: Optional[SearchQuery] = None) -> SearchResult:
        return SearchResult.empty(self.name, query)

    def _on_search_failure(self, error: Exception) -> None:
        """Hook run after a failed search, before the empty result is returned."""
        pass

    # === Helpers for subclasses ===

    def clamp_per_page(self, per_page: int) -> int:
        return max(1, min(per_page, self.max_per_page))

    def _client(self, timeout: Optional[float] = None, **kwargs: Any) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout or self.timeout,
            transport=self._transport,
            follow_redirects=True,
            **kwargs,
        )

    async def _get(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        retry_on_rate_limit: bool = False,
    ) -> httpx.Response:
        """GET a URL, raising SourceError subclasses for non-200 answers."""
        response = await client.get(url, params=params, headers=headers)

        # Handle rate limiting with a single retry
        if response.status_code == 429 and retry_on_rate_limit:
            logger.warning(f"{self.name} rate limited, waiting 1 second...")
            await asyncio.sleep(1)
            response = await client.get(url, params=params, headers=headers)

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise SourceRateLimitError(
                self.name, int(retry_after) if retry_after and retry_after.isdigit() else None
            )
        if response.status_code != 200:
            raise SourceHTTPError(self.name, response.status_code)
        return response

    async def _get_json(self, client: httpx.AsyncClient, url: str, **kwargs: Any) -> Any:
        response = await self._get(client, url, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise SourceParseError(self.name, str(e)) from e

    # === Counters ===

    def _count_request(self) -> None:
        with self._counter_lock:
            self._request_count += 1

    def _count_failure(self) -> None:
        with self._counter_lock:
            self._failure_count += 1

    @property
    def stats(self) -> Dict[str, int]:
        with self._counter_lock:
            return {"requests": self._request_count, "failures": self._failure_count}
