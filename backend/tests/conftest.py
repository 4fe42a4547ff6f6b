"""
Pytest fixtures and configuration for backend tests.

Provides reusable fixtures for building resources, fake sources,
httpx mock transports and an API client with overridden dependencies.
"""
import asyncio
import json
import os
import sys
from typing import Callable, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Must be set before campusmind.core.config is first imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("REDIS_PORT", "6379")

from campusmind.schemas import (  # noqa: E402
    AcademicResource,
    ResourceType,
    SearchQuery,
    SearchResult,
)
from campusmind.services.sources.base import BaseSource  # noqa: E402


def make_resource(
    external_id: str = "r1",
    source: str = "openalex",
    **fields,
) -> AcademicResource:
    """Build a resource with only the fields a test cares about."""
    fields.setdefault("type", ResourceType.PAPER)
    fields.setdefault("is_open_access", True)
    fields.setdefault("title", f"Resource {external_id}")
    return AcademicResource(external_id=external_id, source=source, **fields)


class FakeSource(BaseSource):
    """
    Source double driven by plain data.

    items are returned on every search; error is raised instead when set;
    delay sleeps before answering (to exercise the timeout boundary).
    """

    def __init__(
        self,
        source_name: str,
        items: Optional[List[AcademicResource]] = None,
        total: Optional[int] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        timeout: float = 5.0,
    ):
        super().__init__(timeout=timeout)
        self._name = source_name
        self.items = items or []
        self.total = len(self.items) if total is None else total
        self.error = error
        self.delay = delay
        self.queries: List[SearchQuery] = []
        self.lookups: Dict[str, AcademicResource] = {}

    @property
    def name(self) -> str:
        return self._name

    async def _search(self, query: SearchQuery) -> SearchResult:
        self.queries.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SearchResult(
            items=self.items,
            total=self.total,
            page=query.page,
            per_page=query.per_page,
            source=self.name,
        )

    async def _get_by_id(self, external_id: str) -> Optional[AcademicResource]:
        return self.lookups.get(external_id)


class RaisingSource(FakeSource):
    """Breaks the provider contract: search() itself raises."""

    async def search(self, query: SearchQuery) -> SearchResult:
        raise RuntimeError(f"{self.name} exploded")


def json_transport(payload, status_code: int = 200, recorder: Optional[List[httpx.Request]] = None) -> httpx.MockTransport:
    """MockTransport answering every request with the same JSON body."""
    def handler(request: httpx.Request) -> httpx.Response:
        if recorder is not None:
            recorder.append(request)
        return httpx.Response(status_code, content=json.dumps(payload), headers={"Content-Type": "application/json"})
    return httpx.MockTransport(handler)


def html_transport(html: str, status_code: int = 200, recorder: Optional[List[httpx.Request]] = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if recorder is not None:
            recorder.append(request)
        return httpx.Response(status_code, text=html, headers={"Content-Type": "text/html"})
    return httpx.MockTransport(handler)


def failing_transport(recorder: Optional[List[httpx.Request]] = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if recorder is not None:
            recorder.append(request)
        raise httpx.ConnectError("connection refused", request=request)
    return httpx.MockTransport(handler)


@pytest.fixture
def resource_factory() -> Callable[..., AcademicResource]:
    return make_resource


@pytest.fixture
def query() -> SearchQuery:
    return SearchQuery(query="anatomy")


@pytest.fixture
def fake_sources():
    """Two healthy sources sharing one DOI, and one failing source."""
    shared = make_resource("oa-1", "openalex", doi="https://doi.org/10.1/shared", abstract="A")
    return {
        "openalex": FakeSource("openalex", [shared, make_resource("oa-2", "openalex", url="https://x.org/2")], total=120),
        "crossref": FakeSource("crossref", [make_resource("cr-1", "crossref", doi="https://doi.org/10.1/shared")], total=40),
        "youtube": FakeSource("youtube", error=httpx.ConnectError("down")),
    }


@pytest.fixture
def test_client():
    """Create a test client for API testing; dependency overrides are cleared afterwards."""
    # Import here to avoid circular imports
    from campusmind.main import app

    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
