"""Tests for core/rate_limit.py - client keys and storage selection."""
from starlette.requests import Request


def make_request(headers=None, client=("10.0.0.9", 5000)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/academic/search",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


class TestClientKey:
    """Test the per-client rate limit key."""

    def test_uses_peer_address(self):
        from campusmind.core.rate_limit import client_key

        assert client_key(make_request()) == "10.0.0.9"

    def test_prefers_first_forwarded_hop(self):
        from campusmind.core.rate_limit import client_key

        request = make_request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})
        assert client_key(request) == "203.0.113.7"

    def test_blank_forwarded_header_ignored(self):
        from campusmind.core.rate_limit import client_key

        assert client_key(make_request({"X-Forwarded-For": " "})) == "10.0.0.9"


class TestStorage:
    def test_disabled_limiter_uses_memory(self):
        """Tests run with RATE_LIMIT_ENABLED=false; Redis is never pinged."""
        from campusmind.core.rate_limit import MEMORY_STORAGE, limiter, resolve_storage_uri, storage_uri

        assert resolve_storage_uri() == MEMORY_STORAGE
        assert storage_uri == MEMORY_STORAGE
        assert limiter.enabled is False

    def test_route_limits_come_from_settings(self):
        from campusmind.core.config import settings
        from campusmind.core.rate_limit import IMPORT_LIMIT, SEARCH_LIMIT

        assert SEARCH_LIMIT == settings.search_rate_limit
        assert IMPORT_LIMIT == settings.import_rate_limit
