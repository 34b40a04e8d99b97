"""
Tests for RequestContextMiddleware.
"""

from unittest.mock import MagicMock
from uuid import UUID

import pytest
from django.http import HttpResponse
from django.test import RequestFactory

from apps.core.logging import bind_contextvars, get_contextvars
from apps.core.middleware import REQUEST_ID_HEADER, RequestContextMiddleware


def make_get_response(seen: dict) -> MagicMock:
    """get_response that snapshots the logging context while the view runs."""

    def _view(request):
        seen.update(get_contextvars())
        return HttpResponse()

    return MagicMock(side_effect=_view)


@pytest.fixture
def rf() -> RequestFactory:
    return RequestFactory()


class TestRequestContextMiddleware:
    """Tests for per-request logging context."""

    def test_uses_incoming_request_id(self, rf: RequestFactory) -> None:
        """Should reuse X-Request-ID and echo it on the response."""
        seen: dict = {}
        middleware = RequestContextMiddleware(make_get_response(seen))
        request_id = "3f2b8c1e-6a4d-4e8b-9c1a-2d7e5f0b9a41"

        response = middleware(rf.get("/api/v1/health", HTTP_X_REQUEST_ID=request_id))

        assert seen["correlation_id"] == request_id
        assert response[REQUEST_ID_HEADER] == request_id

    @pytest.mark.parametrize("header", ["req-abc", "a" * 101, "'; drop table events_auditlog;--"])
    def test_replaces_request_id_that_is_not_a_uuid(self, rf: RequestFactory, header: str) -> None:
        """Arbitrary client values never become the stored correlation id."""
        seen: dict = {}
        middleware = RequestContextMiddleware(make_get_response(seen))

        response = middleware(rf.get("/api/v1/health", HTTP_X_REQUEST_ID=header))

        assert seen["correlation_id"] != header
        assert str(UUID(seen["correlation_id"])) == seen["correlation_id"]
        assert response[REQUEST_ID_HEADER] == seen["correlation_id"]

    def test_generates_request_id(self, rf: RequestFactory) -> None:
        """Should create a correlation id when the header is absent."""
        seen: dict = {}
        middleware = RequestContextMiddleware(make_get_response(seen))

        response = middleware(rf.get("/api/v1/health"))

        assert seen["correlation_id"]
        assert response[REQUEST_ID_HEADER] == seen["correlation_id"]

    def test_binds_client_details(self, rf: RequestFactory) -> None:
        """Should bind client ip and user agent for audit entries."""
        seen: dict = {}
        middleware = RequestContextMiddleware(make_get_response(seen))

        middleware(
            rf.get(
                "/api/v1/health",
                HTTP_USER_AGENT="pytest-agent",
                HTTP_X_FORWARDED_FOR="203.0.113.7, 10.0.0.1",
            )
        )

        assert seen["request.user_agent"] == "pytest-agent"
        assert seen["request.ip_address"] == "203.0.113.7"

    def test_clears_context_after_response(self, rf: RequestFactory) -> None:
        """Nothing bound during the request should survive it."""
        seen: dict = {}
        middleware = RequestContextMiddleware(make_get_response(seen))

        middleware(rf.get("/api/v1/health"))

        assert get_contextvars() == {}

    def test_drops_stale_context_from_previous_request(self, rf: RequestFactory) -> None:
        """Context left over on the worker should not appear in a new request."""
        bind_contextvars(**{"usr.id": "stale"})
        seen: dict = {}
        middleware = RequestContextMiddleware(make_get_response(seen))

        middleware(rf.get("/api/v1/health"))

        assert "usr.id" not in seen

    def test_clears_context_when_view_raises(self, rf: RequestFactory) -> None:
        """Should clear context even if the view raises."""
        middleware = RequestContextMiddleware(MagicMock(side_effect=RuntimeError("boom")))

        with pytest.raises(RuntimeError):
            middleware(rf.get("/api/v1/health"))

        assert get_contextvars() == {}
