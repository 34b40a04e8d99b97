"""
Core middleware.
"""

from collections.abc import Callable
from uuid import UUID, uuid4

from django.http import HttpRequest, HttpResponse

from apps.core.logging import bind_contextvars, clear_contextvars

REQUEST_ID_HEADER = "X-Request-ID"


def client_ip(request: HttpRequest) -> str | None:
    """First address in X-Forwarded-For (the client behind the load balancer), else REMOTE_ADDR."""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def request_correlation_id(request: HttpRequest) -> str:
    """Incoming X-Request-ID if it is a UUID, else a new one. Audit entries store it."""
    header = request.headers.get(REQUEST_ID_HEADER, "")
    try:
        return str(UUID(header))
    except ValueError:
        return str(uuid4())


class RequestContextMiddleware:
    """
    Binds per-request logging context.

    The correlation id comes from the X-Request-ID header when the load
    balancer sets a UUID there, otherwise a fresh UUID. It is echoed back on
    the response and picked up by audit log entries written during the request.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = request_correlation_id(request)

        clear_contextvars()
        bind_contextvars(
            correlation_id=correlation_id,
            **{
                "request.ip_address": client_ip(request),
                "request.user_agent": request.headers.get("User-Agent", ""),
            },
        )
        try:
            response = self.get_response(request)
        finally:
            clear_contextvars()

        response[REQUEST_ID_HEADER] = correlation_id
        return response
