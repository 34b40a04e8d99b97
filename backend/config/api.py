"""
Django Ninja API configuration.
"""

from django.http import HttpRequest, HttpResponse
from ninja import NinjaAPI

from apps.accounts.api import router as auth_router
from apps.core.logging import get_logger
from apps.invitations.api import router as invitations_router
from apps.provisioning.exceptions import BeaconError

logger = get_logger(__name__)

api = NinjaAPI(
    title="Beacon API",
    version="1.0.0",
    description="Beacon tenant provisioning, invitations and account API.",
    openapi_extra={
        "tags": [
            {
                "name": "auth",
                "description": "Organization signup, login and current session",
            },
            {
                "name": "invitations",
                "description": "Inviting people into an organization and accepting invitations",
            },
            {
                "name": "health",
                "description": "Service health and readiness checks",
            },
        ],
        "components": {
            "securitySchemes": {
                "bearerAuth": {
                    "type": "http",
                    "scheme": "bearer",
                    "bearerFormat": "JWT",
                    "description": "Stytch session JWT obtained from /auth/login. Include as: Authorization: Bearer <session_jwt>",
                }
            }
        },
    },
)

# Register routers
api.add_router("/auth", auth_router)
api.add_router("/invitations", invitations_router)


@api.exception_handler(BeaconError)
def beacon_error_handler(request: HttpRequest, exc: BeaconError) -> HttpResponse:
    """Render typed domain errors as {"detail": ...} with their status code."""
    return api.create_response(request, {"detail": exc.message}, status=exc.status_code)


@api.exception_handler(Exception)
def unexpected_error_handler(request: HttpRequest, exc: Exception) -> HttpResponse:
    """Collapse anything unexpected to a generic 500; operators get the traceback."""
    logger.exception("unhandled_api_error", path=request.path, method=request.method)
    return api.create_response(request, {"detail": "An unexpected error occurred"}, status=500)


@api.get("/health", tags=["health"], operation_id="healthCheck", summary="Health check")
def health_check(request: HttpRequest) -> dict:
    """Health check endpoint for load balancer."""
    return {"status": "ok"}
