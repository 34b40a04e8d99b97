"""
Event services - writing audit log entries.
"""

from typing import TYPE_CHECKING, Any

from apps.core.logging import get_contextvars, get_logger
from apps.events.models import AuditLog

if TYPE_CHECKING:
    from apps.accounts.models import User

logger = get_logger(__name__)


def record_audit_log(
    *,
    organization_id: Any,
    actor: "User | None",
    action: str,
    entity_type: str,
    entity_id: Any,
    details: dict[str, Any] | None = None,
) -> AuditLog:
    """
    Append an audit log entry.

    Call this inside the ``transaction.atomic()`` block that makes the change
    being audited so both commit together. Request context (correlation id,
    client ip, user agent) is taken from the structlog contextvars bound by
    RequestContextMiddleware.

    Args:
        organization_id: Tenant the entry belongs to
        actor: User who caused the action (None for system actions)
        action: Action tag, e.g. 'USER_JOINED'
        entity_type: Kind of entity acted on, e.g. 'USER'
        entity_id: Id of that entity
        details: Free-form payload
    """
    ctx = get_contextvars()

    entry = AuditLog.objects.create(
        organization_id=str(organization_id),
        actor_id=str(actor.pk) if actor is not None else "",
        actor_email=actor.email if actor is not None else "",
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        correlation_id=ctx.get("correlation_id") or "",
        ip_address=ctx.get("request.ip_address"),
        user_agent=ctx.get("request.user_agent", ""),
        details=details or {},
    )

    logger.debug("audit_log_recorded", action=action, entity_type=entity_type, entity_id=str(entity_id))
    return entry
