"""
Stripe webhook handler.

Keeps organization subscription status and tier in step with Stripe.
This is a separate view (not Django Ninja) for raw request handling
needed to verify Stripe signatures.
"""

import stripe
from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from apps.billing.services import (
    handle_invoice_payment_failed,
    handle_invoice_payment_succeeded,
    handle_subscription_changed,
    handle_subscription_deleted,
)
from apps.billing.stripe_client import get_stripe
from apps.core.logging import get_logger
from apps.core.webhooks import is_webhook_processed, mark_webhook_processed
from config.settings.base import settings

logger = get_logger(__name__)


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> HttpResponse:
    """
    Handle Stripe webhook events.

    Verifies signature and dispatches to appropriate handler.
    """
    payload = request.body
    sig_header = request.headers.get("Stripe-Signature")

    if not sig_header:
        logger.warning("stripe_webhook_missing_signature")
        return HttpResponse(status=400)

    if not settings.STRIPE_WEBHOOK_SECRET:
        logger.error("stripe_webhook_secret_not_configured")
        return HttpResponse(status=500)

    get_stripe()  # Ensure Stripe is configured
    try:
        event = stripe.Webhook.construct_event(
            payload,
            sig_header,
            settings.STRIPE_WEBHOOK_SECRET,
        )
    except ValueError as e:
        logger.warning("stripe_webhook_invalid_payload", error=str(e))
        return HttpResponse(status=400)
    except stripe.SignatureVerificationError as e:
        logger.warning("stripe_webhook_invalid_signature", error=str(e))
        return HttpResponse(status=400)

    event_id = event["id"]
    logger.info("stripe_webhook_received", event_type=event["type"], event_id=event_id)

    if is_webhook_processed("stripe", event_id):
        logger.info("stripe_webhook_duplicate", event_id=event_id)
        return HttpResponse(status=200)

    try:
        obj = event["data"]["object"]
        match event["type"]:
            case "customer.subscription.created" | "customer.subscription.updated":
                handle_subscription_changed(obj)

            case "customer.subscription.deleted":
                handle_subscription_deleted(obj)

            case "invoice.payment_failed":
                handle_invoice_payment_failed(obj)

            case "invoice.payment_succeeded":
                handle_invoice_payment_succeeded(obj)

            case _:
                logger.debug("stripe_webhook_unhandled_event", event_type=event["type"])

    except Exception:
        logger.exception("stripe_webhook_handler_error", event_id=event_id)
        # Return 500 so Stripe will retry with exponential backoff
        return HttpResponse(status=500)

    mark_webhook_processed("stripe", event_id)
    return HttpResponse(status=200)
