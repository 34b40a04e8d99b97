"""Tests for webhook idempotency utilities."""

import pytest
from django.db import IntegrityError

from apps.core.models import ProcessedWebhook
from apps.core.webhooks import is_webhook_processed, mark_webhook_processed


@pytest.mark.django_db
class TestProcessedWebhook:
    """Tests for the ProcessedWebhook model."""

    def test_str(self) -> None:
        webhook = ProcessedWebhook.objects.create(source="stripe", event_id="evt_1")

        assert str(webhook) == "stripe:evt_1"

    def test_source_and_event_id_unique_together(self) -> None:
        """The same event from the same source can only be stored once."""
        ProcessedWebhook.objects.create(source="stripe", event_id="evt_1")

        with pytest.raises(IntegrityError):
            ProcessedWebhook.objects.create(source="stripe", event_id="evt_1")


@pytest.mark.django_db
class TestMarkWebhookProcessed:
    """Tests for is_webhook_processed / mark_webhook_processed."""

    def test_unseen_event(self) -> None:
        assert is_webhook_processed("stripe", "evt_new") is False

    def test_first_mark_succeeds(self) -> None:
        """Should record the event and report success."""
        assert mark_webhook_processed("stripe", "evt_1") is True
        assert is_webhook_processed("stripe", "evt_1") is True

    def test_second_mark_reports_duplicate(self) -> None:
        """A replayed event is not recorded twice."""
        mark_webhook_processed("stripe", "evt_1")

        assert mark_webhook_processed("stripe", "evt_1") is False
        assert ProcessedWebhook.objects.filter(event_id="evt_1").count() == 1

    def test_sources_are_independent(self) -> None:
        mark_webhook_processed("stripe", "evt_1")

        assert is_webhook_processed("resend", "evt_1") is False
