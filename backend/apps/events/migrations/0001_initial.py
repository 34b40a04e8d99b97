import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("action", models.CharField(db_index=True, help_text="Action tag, e.g. 'USER_JOINED'", max_length=100)),
                ("entity_type", models.CharField(help_text="e.g. 'USER', 'INVITATION'", max_length=50)),
                ("entity_id", models.CharField(max_length=100)),
                ("organization_id", models.CharField(db_index=True, max_length=100)),
                (
                    "actor_id",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="User that performed the action, blank for system actions",
                        max_length=100,
                    ),
                ),
                (
                    "actor_email",
                    models.EmailField(blank=True, help_text="Actor email (denormalized for display)", max_length=254),
                ),
                (
                    "correlation_id",
                    models.CharField(
                        blank=True, db_index=True, help_text="Request trace ID for correlation", max_length=100
                    ),
                ),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("user_agent", models.TextField(blank=True)),
                ("details", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["organization_id", "created_at"], name="events_audi_organiz_6c1f2e_idx"),
                    models.Index(fields=["entity_type", "entity_id"], name="events_audi_entity__b7d4a9_idx"),
                ],
            },
        ),
    ]
