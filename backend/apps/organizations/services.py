"""
Organization services - slugs and per-organization settings.
"""

import copy
import re
from typing import Any

from django.db import transaction

from apps.organizations.defaults import DEFAULT_SETTINGS
from apps.organizations.models import Organization, SystemSettings

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify_organization_name(name: str) -> str:
    """
    Derive the URL slug for an organization name.

    Lower-cases, collapses every run of non-alphanumeric characters into one
    hyphen and trims hyphens at both ends: "Acme Corp!" -> "acme-corp".
    """
    return _NON_ALNUM.sub("-", name.lower()).strip("-")


def seed_default_settings(organization: Organization) -> list[SystemSettings]:
    """Insert the review, notifications and features settings rows."""
    with transaction.atomic():
        return SystemSettings.objects.bulk_create(
            [
                SystemSettings(
                    organization=organization,
                    category=category,
                    settings=copy.deepcopy(values),
                )
                for category, values in DEFAULT_SETTINGS.items()
            ]
        )


def get_settings(organization: Organization, category: str) -> dict[str, Any]:
    """
    Return the settings for ``category``.

    Settings rows are seeded best-effort at signup, so a missing row falls
    back to the built-in defaults.
    """
    if category not in DEFAULT_SETTINGS:
        raise ValueError(f"Unknown settings category: {category}")

    row = SystemSettings.objects.filter(organization=organization, category=category).first()
    if row is None:
        return copy.deepcopy(DEFAULT_SETTINGS[category])
    return row.settings
