"""
Stytch client wrapper.

Provides a singleton client instance configured from settings.
"""

from functools import lru_cache

import stytch

from config.settings.base import settings


@lru_cache(maxsize=1)
def get_stytch_client() -> stytch.Client:
    """
    Get configured Stytch client (singleton).

    Uses lru_cache to ensure only one client instance is created.
    """
    return stytch.Client(
        project_id=settings.STYTCH_PROJECT_ID,
        secret=settings.STYTCH_SECRET,
    )
