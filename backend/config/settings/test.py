"""
Test settings.

In-memory SQLite so the suite runs without a PostgreSQL server.
"""

from .base import *  # noqa: F403
from .base import settings

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# External providers stay unconfigured unless a test patches them in
settings.STYTCH_PROJECT_ID = ""
settings.STYTCH_SECRET = ""
settings.STRIPE_SECRET_KEY = ""
settings.STRIPE_WEBHOOK_SECRET = "whsec_test"
settings.STRIPE_MONTHLY_PRICE_ID = "price_monthly_test"
settings.STRIPE_YEARLY_PRICE_ID = "price_yearly_test"
settings.RESEND_API_KEY = ""
settings.FRONTEND_URL = "http://localhost:5173"
settings.ENVIRONMENT = "test"
settings.LOG_JSON = False
