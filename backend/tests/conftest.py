"""
Shared pytest fixtures for all tests.

Factories
---------
Import factories directly from their modules:

    from tests.accounts.factories import UserFactory, OrganizationFactory, DepartmentFactory
    from tests.invitations.factories import InvitationFactory

Providers
---------
The sagas take their identity and billing providers as arguments. Tests pass
the in-memory fakes from ``tests.provisioning.fakes`` (also exposed as the
``identity`` and ``billing`` fixtures) instead of talking to Stytch/Stripe.

Example usage:

    @pytest.mark.django_db
    def test_something(identity, billing):
        provisioner = OrganizationProvisioner(identity=identity, billing=billing)
        result = provisioner.provision("Acme Corp", "Jane", "jane@acme.com", "Str0ng!Pass")
"""

import pytest
from django.test import Client

from apps.core.logging import clear_contextvars
from tests.provisioning.fakes import FakeBillingProvider, FakeIdentityProvider


@pytest.fixture(autouse=True)
def _clean_log_context():
    """Context bound by one test must not leak into audit entries of the next."""
    clear_contextvars()
    yield
    clear_contextvars()


@pytest.fixture
def api_client() -> Client:
    """
    Django test client for full HTTP request/response cycle tests.

    Example:
        def test_api_returns_200(api_client):
            response = api_client.get("/api/v1/health")
            assert response.status_code == 200
    """
    return Client()


@pytest.fixture
def identity() -> FakeIdentityProvider:
    """In-memory identity provider recording created and deleted accounts."""
    return FakeIdentityProvider()


@pytest.fixture
def billing() -> FakeBillingProvider:
    """In-memory billing provider recording created customers."""
    return FakeBillingProvider()


@pytest.fixture
def organization(db):
    """An organization with no users yet."""
    from tests.accounts.factories import OrganizationFactory

    return OrganizationFactory.create(name="Acme Corp", slug="acme-corp")


@pytest.fixture
def admin_user(organization):
    """
    SUPER_ADMIN of ``organization``.

    Example:
        def test_admin_only_action(admin_user):
            assert admin_user.is_admin
    """
    from apps.accounts.models import Role
    from tests.accounts.factories import UserFactory

    return UserFactory.create(
        organization=organization,
        email="jane@acme.com",
        name="Jane Admin",
        role=Role.SUPER_ADMIN,
    )


@pytest.fixture
def employee(organization):
    """Regular EMPLOYEE of ``organization``."""
    from apps.accounts.models import Role
    from tests.accounts.factories import UserFactory

    return UserFactory.create(organization=organization, role=Role.EMPLOYEE)
