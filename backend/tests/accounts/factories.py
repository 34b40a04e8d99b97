"""
Factories for accounts and organizations models.

Used in tests to create test data.
"""

import factory
from factory.django import DjangoModelFactory

from apps.accounts.models import Role, User
from apps.organizations.models import Department, Organization


class OrganizationFactory(DjangoModelFactory):
    """Factory for Organization model."""

    class Meta:
        model = Organization

    name = factory.Faker("company")
    slug = factory.Sequence(lambda n: f"org-{n}")


class DepartmentFactory(DjangoModelFactory):
    """Factory for Department model."""

    class Meta:
        model = Department

    organization = factory.SubFactory(OrganizationFactory)
    name = factory.Sequence(lambda n: f"Department {n}")


class UserFactory(DjangoModelFactory):
    """Factory for User model."""

    class Meta:
        model = User

    stytch_user_id = factory.Sequence(lambda n: f"user-test-{n}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Faker("name")
    role = Role.EMPLOYEE
    organization = factory.SubFactory(OrganizationFactory)
    is_active = True
    is_staff = False
