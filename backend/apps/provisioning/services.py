"""
Provisioning wiring - orchestrators built with the production providers.

Handlers call these factories; tests construct the orchestrators directly
with their own providers.
"""

from apps.accounts.identity import get_identity_provider
from apps.billing.services import get_billing_provider
from apps.provisioning.invitations import InvitationAcceptor
from apps.provisioning.organizations import OrganizationProvisioner


def get_organization_provisioner() -> OrganizationProvisioner:
    return OrganizationProvisioner(identity=get_identity_provider(), billing=get_billing_provider())


def get_invitation_acceptor() -> InvitationAcceptor:
    return InvitationAcceptor(identity=get_identity_provider())
