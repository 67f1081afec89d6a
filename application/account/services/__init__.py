"""账号应用服务"""

from application.account.services.identity_provisioning_service import IdentityProvisioningService

__all__ = ["IdentityProvisioningService"]
