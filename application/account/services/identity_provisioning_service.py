"""身份创建服务"""

import logging
from typing import Optional, Union

from application.service.services.service_registry import ServiceRegistry
from domain.account.entities.account import Account
from domain.account.repositories.account_repository import AccountRepository
from domain.common.exceptions import EntityNotFoundException
from domain.identity.services.identity_store import IdentityStore
from domain.identity.value_objects.identity import Identity, IdentityOptions


class IdentityProvisioningService:
    """
    为账号在身份存储中创建身份

    身份类型取自账号收件 HostAuth 当前协议的服务描述；
    用户名为账号邮箱地址，密码为 HostAuth 中解密后的密码。
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        account_repository: AccountRepository,
        identity_store: IdentityStore,
        encryption_key: Union[str, bytes],
        logger: Optional[logging.Logger] = None,
    ):
        self._registry = registry
        self._account_repository = account_repository
        self._identity_store = identity_store
        self._encryption_key = encryption_key
        self._logger = logger or logging.getLogger(__name__)

    async def provision(
        self,
        account: Account,
        email: bool,
        calendar: bool,
        contacts: bool,
    ) -> Optional[Identity]:
        """
        创建身份

        Args:
            account: 账号
            email: 是否同步邮件
            calendar: 是否同步日历
            contacts: 是否同步联系人

        Returns:
            新创建的身份；收件 HostAuth 不存在时返回 None

        Raises:
            EntityNotFoundException: 如果 HostAuth 的协议没有服务描述，或描述未声明身份类型
            IdentityStoreException: 如果身份存储创建失败
        """
        host_auth = None
        if account.host_auth_recv_id is not None:
            host_auth = self._account_repository.get_host_auth(account.host_auth_recv_id)
        if host_auth is None:
            return None

        descriptor = self._registry.lookup(host_auth.protocol)
        if descriptor is None:
            raise EntityNotFoundException(entity="ServiceDescriptor", entity_id=host_auth.protocol)
        if descriptor.identity_type is None:
            raise EntityNotFoundException(entity="IdentityType", entity_id=host_auth.protocol)

        options = IdentityOptions(
            username=account.email_address,
            password=host_auth.get_decrypted_password(self._encryption_key) or "",
            email_sync_enabled=email,
            contacts_sync_enabled=contacts,
            calendar_sync_enabled=calendar,
        )
        identity = await self._identity_store.add_identity(descriptor.identity_type, options)
        self._logger.info(f"Created identity {identity}")
        return identity
