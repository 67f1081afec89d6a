"""IdentityProvisioningService 单元测试"""

from unittest.mock import AsyncMock, Mock

import pytest
from cryptography.fernet import Fernet

from application.account.services.identity_provisioning_service import IdentityProvisioningService
from application.service.services.service_registry import ServiceRegistry
from domain.account.entities.account import Account
from domain.account.entities.host_auth import HostAuth
from domain.account.repositories.account_repository import AccountRepository
from domain.account.value_objects.encrypted_password import EncryptedPassword
from domain.common.exceptions import EntityNotFoundException, IdentityStoreException
from domain.identity.services.identity_store import IdentityStore
from domain.identity.value_objects.identity import Identity
from domain.service.services.service_descriptor_loader import ServiceDescriptorLoader


@pytest.fixture
def encryption_key() -> str:
    """生成测试用加密密钥"""
    return Fernet.generate_key().decode()


@pytest.fixture
def registry() -> ServiceRegistry:
    loader = Mock(spec=ServiceDescriptorLoader)
    loader.load.return_value = [
        {"protocol": "imap", "identity_type": "mail.imap", "remote_address": "http://127.0.0.1:8702"},
    ]
    return ServiceRegistry(loader=loader)


@pytest.fixture
def mock_account_repository() -> Mock:
    return Mock(spec=AccountRepository)


@pytest.fixture
def mock_identity_store() -> Mock:
    store = Mock(spec=IdentityStore)
    store.add_identity = AsyncMock(side_effect=lambda identity_type, options: Identity(options.username, identity_type))
    return store


@pytest.fixture
def service(
    registry: ServiceRegistry,
    mock_account_repository: Mock,
    mock_identity_store: Mock,
    encryption_key: str,
) -> IdentityProvisioningService:
    return IdentityProvisioningService(
        registry=registry,
        account_repository=mock_account_repository,
        identity_store=mock_identity_store,
        encryption_key=encryption_key,
    )


@pytest.fixture
def account() -> Account:
    return Account(id=1, email_address="u@x.com", host_auth_recv_id=3)


class TestProvision:
    """身份创建测试"""

    @pytest.mark.asyncio
    async def test_provision_with_password(
        self,
        service: IdentityProvisioningService,
        mock_account_repository: Mock,
        mock_identity_store: Mock,
        account: Account,
        encryption_key: str,
    ):
        """测试以描述的身份类型创建身份，并传入明文密码与同步开关"""
        mock_account_repository.get_host_auth.return_value = HostAuth(
            id=3,
            protocol="imap",
            encrypted_password=EncryptedPassword.from_plain("pw", encryption_key),
        )

        identity = await service.provision(account, email=True, calendar=False, contacts=True)

        assert identity == Identity("u@x.com", "mail.imap")
        identity_type, options = mock_identity_store.add_identity.call_args.args
        assert identity_type == "mail.imap"
        assert options.username == "u@x.com"
        assert options.password == "pw"
        assert options.email_sync_enabled is True
        assert options.calendar_sync_enabled is False
        assert options.contacts_sync_enabled is True

    @pytest.mark.asyncio
    async def test_provision_without_password(
        self,
        service: IdentityProvisioningService,
        mock_account_repository: Mock,
        mock_identity_store: Mock,
        account: Account,
    ):
        """测试 HostAuth 无密码时使用空密码"""
        mock_account_repository.get_host_auth.return_value = HostAuth(id=3, protocol="imap")

        await service.provision(account, email=True, calendar=False, contacts=False)

        options = mock_identity_store.add_identity.call_args.args[1]
        assert options.password == ""

    @pytest.mark.asyncio
    async def test_provision_missing_host_auth(
        self,
        service: IdentityProvisioningService,
        mock_account_repository: Mock,
        mock_identity_store: Mock,
        account: Account,
    ):
        """测试 HostAuth 不存在返回 None"""
        mock_account_repository.get_host_auth.return_value = None

        assert await service.provision(account, email=True, calendar=False, contacts=False) is None
        mock_identity_store.add_identity.assert_not_called()

    @pytest.mark.asyncio
    async def test_provision_unknown_protocol(
        self,
        service: IdentityProvisioningService,
        mock_account_repository: Mock,
        account: Account,
    ):
        """测试协议没有服务描述"""
        mock_account_repository.get_host_auth.return_value = HostAuth(id=3, protocol="gone")

        with pytest.raises(EntityNotFoundException) as exc_info:
            await service.provision(account, email=True, calendar=False, contacts=False)

        assert exc_info.value.code == "SERVICEDESCRIPTOR_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_provision_store_failure_propagates(
        self,
        service: IdentityProvisioningService,
        mock_account_repository: Mock,
        mock_identity_store: Mock,
        account: Account,
    ):
        """测试身份存储失败直接抛出"""
        mock_account_repository.get_host_auth.return_value = HostAuth(id=3, protocol="imap")
        mock_identity_store.add_identity.side_effect = IdentityStoreException("store offline")

        with pytest.raises(IdentityStoreException):
            await service.provision(account, email=True, calendar=False, contacts=False)

    @pytest.mark.asyncio
    async def test_provision_descriptor_without_identity_type(
        self,
        mock_account_repository: Mock,
        mock_identity_store: Mock,
        account: Account,
        encryption_key: str,
    ):
        """测试服务描述未声明身份类型时视为不存在"""
        loader = Mock(spec=ServiceDescriptorLoader)
        loader.load.return_value = [{"protocol": "imap", "local_handler_ref": "X"}]
        service = IdentityProvisioningService(
            registry=ServiceRegistry(loader=loader),
            account_repository=mock_account_repository,
            identity_store=mock_identity_store,
            encryption_key=encryption_key,
        )
        mock_account_repository.get_host_auth.return_value = HostAuth(id=3, protocol="imap")

        with pytest.raises(EntityNotFoundException) as exc_info:
            await service.provision(account, email=True, calendar=False, contacts=False)

        assert exc_info.value.code == "IDENTITYTYPE_NOT_FOUND"
        mock_identity_store.add_identity.assert_not_called()
