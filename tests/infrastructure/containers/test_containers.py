"""依赖注入容器测试"""

import pytest
from cryptography.fernet import Fernet

from application.account.services.identity_provisioning_service import IdentityProvisioningService
from application.commands.account.migrate_account_type import MigrateAccountTypeCommand
from application.handlers.account.migrate_account_type_handler import MigrateAccountTypeHandler
from application.service.services.service_registry import get_registry, reset_registry
from application.service.services.service_resolver import ServiceResolver
from domain.account.entities.account import Account
from domain.account.entities.host_auth import HostAuth
from infrastructure.account.repositories.sqlalchemy_account_repository import SqlAlchemyAccountRepository
from infrastructure.config.settings import Settings
from infrastructure.containers import bootstrap
from infrastructure.service.transport.http_service_transport import HttpServiceTransport
from infrastructure.sync_state.repositories.sqlalchemy_sync_cursor_store import SqlAlchemySyncCursorStore


@pytest.fixture(autouse=True)
def clean_registry():
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def boot():
    settings = Settings(
        _env_file=None,
        app_env="test",
        encryption_key=Fernet.generate_key().decode(),
        service_transport_timeout=2.5,
        account_type_migrations={"pop3": "imap"},
    )
    return bootstrap(settings)


class TestContainers:
    """容器装配测试"""

    def test_settings_override(self, boot):
        """测试注入的配置生效"""
        assert boot.config.settings().app_env == "test"

    def test_infrastructure_providers(self, boot):
        """测试基础设施组件"""
        assert isinstance(boot.infra.account_repository(), SqlAlchemyAccountRepository)
        assert boot.infra.calendar_cursor_store().authority == "calendar"
        assert boot.infra.contacts_cursor_store().authority == "contacts"
        assert isinstance(boot.infra.contacts_cursor_store(), SqlAlchemySyncCursorStore)

        transport = boot.infra.service_transport()
        assert isinstance(transport, HttpServiceTransport)
        assert transport is boot.infra.service_transport()

    def test_registry_uses_bundled_services(self, boot):
        """测试注册表使用随包发布的服务描述并登记为进程级实例"""
        registry = boot.app.service_registry()

        assert registry is get_registry()
        assert registry.lookup("eas") is not None

    def test_application_providers(self, boot):
        """测试应用层组件"""
        assert isinstance(boot.app.service_resolver(), ServiceResolver)
        assert isinstance(boot.app.identity_provisioning_service(), IdentityProvisioningService)
        assert isinstance(boot.app.migrate_account_type_handler(), MigrateAccountTypeHandler)

    def test_resolver_resolves_remote_handle(self, boot):
        """测试解析器可按协议解析远程句柄"""
        handle = boot.app.service_resolver().resolve_by_protocol("imap")

        assert handle.is_null is False
        assert handle.address == "http://127.0.0.1:8702"

    @pytest.mark.asyncio
    async def test_handler_uses_configured_protocol_mapping(self, boot):
        """测试命令未携带映射时使用配置中的默认协议映射"""
        repository = boot.infra.account_repository()
        host_auth = repository.add_host_auth(HostAuth(protocol="pop3", address="mail.x.com", login="u"))
        account = repository.add(Account(email_address="u@x.com", host_auth_recv_id=host_auth.id))

        result = await boot.app.migrate_account_type_handler().handle(
            MigrateAccountTypeCommand(account_id=account.id)
        )

        # pop3 已映射到 imap，停在查找旧身份这一步
        assert result.error_code == "IDENTITY_NOT_FOUND"
        assert result.migrated is False
