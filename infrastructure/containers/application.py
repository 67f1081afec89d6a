"""
应用容器（AppContainer）

管理应用层组件：服务注册表、服务解析器、身份创建服务与账号迁移处理器。
依赖 InfraContainer 获取基础设施。
"""

from dependency_injector import containers, providers

from application.account.services.identity_provisioning_service import IdentityProvisioningService
from application.handlers.account.migrate_account_type_handler import MigrateAccountTypeHandler
from application.service.services.service_registry import init_registry
from application.service.services.service_resolver import ServiceResolver


class AppContainer(containers.DeclarativeContainer):
    """应用容器 - 管理应用层服务"""

    # 依赖配置容器
    config = providers.DependenciesContainer()

    # 依赖基础设施容器
    infra = providers.DependenciesContainer()

    # ============ 服务注册表 ============

    # 进程级注册表（首次查询时填充）
    service_registry = providers.Singleton(
        init_registry,
        loader=infra.service_descriptor_loader,
        local_services=infra.local_service_table,
    )

    # ============ 应用服务 ============

    # 服务解析器
    service_resolver = providers.Factory(
        ServiceResolver,
        registry=service_registry,
        account_repository=infra.account_repository,
        local_services=infra.local_service_table,
        transport=infra.service_transport,
    )

    # 身份创建服务
    identity_provisioning_service = providers.Factory(
        IdentityProvisioningService,
        registry=service_registry,
        account_repository=infra.account_repository,
        identity_store=infra.identity_store,
        encryption_key=config.settings.provided.encryption_key,
    )

    # ============ 命令处理器 ============

    # 账号类型迁移 Handler
    migrate_account_type_handler = providers.Factory(
        MigrateAccountTypeHandler,
        registry=service_registry,
        account_repository=infra.account_repository,
        identity_store=infra.identity_store,
        calendar_cursor_store=infra.calendar_cursor_store,
        contacts_cursor_store=infra.contacts_cursor_store,
        provisioning_service=identity_provisioning_service,
        protocol_mapping=config.settings.provided.account_type_migrations,
    )
