"""
基础设施容器（InfraContainer）

管理所有基础设施组件：数据库、仓储实现、身份存储、同步游标存储、
服务描述加载器与远程服务传输。
依赖 ConfigContainer 获取配置。
"""

from dependency_injector import containers, providers
from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from domain.identity.value_objects.sync_authority import SyncAuthority
from domain.service.services.local_service_table import local_services
from infrastructure.account.repositories.sqlalchemy_account_repository import SqlAlchemyAccountRepository
from infrastructure.database.database_factory import DatabaseFactory
from infrastructure.identity.services.sqlalchemy_identity_store import SqlAlchemyIdentityStore
from infrastructure.service.loaders.xml_service_descriptor_loader import XmlServiceDescriptorLoader
from infrastructure.service.transport.http_service_transport import HttpServiceTransport
from infrastructure.sync_state.repositories.sqlalchemy_sync_cursor_store import SqlAlchemySyncCursorStore


class InfraContainer(containers.DeclarativeContainer):
    """基础设施容器 - 管理技术实现"""

    # 依赖配置容器
    config = providers.DependenciesContainer()

    # ============ 数据库 ============

    # 数据库引擎（单例）
    db_engine: providers.Singleton[Engine] = providers.Singleton(
        DatabaseFactory.create_engine,
        settings=config.settings,
    )

    # Session 工厂（单例）
    db_session_factory: providers.Singleton[sessionmaker] = providers.Singleton(
        DatabaseFactory.create_session_factory,
        engine=db_engine
    )

    # 数据库 Session（每次请求新实例）
    db_session = providers.Factory(
        lambda session_factory: session_factory(),
        session_factory=db_session_factory
    )

    # ============ 仓储 ============

    # 账号仓储
    account_repository = providers.Factory(
        SqlAlchemyAccountRepository,
        session=db_session
    )

    # ============ 身份与同步状态 ============

    # 身份存储
    identity_store = providers.Factory(
        SqlAlchemyIdentityStore,
        session=db_session,
        encryption_key=config.settings.provided.encryption_key,
    )

    # 日历同步游标存储
    calendar_cursor_store = providers.Factory(
        SqlAlchemySyncCursorStore,
        session=db_session,
        authority=SyncAuthority.CALENDAR,
    )

    # 联系人同步游标存储
    contacts_cursor_store = providers.Factory(
        SqlAlchemySyncCursorStore,
        session=db_session,
        authority=SyncAuthority.CONTACTS,
    )

    # ============ 邮件服务 ============

    # 本地服务实现表（进程级）
    local_service_table = providers.Object(local_services)

    # 服务描述加载器
    service_descriptor_loader = providers.Singleton(
        XmlServiceDescriptorLoader,
        path=config.settings.provided.services_file,
    )

    # 远程服务传输（单例，复用 HTTP 连接）
    service_transport = providers.Singleton(
        HttpServiceTransport,
        timeout=config.settings.provided.service_transport_timeout,
    )
