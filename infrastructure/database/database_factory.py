"""
数据库工厂

根据当前环境创建 Engine 与 Session 工厂：
- test: SQLite 内存数据库（StaticPool，所有连接共享同一个库）
- dev: SQLite 文件数据库
- staging / prod: 配置中的数据库 URL，带连接池参数
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from infrastructure.config.settings import Settings, get_settings
from infrastructure.database.base import Base


class Environment(str, Enum):
    """运行环境"""

    TEST = "test"
    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class DatabaseFactory:
    """数据库工厂"""

    @staticmethod
    def create_engine(settings: Optional[Settings] = None) -> Engine:
        """
        创建数据库引擎

        Args:
            settings: 配置，默认使用全局配置

        Returns:
            SQLAlchemy Engine
        """
        settings = settings or get_settings()
        url = settings.database_url
        env = Environment(settings.app_env)

        if env == Environment.TEST:
            engine = create_engine(
                url,
                echo=settings.debug,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        elif env == Environment.DEV:
            Path(settings.dev_db_path).parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(
                url,
                echo=settings.debug,
                connect_args={"check_same_thread": False},
            )
        else:
            if not url:
                raise RuntimeError(f"Database URL is not configured for environment '{env.value}'")
            pool_size = settings.staging_db_pool_size if env == Environment.STAGING else settings.prod_db_pool_size
            max_overflow = (
                settings.staging_db_max_overflow if env == Environment.STAGING else settings.prod_db_max_overflow
            )
            engine = create_engine(
                url,
                echo=settings.debug,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
            )

        DatabaseFactory.create_all(engine)
        return engine

    @staticmethod
    def create_session_factory(engine: Engine) -> sessionmaker:
        """创建 Session 工厂"""
        return sessionmaker(bind=engine, expire_on_commit=False)

    @staticmethod
    def create_all(engine: Engine) -> None:
        """创建全部数据表（已存在的表跳过）"""
        # 导入模型以注册到 Base.metadata
        from infrastructure.account.models import account_model  # noqa: F401
        from infrastructure.identity.models import identity_model  # noqa: F401
        from infrastructure.sync_state.models import sync_state_model  # noqa: F401

        Base.metadata.create_all(engine)


# 模块级缓存
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """获取全局数据库引擎"""
    global _engine
    if _engine is None:
        _engine = DatabaseFactory.create_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    """获取全局 Session 工厂"""
    global _session_factory
    if _session_factory is None:
        _session_factory = DatabaseFactory.create_session_factory(get_engine())
    return _session_factory


def get_session() -> Session:
    """创建新的数据库 Session"""
    return get_session_factory()()


def reset_database() -> None:
    """释放全局引擎（测试用）"""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
