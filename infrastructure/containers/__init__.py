"""
依赖注入容器

容器层次：ConfigContainer -> InfraContainer -> AppContainer

使用示例：
    from infrastructure.containers import bootstrap

    boot = bootstrap()
    handler = boot.app.migrate_account_type_handler()
"""

from dataclasses import dataclass
from typing import Optional

from infrastructure.config.settings import Settings
from .application import AppContainer
from .config import ConfigContainer
from .infrastructure import InfraContainer


@dataclass
class Bootstrap:
    """已装配的容器集合"""

    config: ConfigContainer
    infra: InfraContainer
    app: AppContainer


def bootstrap(settings: Optional[Settings] = None) -> Bootstrap:
    """
    创建并装配全部容器

    Args:
        settings: 覆盖全局配置（测试用）

    Returns:
        Bootstrap 容器集合
    """
    config = ConfigContainer()
    if settings is not None:
        config.settings.override(settings)
    config.logger()

    infra = InfraContainer(config=config)
    app = AppContainer(config=config, infra=infra)
    return Bootstrap(config=config, infra=infra, app=app)


__all__ = [
    "AppContainer",
    "Bootstrap",
    "ConfigContainer",
    "InfraContainer",
    "bootstrap",
]
