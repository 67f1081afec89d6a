"""
配置容器（ConfigContainer）

提供全局配置与日志初始化，是其他容器的依赖根。
"""

import logging

from dependency_injector import containers, providers

from infrastructure.config.settings import Settings, get_settings


def configure_logging(settings: Settings) -> logging.Logger:
    """
    按配置初始化根日志记录器

    Args:
        settings: 应用配置

    Returns:
        应用日志记录器
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    return logging.getLogger(settings.app_name)


class ConfigContainer(containers.DeclarativeContainer):
    """配置容器 - 管理配置与日志"""

    # 全局配置（单例）
    settings: providers.Singleton[Settings] = providers.Singleton(get_settings)

    # 应用日志记录器（单例，首次获取时初始化日志）
    logger = providers.Singleton(configure_logging, settings=settings)
