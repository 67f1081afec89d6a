"""
应用配置管理

使用 pydantic-settings 管理环境变量和配置
"""

from typing import Dict, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    应用配置类

    自动从环境变量和 .env 文件读取配置
    """

    # ========== 应用环境 ==========
    app_env: Literal["test", "dev", "staging", "prod"] = "dev"
    app_name: str = "MailServiceRegistry"
    app_version: str = "1.0.0"
    debug: bool = False

    # ========== 数据库配置 ==========
    # 开发环境（SQLite）
    dev_db_path: str = "data/dev.db"

    # Staging 环境
    staging_database_url: str = ""
    staging_db_pool_size: int = 10
    staging_db_max_overflow: int = 20

    # 生产环境
    prod_database_url: str = ""
    prod_db_pool_size: int = 20
    prod_db_max_overflow: int = 40

    # ========== 日志配置 ==========
    log_level: str = "INFO"

    # ========== 安全配置 ==========
    # Fernet 密钥，用于 HostAuth 与身份存储中的密码加密
    encryption_key: str = ""

    # ========== 邮件服务配置 ==========
    # 服务描述资源（XML），为空时使用随包发布的默认文件
    services_file: str = ""
    # 远程服务请求超时（秒）
    service_transport_timeout: float = 10.0

    # ========== 账号迁移配置 ==========
    # 协议映射：{"<旧协议>": "<新协议>", "<旧协议>_type": "<游标身份类型>"}
    account_type_migrations: Dict[str, str] = Field(default_factory=dict)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # 忽略未定义的环境变量
    )

    @property
    def is_test(self) -> bool:
        """是否为测试环境"""
        return self.app_env == "test"

    @property
    def is_dev(self) -> bool:
        """是否为开发环境"""
        return self.app_env == "dev"

    @property
    def is_staging(self) -> bool:
        """是否为 staging 环境"""
        return self.app_env == "staging"

    @property
    def is_prod(self) -> bool:
        """是否为生产环境"""
        return self.app_env == "prod"

    @property
    def database_url(self) -> str:
        """获取当前环境的数据库 URL"""
        if self.is_test:
            return "sqlite:///:memory:"
        elif self.is_dev:
            return f"sqlite:///{self.dev_db_path}"
        elif self.is_staging:
            return self.staging_database_url
        else:  # prod
            return self.prod_database_url


# 全局配置实例（单例）
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    获取配置实例（单例模式）

    Returns:
        Settings 实例
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """丢弃配置单例（测试用）"""
    global _settings
    _settings = None
