"""账号处理器模块"""

from application.handlers.account.migrate_account_type_handler import (
    MigrateAccountTypeHandler,
    MigrationContext,
    incomplete_flag,
)

__all__ = [
    "MigrateAccountTypeHandler",
    "MigrationContext",
    "incomplete_flag",
]
