"""账号命令模块"""

from application.commands.account.migrate_account_type import (
    MigrateAccountTypeCommand,
    MigrateAccountTypeResult,
)

__all__ = [
    "MigrateAccountTypeCommand",
    "MigrateAccountTypeResult",
]
