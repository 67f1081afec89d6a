"""
邮件账号界限上下文

提供账号的领域模型，包括：
- Account 聚合根
- HostAuth 实体
- EncryptedPassword 值对象
- AccountRepository 仓储接口
"""

from domain.account.entities.account import Account
from domain.account.entities.host_auth import HostAuth
from domain.account.value_objects.encrypted_password import EncryptedPassword
from domain.account.repositories.account_repository import AccountRepository

__all__ = [
    "Account",
    "HostAuth",
    "EncryptedPassword",
    "AccountRepository",
]
