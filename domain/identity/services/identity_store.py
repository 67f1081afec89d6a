"""身份存储接口"""

from abc import ABC, abstractmethod
from typing import List, Optional

from domain.identity.value_objects.identity import Identity, IdentityOptions
from domain.identity.value_objects.sync_authority import SyncAuthority


class IdentityStore(ABC):
    """
    身份存储接口

    管理每个账号的登录凭证与各数据源的同步开关，以身份类型区分。
    创建与删除可能涉及外部 I/O，以协程形式提供。
    """

    @abstractmethod
    async def add_identity(self, identity_type: str, options: IdentityOptions) -> Identity:
        """
        创建身份

        Args:
            identity_type: 身份类型
            options: 凭证与同步开关

        Returns:
            新创建的身份

        Raises:
            IdentityStoreException: 如果创建失败（包括身份已存在）
        """
        raise NotImplementedError

    @abstractmethod
    async def remove_identity(self, identity: Identity) -> None:
        """
        删除身份

        Raises:
            IdentityStoreException: 如果删除失败
        """
        raise NotImplementedError

    @abstractmethod
    def find_identity(self, name: str, identity_type: str) -> Optional[Identity]:
        """
        查找身份，不存在返回 None

        Raises:
            IdentityStoreException: 如果查询失败
        """
        raise NotImplementedError

    @abstractmethod
    def list_identities(self, identity_type: Optional[str] = None) -> List[Identity]:
        """列出身份，可按类型筛选"""
        raise NotImplementedError

    @abstractmethod
    def is_sync_enabled(self, identity: Identity, authority: SyncAuthority) -> bool:
        """
        读取身份在某数据源上的自动同步开关

        Returns:
            未设置时返回 False

        Raises:
            IdentityStoreException: 如果查询失败
        """
        raise NotImplementedError
