"""邮件账号仓储接口"""

from abc import ABC, abstractmethod
from typing import Optional

from domain.account.entities.account import Account
from domain.account.entities.host_auth import HostAuth


class AccountRepository(ABC):
    """
    邮件账号仓储接口

    定义账号及其 HostAuth 记录的数据访问契约，具体实现在基础设施层。
    """

    @abstractmethod
    def add(self, account: Account) -> Account:
        """
        添加账号

        Returns:
            分配了 ID 的账号实体
        """
        raise NotImplementedError

    @abstractmethod
    def add_host_auth(self, host_auth: HostAuth) -> HostAuth:
        """
        添加 HostAuth 记录

        Returns:
            分配了 ID 的 HostAuth 实体
        """
        raise NotImplementedError

    @abstractmethod
    def get_by_id(self, account_id: int) -> Optional[Account]:
        """根据 ID 获取账号，不存在返回 None"""
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email_address: str) -> Optional[Account]:
        """根据邮箱地址获取账号，不存在返回 None"""
        raise NotImplementedError

    @abstractmethod
    def get_host_auth(self, host_auth_id: int) -> Optional[HostAuth]:
        """根据 ID 获取 HostAuth，不存在返回 None"""
        raise NotImplementedError

    @abstractmethod
    def get_protocol(self, account_id: int) -> Optional[str]:
        """
        获取账号当前使用的协议（收件 HostAuth 的协议）

        Returns:
            协议标识，账号或 HostAuth 不存在返回 None
        """
        raise NotImplementedError

    @abstractmethod
    def set_flags(self, account_id: int, flags: int) -> None:
        """持久化账号标志位"""
        raise NotImplementedError

    @abstractmethod
    def update_host_auth_protocol(self, host_auth_id: int, protocol: str) -> None:
        """将 HostAuth 指向新协议"""
        raise NotImplementedError
