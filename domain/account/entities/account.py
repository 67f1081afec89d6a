"""邮件账号聚合根实体"""

from dataclasses import dataclass, field
from typing import ClassVar, Optional

from domain.common.base_entity import BaseEntity
from domain.common.exceptions import InvalidOperationException


@dataclass(eq=False)
class Account(BaseEntity):
    """
    邮件账号聚合根

    Attributes:
        display_name: 显示名称
        email_address: 邮箱地址（同时作为身份存储中的身份名）
        host_auth_recv_id: 收件服务器 HostAuth ID
        host_auth_send_id: 发件服务器 HostAuth ID
        flags: 账号标志位
        sync_interval: 同步间隔（分钟）
        sync_lookback: 同步回溯窗口
    """

    FLAGS_INCOMPLETE: ClassVar[int] = 1 << 4
    """账号未完成设置/迁移中，不参与与身份存储的自动对账"""

    FLAGS_SECURITY_HOLD: ClassVar[int] = 1 << 5

    display_name: str = field(default="")
    email_address: str = field(default="")
    host_auth_recv_id: Optional[int] = field(default=None)
    host_auth_send_id: Optional[int] = field(default=None)
    flags: int = field(default=0)
    sync_interval: int = field(default=15)
    sync_lookback: int = field(default=0)

    def __post_init__(self) -> None:
        if not self.email_address:
            raise InvalidOperationException(
                operation="create_account",
                reason="Email address cannot be empty"
            )

    def mark_incomplete(self) -> int:
        """
        设置 incomplete 标志

        Returns:
            设置之前的标志位
        """
        prior = self.flags
        self.flags |= self.FLAGS_INCOMPLETE
        self.update_timestamp()
        return prior

    def restore_flags(self, flags: int) -> None:
        self.flags = flags
        self.update_timestamp()

    @property
    def is_incomplete(self) -> bool:
        return bool(self.flags & self.FLAGS_INCOMPLETE)
