"""同步游标存储接口"""

from abc import ABC, abstractmethod
from typing import Optional

from domain.identity.value_objects.identity import Identity


class SyncCursorStore(ABC):
    """
    同步游标存储接口

    保存某数据源（日历或联系人）的增量同步状态，以身份为命名空间。
    游标内容对本系统不透明，按字节原样读写。
    """

    @property
    @abstractmethod
    def authority(self) -> str:
        """所属数据源"""
        raise NotImplementedError

    @abstractmethod
    def get_cursor(self, identity: Identity) -> Optional[bytes]:
        """
        读取游标

        Returns:
            游标字节，尚无游标返回 None

        Raises:
            SyncStateAccessException: 如果读取失败
        """
        raise NotImplementedError

    @abstractmethod
    def set_cursor(self, identity: Identity, data: bytes) -> None:
        """
        写入游标（覆盖已有值）

        Raises:
            SyncStateAccessException: 如果写入失败
        """
        raise NotImplementedError
