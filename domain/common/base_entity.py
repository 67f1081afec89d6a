"""实体基类"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass(eq=False)
class BaseEntity:
    """
    实体基类

    实体以 ID 区分身份；ID 由持久化层分配，未持久化的实体 ID 为 None。

    Attributes:
        id: 实体 ID
        created_at: 创建时间
        updated_at: 最近更新时间
        version: 版本号（乐观锁）
    """

    id: Optional[int] = field(default=None)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = field(default=None)
    version: int = field(default=0)

    def update_timestamp(self) -> None:
        """刷新更新时间并递增版本号"""
        self.updated_at = datetime.now(timezone.utc)
        self.version += 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return NotImplemented
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        if self.id is None:
            return id(self)
        return hash((self.__class__.__name__, self.id))
