"""邮件服务相关枚举类型"""

from enum import Enum, IntEnum


class ServiceLocality(str, Enum):
    """服务部署位置枚举"""

    LOCAL = "local"
    """进程内服务（通过本地实现表实例化）"""

    REMOTE = "remote"
    """远程服务（通过地址访问）"""


class SyncWindow(IntEnum):
    """邮件同步回溯窗口"""

    ACCOUNT = 0
    ONE_DAY = 1
    THREE_DAYS = 2
    ONE_WEEK = 3
    TWO_WEEKS = 4
    ONE_MONTH = 5
    ALL = 6


class DeletePolicy(IntEnum):
    """本地删除策略"""

    NEVER = 0
    ON_DELETE = 1 << 1
