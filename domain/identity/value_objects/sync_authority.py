"""同步数据源枚举"""

from enum import Enum


class SyncAuthority(str, Enum):
    """身份可单独开关同步的数据源"""

    EMAIL = "mail.provider"
    """邮件"""

    LEGACY_EMAIL = "mail.provider.legacy"
    """旧版邮件数据源名，读取同步开关时作为 EMAIL 的回退"""

    CONTACTS = "contacts"
    """联系人"""

    CALENDAR = "calendar"
    """日历"""
