"""身份值对象"""

from dataclasses import dataclass, field

from domain.common.base_value_object import BaseValueObject
from domain.common.exceptions import InvalidValueObjectException


@dataclass(frozen=True)
class Identity(BaseValueObject):
    """
    身份存储中的身份

    以 (name, type) 唯一标识；同步游标也以身份为命名空间。

    Attributes:
        name: 身份名（账号邮箱地址）
        type: 身份类型（ServiceDescriptor.identity_type）
    """

    name: str
    type: str

    def validate(self) -> None:
        if not self.name:
            raise InvalidValueObjectException(
                value_object_type="Identity",
                value=self.name,
                reason="Identity name cannot be empty"
            )
        if not self.type:
            raise InvalidValueObjectException(
                value_object_type="Identity",
                value=self.type,
                reason="Identity type cannot be empty"
            )

    def __str__(self) -> str:
        return f"{self.name} ({self.type})"


@dataclass(frozen=True)
class IdentityOptions(BaseValueObject):
    """
    创建身份时的选项

    Attributes:
        username: 登录名（账号邮箱地址）
        password: 明文密码
        email_sync_enabled: 是否同步邮件
        contacts_sync_enabled: 是否同步联系人
        calendar_sync_enabled: 是否同步日历
    """

    username: str
    password: str = field(default="", repr=False)
    email_sync_enabled: bool = True
    contacts_sync_enabled: bool = False
    calendar_sync_enabled: bool = False

    def validate(self) -> None:
        if not self.username:
            raise InvalidValueObjectException(
                value_object_type="IdentityOptions",
                value=self.username,
                reason="Username cannot be empty"
            )
