"""服务器认证信息实体"""

from dataclasses import dataclass, field
from typing import Optional, Union

from domain.common.base_entity import BaseEntity
from domain.common.exceptions import InvalidOperationException
from domain.account.value_objects.encrypted_password import EncryptedPassword


@dataclass(eq=False)
class HostAuth(BaseEntity):
    """
    服务器认证信息

    账号的收件/发件服务器配置。protocol 决定由哪个邮件服务处理该账号。

    Attributes:
        protocol: 协议标识（对应 ServiceDescriptor.protocol）
        address: 服务器地址
        port: 服务器端口
        flags: 连接标志位（SSL/TLS 等）
        login: 登录名
        encrypted_password: 加密存储的密码
    """

    protocol: str = field(default="")
    address: str = field(default="")
    port: int = field(default=0)
    flags: int = field(default=0)
    login: str = field(default="")
    encrypted_password: Optional[EncryptedPassword] = field(default=None)

    def __post_init__(self) -> None:
        if not self.protocol:
            raise InvalidOperationException(
                operation="create_host_auth",
                reason="Protocol cannot be empty"
            )

    def change_protocol(self, protocol: str) -> None:
        """切换到新协议"""
        if not protocol:
            raise InvalidOperationException(
                operation="change_protocol",
                reason="Protocol cannot be empty"
            )
        self.protocol = protocol
        self.update_timestamp()

    def get_decrypted_password(self, encryption_key: Union[str, bytes]) -> Optional[str]:
        """获取明文密码，未设置密码时返回 None"""
        if self.encrypted_password is None:
            return None
        return self.encrypted_password.decrypt(encryption_key)
