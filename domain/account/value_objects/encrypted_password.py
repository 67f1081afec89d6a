"""加密密码值对象"""

from dataclasses import dataclass
from typing import Union

from cryptography.fernet import Fernet, InvalidToken

from domain.common.base_value_object import BaseValueObject
from domain.common.exceptions import InvalidValueObjectException


@dataclass(frozen=True)
class EncryptedPassword(BaseValueObject):
    """
    加密密码值对象

    HostAuth 与身份存储中的凭证均以 Fernet 对称加密保存。

    Attributes:
        encrypted_value: 加密后的密码字节
    """

    encrypted_value: bytes

    def validate(self) -> None:
        if not self.encrypted_value:
            raise InvalidValueObjectException(
                value_object_type="EncryptedPassword",
                value=None,
                reason="Encrypted password cannot be empty"
            )

    @classmethod
    def from_plain(
        cls,
        plain_password: str,
        encryption_key: Union[str, bytes]
    ) -> "EncryptedPassword":
        """
        从明文密码创建加密密码

        Args:
            plain_password: 明文密码
            encryption_key: Fernet 密钥（32 字节 base64 编码）

        Raises:
            InvalidValueObjectException: 如果密码为空或密钥无效
        """
        if not plain_password:
            raise InvalidValueObjectException(
                value_object_type="EncryptedPassword",
                value=None,
                reason="Password cannot be empty"
            )

        try:
            fernet = Fernet(_as_key(encryption_key))
        except ValueError as e:
            raise InvalidValueObjectException(
                value_object_type="EncryptedPassword",
                value="[REDACTED]",
                reason=f"Failed to encrypt password: {e}"
            ) from e
        return cls(encrypted_value=fernet.encrypt(plain_password.encode("utf-8")))

    @classmethod
    def from_stored(cls, encrypted_value: bytes) -> "EncryptedPassword":
        """从持久化的密文重建（已加密的数据）"""
        return cls(encrypted_value=encrypted_value)

    def decrypt(self, encryption_key: Union[str, bytes]) -> str:
        """
        解密获取明文密码

        Raises:
            InvalidValueObjectException: 如果密钥错误或密文损坏
        """
        try:
            fernet = Fernet(_as_key(encryption_key))
            return fernet.decrypt(self.encrypted_value).decode("utf-8")
        except InvalidToken as e:
            raise InvalidValueObjectException(
                value_object_type="EncryptedPassword",
                value="[ENCRYPTED]",
                reason="Failed to decrypt password: invalid key or corrupted data"
            ) from e
        except ValueError as e:
            raise InvalidValueObjectException(
                value_object_type="EncryptedPassword",
                value="[ENCRYPTED]",
                reason=f"Failed to decrypt password: {e}"
            ) from e

    def __repr__(self) -> str:
        return "EncryptedPassword([ENCRYPTED])"

    def __str__(self) -> str:
        return "[ENCRYPTED]"


def _as_key(encryption_key: Union[str, bytes]) -> bytes:
    return encryption_key if isinstance(encryption_key, bytes) else encryption_key.encode()
