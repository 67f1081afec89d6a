"""账号类型迁移命令"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional


@dataclass
class MigrateAccountTypeCommand:
    """
    账号类型迁移命令

    Attributes:
        account_id: 要迁移的账号 ID
        protocol_mapping: 协议映射（为 None 时使用处理器配置的默认映射）
            - "<旧协议>": 新协议
            - "<旧协议>_type": 写回同步游标时使用的身份类型
    """

    account_id: int
    protocol_mapping: Optional[Mapping[str, str]] = None

    def new_protocol_for(self, protocol: str) -> Optional[str]:
        return (self.protocol_mapping or {}).get(protocol)

    def cursor_identity_type_for(self, protocol: str) -> Optional[str]:
        return (self.protocol_mapping or {}).get(f"{protocol}_type")


@dataclass
class MigrateAccountTypeResult:
    """
    账号类型迁移结果

    Attributes:
        success: 是否成功（无需迁移也视为成功）
        account_id: 账号 ID
        migrated: 是否实际执行了迁移
        old_protocol: 原协议
        new_protocol: 新协议
        identity_type: 新身份类型
        restored_cursors: 已写回的同步游标（数据源 -> 是否写回）
        message: 消息
        error_code: 错误码（未迁移时）
            - ACCOUNT_NOT_FOUND: 账号不存在
            - HOST_AUTH_NOT_FOUND: 收件 HostAuth 不存在
            - NOT_MAPPED: 协议不在映射中，无需迁移
            - UNKNOWN_PROTOCOL: 新旧协议缺少服务描述
            - IDENTITY_TYPE_NOT_FOUND: 服务描述未声明身份类型
            - IDENTITY_NOT_FOUND: 旧身份不存在
    """

    success: bool
    account_id: int
    migrated: bool = False
    old_protocol: Optional[str] = None
    new_protocol: Optional[str] = None
    identity_type: Optional[str] = None
    restored_cursors: Dict[str, bool] = field(default_factory=dict)
    message: str = ""
    error_code: Optional[str] = None
