"""领域异常定义

所有领域异常继承自 DomainException，携带可读的 message 和机器可读的 code。
"""

from typing import Any, Optional


class DomainException(Exception):
    """领域异常基类"""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class InvalidValueObjectException(DomainException):
    """值对象校验失败"""

    def __init__(self, value_object_type: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid {value_object_type} ({value!r}): {reason}",
            code="INVALID_VALUE_OBJECT",
        )
        self.value_object_type = value_object_type
        self.value = value
        self.reason = reason


class InvalidOperationException(DomainException):
    """非法的领域操作"""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Operation '{operation}' is not allowed: {reason}",
            code="INVALID_OPERATION",
        )
        self.operation = operation
        self.reason = reason


class EntityNotFoundException(DomainException):
    """实体不存在"""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            message=f"{entity} '{entity_id}' not found",
            code=f"{entity.upper()}_NOT_FOUND",
        )
        self.entity = entity
        self.entity_id = entity_id


class ServiceConfigurationException(DomainException):
    """
    服务描述配置错误

    描述资源编写错误（缺少/同时声明本地与远程实现、无法解析等），
    属于启动期致命错误，不应被吞掉。
    """

    def __init__(self, reason: str, protocol: Optional[str] = None):
        prefix = f"Service descriptor '{protocol}'" if protocol else "Service descriptor"
        super().__init__(
            message=f"{prefix}: {reason}",
            code="SERVICE_CONFIGURATION_ERROR",
        )
        self.reason = reason
        self.protocol = protocol


class ServiceTransportException(DomainException):
    """远程服务通信失败"""

    def __init__(self, message: str, address: str):
        super().__init__(message=message, code="SERVICE_TRANSPORT_ERROR")
        self.address = address


class IdentityStoreException(DomainException):
    """身份存储操作失败（创建/删除身份）"""

    def __init__(
        self,
        message: str,
        name: Optional[str] = None,
        identity_type: Optional[str] = None,
    ):
        super().__init__(message=message, code="IDENTITY_STORE_ERROR")
        self.name = name
        self.identity_type = identity_type


class SyncStateAccessException(DomainException):
    """同步游标读写失败"""

    def __init__(self, message: str, authority: Optional[str] = None):
        super().__init__(message=message, code="SYNC_STATE_ACCESS_ERROR")
        self.authority = authority


class SagaStepFailureException(DomainException):
    """
    账号迁移步骤失败

    仅在 incomplete 标记已恢复之后才会抛给调用方。
    """

    def __init__(self, step: str, account_id: Any, reason: str):
        super().__init__(
            message=f"Account {account_id} migration failed at step '{step}': {reason}",
            code="SAGA_STEP_FAILURE",
        )
        self.step = step
        self.account_id = account_id
        self.reason = reason
