"""邮件服务值对象模块"""

from domain.service.value_objects.service_descriptor import ServiceDescriptor
from domain.service.value_objects.service_enums import (
    DeletePolicy,
    ServiceLocality,
    SyncWindow,
)

__all__ = [
    "ServiceDescriptor",
    "ServiceLocality",
    "SyncWindow",
    "DeletePolicy",
]
