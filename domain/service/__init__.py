"""
邮件服务界限上下文

提供协议后端的领域模型，包括：
- ServiceDescriptor 值对象
- ServiceLocality, SyncWindow, DeletePolicy 枚举
- EmailService, ServiceDescriptorLoader, ServiceTransport 接口
- LocalServiceTable 本地服务实现表
"""

from domain.service.value_objects.service_descriptor import ServiceDescriptor
from domain.service.value_objects.service_enums import (
    DeletePolicy,
    ServiceLocality,
    SyncWindow,
)
from domain.service.services.email_service import API_LEVEL, EmailService, EmailServiceCallback
from domain.service.services.service_descriptor_loader import (
    RawServiceDescriptor,
    ServiceDescriptorLoader,
)
from domain.service.services.service_transport import ServiceTransport
from domain.service.services.local_service_table import LocalServiceTable, local_services

__all__ = [
    "ServiceDescriptor",
    "ServiceLocality",
    "SyncWindow",
    "DeletePolicy",
    "API_LEVEL",
    "EmailService",
    "EmailServiceCallback",
    "RawServiceDescriptor",
    "ServiceDescriptorLoader",
    "ServiceTransport",
    "LocalServiceTable",
    "local_services",
]
