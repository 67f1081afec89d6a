"""邮件服务应用服务"""

from application.service.services.service_registry import (
    RegistrySnapshot,
    ServiceRegistry,
    get_registry,
    init_registry,
    reset_registry,
)
from application.service.services.service_handles import (
    LocalServiceHandle,
    NullServiceHandle,
    RemoteServiceHandle,
    ServiceHandle,
)
from application.service.services.service_resolver import ServiceResolver

__all__ = [
    "RegistrySnapshot",
    "ServiceRegistry",
    "init_registry",
    "get_registry",
    "reset_registry",
    "ServiceHandle",
    "LocalServiceHandle",
    "RemoteServiceHandle",
    "NullServiceHandle",
    "ServiceResolver",
]
