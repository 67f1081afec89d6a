"""邮件服务基础设施：服务描述加载与远程传输"""

from infrastructure.service.loaders.xml_service_descriptor_loader import (
    DEFAULT_SERVICES_FILE,
    XmlServiceDescriptorLoader,
)
from infrastructure.service.transport.http_service_transport import HttpServiceTransport

__all__ = [
    "DEFAULT_SERVICES_FILE",
    "XmlServiceDescriptorLoader",
    "HttpServiceTransport",
]
