"""
XML 服务描述加载器

从 services.xml 读取 <emailservice> 元素，属性名为 camelCase，
转换为 ServiceDescriptor.from_raw 接受的原始记录。

示例：
    <services>
        <emailservice
            protocol="imap"
            accountType="mail.imap"
            name="IMAP"
            intent="http://127.0.0.1:8701"
            port="143"
            portSsl="993"
            syncIntervals="-1,5,15,30,60" />
    </services>
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional, Union

from domain.common.exceptions import ServiceConfigurationException
from domain.service.services.service_descriptor_loader import (
    RawServiceDescriptor,
    ServiceDescriptorLoader,
)

# 随包发布的默认服务描述
DEFAULT_SERVICES_FILE = Path(__file__).resolve().parent.parent / "resources" / "services.xml"

ELEMENT_NAME = "emailservice"


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _parse_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# XML 属性 -> (记录字段, 转换函数)
_ATTRIBUTES: Dict[str, tuple] = {
    "protocol": ("protocol", str),
    "accountType": ("identity_type", str),
    "name": ("name", str),
    "hide": ("hide", _parse_bool),
    "serviceClass": ("local_handler_ref", str),
    "intent": ("remote_address", str),
    "port": ("port", int),
    "portSsl": ("port_ssl", int),
    "defaultSsl": ("default_ssl", _parse_bool),
    "offerTls": ("offer_tls", _parse_bool),
    "offerCerts": ("offer_certs", _parse_bool),
    "usesSmtp": ("uses_smtp", _parse_bool),
    "offerLocalDeletes": ("offer_local_deletes", _parse_bool),
    "defaultLocalDeletes": ("default_local_deletes", int),
    "offerPrefix": ("offer_prefix", _parse_bool),
    "usesAutodiscover": ("uses_autodiscover", _parse_bool),
    "offerLookback": ("offer_lookback", _parse_bool),
    "defaultLookback": ("default_lookback", int),
    "syncChanges": ("sync_changes", _parse_bool),
    "syncContacts": ("sync_contacts", _parse_bool),
    "syncCalendar": ("sync_calendar", _parse_bool),
    "offerAttachmentPreload": ("offer_attachment_preload", _parse_bool),
    "syncIntervalStrings": ("sync_interval_strings", _parse_list),
    "syncIntervals": ("sync_intervals", _parse_list),
    "defaultSyncInterval": ("default_sync_interval", int),
    "inferPrefix": ("infer_prefix", str),
    "offerLoadMore": ("offer_load_more", _parse_bool),
    "requiresSetup": ("requires_setup", _parse_bool),
}


class XmlServiceDescriptorLoader(ServiceDescriptorLoader):
    """
    XML 服务描述加载器

    每次 load() 都重新读取文件；缓存由注册表负责。
    未知属性记录 debug 日志后忽略。
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        初始化加载器

        Args:
            path: services.xml 路径，为空时使用随包发布的默认文件
            logger: 日志记录器（可选）
        """
        self._path = Path(path) if path else DEFAULT_SERVICES_FILE
        self._logger = logger or logging.getLogger(__name__)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> List[RawServiceDescriptor]:
        """
        读取全部 <emailservice> 记录（文档顺序）

        Raises:
            ServiceConfigurationException: 文件不存在、XML 无法解析或属性值类型错误
        """
        try:
            tree = ET.parse(self._path)
        except FileNotFoundError as e:
            raise ServiceConfigurationException(
                reason=f"Services file not found: {self._path}"
            ) from e
        except ET.ParseError as e:
            raise ServiceConfigurationException(
                reason=f"Failed to parse {self._path}: {e}"
            ) from e

        records = [self._to_record(element) for element in tree.getroot().iter(ELEMENT_NAME)]
        self._logger.info(f"Loaded {len(records)} service descriptors from {self._path}")
        return records

    def _to_record(self, element: ET.Element) -> RawServiceDescriptor:
        protocol = element.get("protocol")
        record: RawServiceDescriptor = {}

        for attribute, raw_value in element.attrib.items():
            mapping = _ATTRIBUTES.get(attribute)
            if mapping is None:
                self._logger.debug(f"Ignoring unknown attribute '{attribute}' for {protocol}")
                continue

            key, convert = mapping
            try:
                record[key] = convert(raw_value)
            except ValueError as e:
                raise ServiceConfigurationException(
                    reason=f"Invalid value for '{attribute}': {e}",
                    protocol=protocol,
                ) from e

        return record

