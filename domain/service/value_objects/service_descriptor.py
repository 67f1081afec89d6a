"""邮件服务描述值对象"""

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Tuple

from domain.common.base_value_object import BaseValueObject
from domain.common.exceptions import ServiceConfigurationException
from domain.service.value_objects.service_enums import (
    DeletePolicy,
    ServiceLocality,
    SyncWindow,
)


@dataclass(frozen=True)
class ServiceDescriptor(BaseValueObject):
    """
    邮件服务描述

    描述一个协议后端的身份与能力，注册表填充时创建，进程内不再修改。
    local_handler_ref 与 remote_address 有且仅有一个被设置：
    前者表示进程内服务，后者表示远程服务。

    Attributes:
        protocol: 协议标识（唯一键），如 imap、pop3、eas
        identity_type: 身份存储使用的身份类型（未声明时无法创建身份）
        name: 显示名称
        hide: 是否在账号设置中隐藏
        local_handler_ref: 本地实现表中的引用名（本地服务）
        remote_address: 远程服务地址（远程服务）
        port / port_ssl: 默认端口 / SSL 端口
        default_ssl: 默认启用 SSL
        default_lookback: 默认同步窗口
        default_sync_interval: 默认同步间隔（分钟）
        sync_interval_strings / sync_intervals: 同步间隔选项（显示文本 / 取值）
        infer_prefix: 推断服务器地址时使用的前缀
    """

    protocol: str
    identity_type: Optional[str] = None
    name: str = ""
    hide: bool = False
    local_handler_ref: Optional[str] = None
    remote_address: Optional[str] = None
    port: int = 0
    port_ssl: int = 0
    default_ssl: bool = False
    offer_tls: bool = False
    offer_certs: bool = False
    uses_smtp: bool = False
    offer_local_deletes: bool = False
    default_local_deletes: int = DeletePolicy.ON_DELETE
    offer_prefix: bool = False
    uses_autodiscover: bool = False
    offer_lookback: bool = False
    default_lookback: int = SyncWindow.THREE_DAYS
    sync_changes: bool = False
    sync_contacts: bool = False
    sync_calendar: bool = False
    offer_attachment_preload: bool = False
    sync_interval_strings: Tuple[str, ...] = ()
    sync_intervals: Tuple[str, ...] = ()
    default_sync_interval: int = 15
    infer_prefix: Optional[str] = None
    offer_load_more: bool = False
    requires_setup: bool = False

    def validate(self) -> None:
        """校验协议标识与部署位置"""
        if not self.protocol:
            raise ServiceConfigurationException(reason="Missing protocol")

        if self.local_handler_ref is None and self.remote_address is None:
            raise ServiceConfigurationException(
                reason="No local handler or remote address specified",
                protocol=self.protocol,
            )

        if self.local_handler_ref is not None and self.remote_address is not None:
            raise ServiceConfigurationException(
                reason="Both local handler and remote address specified",
                protocol=self.protocol,
            )

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "ServiceDescriptor":
        """
        从加载器输出的原始记录创建描述

        未知字段被忽略；列表类字段冻结为元组；空字符串视为未设置。

        Args:
            raw: 原始描述记录

        Returns:
            ServiceDescriptor 实例

        Raises:
            ServiceConfigurationException: 如果记录不合法
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in raw.items():
            if key not in known:
                continue
            if isinstance(value, list):
                value = tuple(value)
            if value == "" and key in (
                "identity_type", "local_handler_ref", "remote_address", "infer_prefix"
            ):
                value = None
            kwargs[key] = value

        try:
            return cls(**kwargs)
        except TypeError as e:
            raise ServiceConfigurationException(
                reason=f"Malformed descriptor record: {e}",
                protocol=raw.get("protocol"),
            ) from e

    @property
    def locality(self) -> ServiceLocality:
        """服务部署位置"""
        if self.local_handler_ref is not None:
            return ServiceLocality.LOCAL
        return ServiceLocality.REMOTE

    @property
    def is_local(self) -> bool:
        return self.locality == ServiceLocality.LOCAL

    @property
    def is_remote(self) -> bool:
        return self.locality == ServiceLocality.REMOTE

    def __str__(self) -> str:
        where = "Local" if self.is_local else "Remote"
        return f"Protocol: {self.protocol}, {where}, Identity Type: {self.identity_type}"
