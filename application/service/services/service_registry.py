"""邮件服务注册表

进程级协议注册表：首次访问时从加载器填充一次，之后只读。
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from domain.common.exceptions import ServiceConfigurationException
from domain.service.services.local_service_table import LocalServiceTable
from domain.service.services.service_descriptor_loader import ServiceDescriptorLoader
from domain.service.value_objects.service_descriptor import ServiceDescriptor


@dataclass(frozen=True)
class RegistrySnapshot:
    """
    注册表快照

    by_protocol 与 ordered 引用同一组描述；整体替换发布，从不原地修改。
    """

    by_protocol: Dict[str, ServiceDescriptor] = field(default_factory=dict)
    ordered: Tuple[ServiceDescriptor, ...] = ()


class ServiceRegistry:
    """
    邮件服务注册表

    并发的首次访问只会触发一次填充：填充在锁内构建局部快照，
    完成后一次性发布；调用方只会看到空快照或完整快照。
    """

    def __init__(
        self,
        loader: ServiceDescriptorLoader,
        local_services: Optional[LocalServiceTable] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        初始化注册表

        Args:
            loader: 服务描述加载器
            local_services: 本地服务实现表；提供时校验本地引用均已登记
            logger: 日志记录器（可选）
        """
        self._loader = loader
        self._local_services = local_services
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._snapshot: Optional[RegistrySnapshot] = None

    def lookup(self, protocol: Optional[str]) -> Optional[ServiceDescriptor]:
        """
        按协议查找服务描述

        Args:
            protocol: 协议标识（None 视为未知）

        Returns:
            ServiceDescriptor，未知协议返回 None
        """
        if protocol is None:
            return None
        return self._ensure_populated().by_protocol.get(protocol)

    def list(self) -> Tuple[ServiceDescriptor, ...]:
        """按声明顺序返回全部服务描述"""
        return self._ensure_populated().ordered

    @property
    def is_populated(self) -> bool:
        return self._snapshot is not None

    def reset(self) -> None:
        """清空快照，下次访问重新填充"""
        with self._lock:
            self._snapshot = None

    def _ensure_populated(self) -> RegistrySnapshot:
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot

        with self._lock:
            if self._snapshot is None:
                self._snapshot = self._populate()
            return self._snapshot

    def _populate(self) -> RegistrySnapshot:
        """从加载器构建快照，任何配置错误直接抛出"""
        raw_records = self._loader.load()

        by_protocol: Dict[str, ServiceDescriptor] = {}
        for raw in raw_records:
            descriptor = ServiceDescriptor.from_raw(raw)

            if descriptor.is_local and self._local_services is not None:
                if not self._local_services.contains(descriptor.local_handler_ref):
                    raise ServiceConfigurationException(
                        reason=f"Local handler not registered: {descriptor.local_handler_ref}",
                        protocol=descriptor.protocol,
                    )

            if descriptor.protocol in by_protocol:
                self._logger.warning(
                    f"Duplicate service descriptor for protocol '{descriptor.protocol}', "
                    f"last entry wins"
                )
                del by_protocol[descriptor.protocol]
            by_protocol[descriptor.protocol] = descriptor

        snapshot = RegistrySnapshot(
            by_protocol=by_protocol,
            ordered=tuple(by_protocol.values()),
        )
        self._logger.info(f"Loaded {len(snapshot.ordered)} email service descriptor(s)")
        for descriptor in snapshot.ordered:
            self._logger.debug(str(descriptor))
        return snapshot


# 进程级注册表实例
_registry: Optional[ServiceRegistry] = None
_registry_lock = threading.Lock()


def init_registry(
    loader: ServiceDescriptorLoader,
    local_services: Optional[LocalServiceTable] = None,
) -> ServiceRegistry:
    """
    初始化进程级注册表

    已初始化时直接返回现有实例（保持单次填充语义）。

    Args:
        loader: 服务描述加载器
        local_services: 本地服务实现表

    Returns:
        ServiceRegistry 实例
    """
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = ServiceRegistry(loader=loader, local_services=local_services)
        return _registry


def get_registry() -> ServiceRegistry:
    """
    获取进程级注册表

    Raises:
        RuntimeError: 如果尚未调用 init_registry()
    """
    if _registry is None:
        raise RuntimeError("Service registry has not been initialized; call init_registry() first")
    return _registry


def reset_registry() -> None:
    """丢弃进程级注册表（测试清理用）"""
    global _registry
    with _registry_lock:
        if _registry is not None:
            _registry.reset()
        _registry = None
