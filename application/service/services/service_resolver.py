"""邮件服务解析器"""

import logging
from typing import Optional

from application.service.services.service_handles import (
    LocalServiceHandle,
    NullServiceHandle,
    RemoteServiceHandle,
    ServiceHandle,
)
from application.service.services.service_registry import ServiceRegistry
from domain.account.repositories.account_repository import AccountRepository
from domain.common.exceptions import ServiceTransportException
from domain.service.services.email_service import EmailServiceCallback
from domain.service.services.local_service_table import LocalServiceTable
from domain.service.services.service_transport import ServiceTransport
from domain.service.value_objects.service_descriptor import ServiceDescriptor


class ServiceResolver:
    """
    邮件服务解析器

    根据协议或账号返回服务句柄；未知协议返回 NullServiceHandle，
    调用方无需判空。
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        account_repository: AccountRepository,
        local_services: LocalServiceTable,
        transport: ServiceTransport,
        logger: Optional[logging.Logger] = None,
    ):
        """
        初始化解析器

        Args:
            registry: 服务注册表
            account_repository: 账号仓储（按账号解析协议）
            local_services: 本地服务实现表
            transport: 远程服务传输
            logger: 日志记录器（可选）
        """
        self._registry = registry
        self._account_repository = account_repository
        self._local_services = local_services
        self._transport = transport
        self._logger = logger or logging.getLogger(__name__)

    def resolve_by_protocol(
        self,
        protocol: Optional[str],
        callback: Optional[EmailServiceCallback] = None,
    ) -> ServiceHandle:
        """
        按协议解析服务句柄

        Args:
            protocol: 协议标识（账号可能已被删除，允许为 None）
            callback: 服务回调（可选）

        Returns:
            LocalServiceHandle / RemoteServiceHandle，未知协议返回 NullServiceHandle
        """
        descriptor = self._registry.lookup(protocol)
        if descriptor is None:
            self._logger.warning(f"Returning NullService for {protocol}")
            return NullServiceHandle(protocol)
        return self.resolve_descriptor(descriptor, callback)

    def resolve_by_account(
        self,
        account_id: int,
        callback: Optional[EmailServiceCallback] = None,
    ) -> ServiceHandle:
        """按账号当前协议解析服务句柄"""
        return self.resolve_by_protocol(self._account_repository.get_protocol(account_id), callback)

    def resolve_descriptor(
        self,
        descriptor: ServiceDescriptor,
        callback: Optional[EmailServiceCallback] = None,
    ) -> ServiceHandle:
        """根据服务描述直接创建句柄"""
        if descriptor.is_local:
            service = self._local_services.create(descriptor.local_handler_ref)
            if callback is not None:
                service.set_callback(callback)
            return LocalServiceHandle(descriptor.protocol, service)

        return RemoteServiceHandle(
            protocol=descriptor.protocol,
            address=descriptor.remote_address,
            transport=self._transport,
            callback=callback,
        )

    def descriptor_for_account(self, account_id: int) -> Optional[ServiceDescriptor]:
        """获取账号当前协议的服务描述"""
        return self._registry.lookup(self._account_repository.get_protocol(account_id))

    def is_available(self, protocol: Optional[str]) -> bool:
        """
        判断服务是否可用

        本地服务始终可用；远程服务以存活探测结果为准，探测失败视为不可用。
        """
        descriptor = self._registry.lookup(protocol)
        if descriptor is None:
            return False
        if descriptor.is_local:
            return True

        try:
            return self._transport.probe(descriptor.remote_address)
        except ServiceTransportException as e:
            self._logger.warning(f"Probe failed for {protocol} at {descriptor.remote_address}: {e.message}")
            return False

    def start_all(self) -> None:
        """通知所有远程服务启动（本地服务由宿主进程负责）"""
        for descriptor in self._registry.list():
            if descriptor.is_remote:
                self._start(descriptor)

    def start_if_remote(self, protocol: Optional[str]) -> None:
        """若该协议为远程服务则通知其启动"""
        descriptor = self._registry.lookup(protocol)
        if descriptor is not None and descriptor.is_remote:
            self._start(descriptor)

    def are_remote_services_installed(self) -> bool:
        return any(descriptor.is_remote for descriptor in self._registry.list())

    def set_remote_services_logging(self, flags: int) -> None:
        """为所有远程服务设置调试日志标志"""
        for descriptor in self._registry.list():
            if not descriptor.is_remote:
                continue
            try:
                self.resolve_descriptor(descriptor).set_logging(flags)
            except ServiceTransportException as e:
                self._logger.warning(f"Failed to set logging on {descriptor.protocol}: {e.message}")

    def _start(self, descriptor: ServiceDescriptor) -> None:
        try:
            self._transport.start(descriptor.remote_address)
            self._logger.info(f"Started remote service {descriptor.protocol}")
        except ServiceTransportException as e:
            self._logger.warning(
                f"Failed to start remote service {descriptor.protocol} "
                f"at {descriptor.remote_address}: {e.message}"
            )
