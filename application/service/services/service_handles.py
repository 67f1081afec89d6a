"""邮件服务句柄

调用方通过句柄访问服务，无需区分本地、远程或空服务：

    handle = resolver.resolve_by_account(account_id)
    handle.start_sync(mailbox_id, user_request=True, delta_message_count=0)
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from domain.account.entities.host_auth import HostAuth
from domain.service.services.email_service import API_LEVEL, EmailService, EmailServiceCallback
from domain.service.services.service_transport import ServiceTransport
from domain.service.value_objects.service_enums import ServiceLocality


class ServiceHandle(ABC):
    """
    服务句柄基类

    提供完整的 EmailService 调用面，每个操作统一经 _dispatch 分派。
    """

    locality: Optional[ServiceLocality] = None

    def __init__(self, protocol: Optional[str]):
        self.protocol = protocol

    @abstractmethod
    def _dispatch(self, operation: str, **params: Any) -> Any:
        raise NotImplementedError

    @property
    def is_null(self) -> bool:
        return self.locality is None

    def validate(self, host_auth: HostAuth) -> Optional[Dict[str, Any]]:
        return self._dispatch("validate", host_auth=host_auth)

    def start_sync(self, mailbox_id: int, user_request: bool, delta_message_count: int) -> None:
        self._dispatch(
            "start_sync",
            mailbox_id=mailbox_id,
            user_request=user_request,
            delta_message_count=delta_message_count,
        )

    def stop_sync(self, mailbox_id: int) -> None:
        self._dispatch("stop_sync", mailbox_id=mailbox_id)

    def load_more(self, message_id: int) -> None:
        self._dispatch("load_more", message_id=message_id)

    def load_attachment(self, attachment_id: int, background: bool) -> None:
        self._dispatch("load_attachment", attachment_id=attachment_id, background=background)

    def update_folder_list(self, account_id: int) -> None:
        self._dispatch("update_folder_list", account_id=account_id)

    def create_folder(self, account_id: int, name: str) -> bool:
        return self._dispatch("create_folder", account_id=account_id, name=name)

    def delete_folder(self, account_id: int, name: str) -> bool:
        return self._dispatch("delete_folder", account_id=account_id, name=name)

    def rename_folder(self, account_id: int, old_name: str, new_name: str) -> bool:
        return self._dispatch(
            "rename_folder", account_id=account_id, old_name=old_name, new_name=new_name
        )

    def set_callback(self, callback: Optional[EmailServiceCallback]) -> None:
        self._dispatch("set_callback", callback=callback)

    def set_logging(self, flags: int) -> None:
        self._dispatch("set_logging", flags=flags)

    def host_changed(self, account_id: int) -> None:
        self._dispatch("host_changed", account_id=account_id)

    def auto_discover(self, username: str, password: str) -> Optional[Dict[str, Any]]:
        return self._dispatch("auto_discover", username=username, password=password)

    def send_meeting_response(self, message_id: int, response: int) -> None:
        self._dispatch("send_meeting_response", message_id=message_id, response=response)

    def delete_account_pim_data(self, email_address: str) -> None:
        self._dispatch("delete_account_pim_data", email_address=email_address)

    def get_api_level(self) -> int:
        return self._dispatch("get_api_level")

    def search_messages(self, account_id: int, params: Dict[str, Any], dest_mailbox_id: int) -> int:
        return self._dispatch(
            "search_messages",
            account_id=account_id,
            params=params,
            dest_mailbox_id=dest_mailbox_id,
        )

    def send_mail(self, account_id: int) -> None:
        self._dispatch("send_mail", account_id=account_id)

    def service_updated(self, email_address: str) -> None:
        self._dispatch("service_updated", email_address=email_address)

    def get_capabilities(self, account_id: int) -> int:
        return self._dispatch("get_capabilities", account_id=account_id)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(protocol={self.protocol})>"


class LocalServiceHandle(ServiceHandle):
    """进程内服务句柄，直接调用本地实现"""

    locality = ServiceLocality.LOCAL

    def __init__(self, protocol: str, service: EmailService):
        super().__init__(protocol)
        self.service = service

    def _dispatch(self, operation: str, **params: Any) -> Any:
        return getattr(self.service, operation)(**params)


class RemoteServiceHandle(ServiceHandle):
    """
    远程服务句柄

    经传输层按操作名转发。回调无法跨进程传递，只保存在句柄上，
    不随 set_callback 转发。
    """

    locality = ServiceLocality.REMOTE

    def __init__(
        self,
        protocol: str,
        address: str,
        transport: ServiceTransport,
        callback: Optional[EmailServiceCallback] = None,
    ):
        super().__init__(protocol)
        self.address = address
        self.callback = callback
        self._transport = transport

    def set_callback(self, callback: Optional[EmailServiceCallback]) -> None:
        self.callback = callback

    def validate(self, host_auth: HostAuth) -> Optional[Dict[str, Any]]:
        return self._dispatch(
            "validate",
            host_auth={
                "protocol": host_auth.protocol,
                "address": host_auth.address,
                "port": host_auth.port,
                "flags": host_auth.flags,
                "login": host_auth.login,
            },
        )

    def _dispatch(self, operation: str, **params: Any) -> Any:
        return self._transport.call(self.address, operation, params)


# 空服务各操作的中性返回值；未列出的操作返回 None
_NEUTRAL_RESULTS: Dict[str, Any] = {
    "create_folder": False,
    "delete_folder": False,
    "rename_folder": False,
    "get_api_level": API_LEVEL,
    "search_messages": 0,
    "get_capabilities": 0,
}


class NullServiceHandle(ServiceHandle):
    """
    空服务句柄

    用于未知协议（如账号已被删除）。所有操作均为无害的空操作，
    返回中性值，从不抛出异常。
    """

    def __init__(self, protocol: Optional[str] = None, logger: Optional[logging.Logger] = None):
        super().__init__(protocol)
        self._logger = logger or logging.getLogger(__name__)

    def _dispatch(self, operation: str, **params: Any) -> Any:
        self._logger.debug(f"NullService ignoring {operation} for protocol {self.protocol}")
        return _NEUTRAL_RESULTS.get(operation)
