"""邮件服务接口

所有协议后端（本地或远程）对外暴露的统一调用面。
"""

from typing import Any, Dict, Optional, Protocol

from domain.account.entities.host_auth import HostAuth


API_LEVEL = 3
"""当前服务接口版本"""


class EmailServiceCallback(Protocol):
    """服务回调接口（同步进度、附件下载进度等）"""

    def sync_status(self, target_id: int, status_code: int, progress: int) -> None:
        ...


class EmailService(Protocol):
    """
    邮件服务接口

    本地服务直接实现该接口；远程服务由传输层按操作名转发。
    """

    def validate(self, host_auth: HostAuth) -> Optional[Dict[str, Any]]:
        ...

    def start_sync(self, mailbox_id: int, user_request: bool, delta_message_count: int) -> None:
        ...

    def stop_sync(self, mailbox_id: int) -> None:
        ...

    def load_more(self, message_id: int) -> None:
        ...

    def load_attachment(self, attachment_id: int, background: bool) -> None:
        ...

    def update_folder_list(self, account_id: int) -> None:
        ...

    def create_folder(self, account_id: int, name: str) -> bool:
        ...

    def delete_folder(self, account_id: int, name: str) -> bool:
        ...

    def rename_folder(self, account_id: int, old_name: str, new_name: str) -> bool:
        ...

    def set_callback(self, callback: Optional[EmailServiceCallback]) -> None:
        ...

    def set_logging(self, flags: int) -> None:
        ...

    def host_changed(self, account_id: int) -> None:
        ...

    def auto_discover(self, username: str, password: str) -> Optional[Dict[str, Any]]:
        ...

    def send_meeting_response(self, message_id: int, response: int) -> None:
        ...

    def delete_account_pim_data(self, email_address: str) -> None:
        ...

    def get_api_level(self) -> int:
        ...

    def search_messages(self, account_id: int, params: Dict[str, Any], dest_mailbox_id: int) -> int:
        ...

    def send_mail(self, account_id: int) -> None:
        ...

    def service_updated(self, email_address: str) -> None:
        ...

    def get_capabilities(self, account_id: int) -> int:
        ...
