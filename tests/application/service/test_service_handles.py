"""服务句柄测试"""

from unittest.mock import Mock

import pytest

from application.service.services.service_handles import (
    LocalServiceHandle,
    NullServiceHandle,
    RemoteServiceHandle,
)
from domain.account.entities.host_auth import HostAuth
from domain.service.services.email_service import API_LEVEL
from domain.service.services.service_transport import ServiceTransport
from domain.service.value_objects.service_enums import ServiceLocality


class TestNullServiceHandle:
    """空服务句柄测试"""

    @pytest.fixture
    def handle(self) -> NullServiceHandle:
        return NullServiceHandle("gone")

    def test_is_null(self, handle: NullServiceHandle):
        """测试空句柄标识"""
        assert handle.is_null is True
        assert handle.locality is None

    def test_neutral_values(self, handle: NullServiceHandle):
        """测试所有操作返回中性值且不抛出"""
        assert handle.validate(HostAuth(protocol="gone")) is None
        assert handle.start_sync(1, user_request=True, delta_message_count=0) is None
        assert handle.stop_sync(1) is None
        assert handle.load_more(1) is None
        assert handle.load_attachment(1, background=False) is None
        assert handle.update_folder_list(1) is None
        assert handle.create_folder(1, "Work") is False
        assert handle.delete_folder(1, "Work") is False
        assert handle.rename_folder(1, "Work", "Jobs") is False
        assert handle.set_callback(Mock()) is None
        assert handle.set_logging(1) is None
        assert handle.host_changed(1) is None
        assert handle.auto_discover("u@x.com", "pw") is None
        assert handle.send_meeting_response(1, 1) is None
        assert handle.delete_account_pim_data("u@x.com") is None
        assert handle.get_api_level() == API_LEVEL
        assert handle.search_messages(1, {"filter": "x"}, 2) == 0
        assert handle.send_mail(1) is None
        assert handle.service_updated("u@x.com") is None
        assert handle.get_capabilities(1) == 0

    def test_none_protocol(self):
        """测试协议为 None 的空句柄"""
        assert NullServiceHandle().get_api_level() == API_LEVEL


class TestLocalServiceHandle:
    """本地服务句柄测试"""

    def test_delegates_to_service(self):
        """测试操作直接委托给本地实现"""
        service = Mock()
        service.search_messages.return_value = 5
        handle = LocalServiceHandle("imap", service)

        result = handle.search_messages(1, {"q": "x"}, 9)

        assert result == 5
        assert handle.locality == ServiceLocality.LOCAL
        assert handle.is_null is False
        service.search_messages.assert_called_once_with(account_id=1, params={"q": "x"}, dest_mailbox_id=9)

    def test_set_callback_delegates(self):
        """测试 set_callback 传给本地实现"""
        service = Mock()
        callback = Mock()
        handle = LocalServiceHandle("imap", service)

        handle.set_callback(callback)

        service.set_callback.assert_called_once_with(callback=callback)


class TestRemoteServiceHandle:
    """远程服务句柄测试"""

    @pytest.fixture
    def transport(self) -> Mock:
        return Mock(spec=ServiceTransport)

    def test_dispatch_through_transport(self, transport: Mock):
        """测试操作经传输层转发"""
        transport.call.return_value = 7
        handle = RemoteServiceHandle("eas", "http://127.0.0.1:8703", transport)

        assert handle.get_capabilities(3) == 7
        transport.call.assert_called_once_with(
            "http://127.0.0.1:8703", "get_capabilities", {"account_id": 3}
        )

    def test_validate_serializes_host_auth(self, transport: Mock):
        """测试 validate 只发送可序列化的 HostAuth 字段"""
        handle = RemoteServiceHandle("eas", "http://127.0.0.1:8703", transport)
        host_auth = HostAuth(protocol="eas", address="mail.x.com", port=443, flags=1, login="u")

        handle.validate(host_auth)

        transport.call.assert_called_once_with(
            "http://127.0.0.1:8703",
            "validate",
            {"host_auth": {"protocol": "eas", "address": "mail.x.com", "port": 443, "flags": 1, "login": "u"}},
        )

    def test_set_callback_stays_local(self, transport: Mock):
        """测试回调只保存在句柄上"""
        callback = Mock()
        handle = RemoteServiceHandle("eas", "http://127.0.0.1:8703", transport)

        handle.set_callback(callback)

        assert handle.callback is callback
        transport.call.assert_not_called()
