"""Account 与 HostAuth 实体测试"""

import pytest
from cryptography.fernet import Fernet

from domain.account.entities.account import Account
from domain.account.entities.host_auth import HostAuth
from domain.account.value_objects.encrypted_password import EncryptedPassword
from domain.common.exceptions import InvalidOperationException


class TestAccount:
    """Account 实体测试"""

    def test_create_requires_email(self):
        """测试邮箱地址为空时抛出异常"""
        with pytest.raises(InvalidOperationException) as exc_info:
            Account(email_address="")

        assert exc_info.value.code == "INVALID_OPERATION"

    def test_mark_incomplete_returns_prior_flags(self):
        """测试设置 incomplete 标志返回原标志位"""
        account = Account(id=42, email_address="u@x.com", flags=Account.FLAGS_SECURITY_HOLD)

        prior = account.mark_incomplete()

        assert prior == Account.FLAGS_SECURITY_HOLD
        assert account.is_incomplete is True
        assert account.flags == Account.FLAGS_SECURITY_HOLD | Account.FLAGS_INCOMPLETE
        assert account.version == 1

    def test_restore_flags(self):
        """测试恢复标志位清除 incomplete"""
        account = Account(id=42, email_address="u@x.com", flags=0)
        prior = account.mark_incomplete()

        account.restore_flags(prior)

        assert account.flags == 0
        assert account.is_incomplete is False

    def test_restore_keeps_preexisting_incomplete(self):
        """测试进入前已是 incomplete 的账号恢复后仍为 incomplete"""
        account = Account(id=42, email_address="u@x.com", flags=Account.FLAGS_INCOMPLETE)
        prior = account.mark_incomplete()

        account.restore_flags(prior)

        assert account.is_incomplete is True

    def test_equality_by_id(self):
        """测试实体以 ID 判等"""
        a = Account(id=1, email_address="a@x.com")
        b = Account(id=1, email_address="b@x.com")
        c = Account(email_address="a@x.com")

        assert a == b
        assert hash(a) == hash(b)
        assert c != Account(email_address="a@x.com")


class TestHostAuth:
    """HostAuth 实体测试"""

    def test_create_requires_protocol(self):
        """测试协议为空时抛出异常"""
        with pytest.raises(InvalidOperationException):
            HostAuth(protocol="")

    def test_change_protocol(self):
        """测试切换协议"""
        host_auth = HostAuth(id=7, protocol="legacyA")

        host_auth.change_protocol("modernA")

        assert host_auth.protocol == "modernA"
        assert host_auth.updated_at is not None

    def test_change_protocol_rejects_empty(self):
        """测试切换到空协议抛出异常"""
        host_auth = HostAuth(id=7, protocol="legacyA")

        with pytest.raises(InvalidOperationException):
            host_auth.change_protocol("")

        assert host_auth.protocol == "legacyA"

    def test_get_decrypted_password(self):
        """测试获取明文密码"""
        key = Fernet.generate_key().decode()
        host_auth = HostAuth(
            protocol="imap",
            encrypted_password=EncryptedPassword.from_plain("pw", key),
        )

        assert host_auth.get_decrypted_password(key) == "pw"

    def test_get_decrypted_password_without_password(self):
        """测试未设置密码时返回 None"""
        host_auth = HostAuth(protocol="imap")

        assert host_auth.get_decrypted_password("unused") is None
