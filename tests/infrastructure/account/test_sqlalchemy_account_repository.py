"""SqlAlchemyAccountRepository 集成测试

使用 SQLite 内存数据库测试仓储的实际行为。
"""

import pytest
from cryptography.fernet import Fernet
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from domain.account.entities.account import Account
from domain.account.entities.host_auth import HostAuth
from domain.account.value_objects.encrypted_password import EncryptedPassword
from infrastructure.account.repositories.sqlalchemy_account_repository import SqlAlchemyAccountRepository
from infrastructure.database.database_factory import DatabaseFactory


@pytest.fixture
def engine():
    """创建 SQLite 内存数据库引擎"""
    engine = create_engine("sqlite:///:memory:", echo=False)
    DatabaseFactory.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """创建数据库会话"""
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def repository(session: Session) -> SqlAlchemyAccountRepository:
    """创建仓储实例"""
    return SqlAlchemyAccountRepository(session)


def create_account(repository: SqlAlchemyAccountRepository, protocol: str = "eas", **kwargs) -> Account:
    """创建并保存测试用账号（含收件 HostAuth）"""
    host_auth = repository.add_host_auth(HostAuth(protocol=protocol, address="mail.x.com", login="u"))
    return repository.add(Account(
        email_address=kwargs.pop("email_address", "u@x.com"),
        host_auth_recv_id=host_auth.id,
        **kwargs,
    ))


class TestAddAndGet:
    """添加与查询测试"""

    def test_add_assigns_id(self, repository: SqlAlchemyAccountRepository):
        """测试保存后分配 ID"""
        account = create_account(repository)

        assert account.id is not None
        assert account.host_auth_recv_id is not None

    def test_get_by_id(self, repository: SqlAlchemyAccountRepository):
        """测试按 ID 查询"""
        account = create_account(repository, display_name="Work", flags=Account.FLAGS_SECURITY_HOLD)

        loaded = repository.get_by_id(account.id)

        assert loaded == account
        assert loaded.display_name == "Work"
        assert loaded.flags == Account.FLAGS_SECURITY_HOLD

    def test_get_by_id_missing(self, repository: SqlAlchemyAccountRepository):
        """测试查询不存在的账号"""
        assert repository.get_by_id(999) is None

    def test_get_by_email(self, repository: SqlAlchemyAccountRepository):
        """测试按邮箱查询"""
        account = create_account(repository, email_address="a@x.com")

        assert repository.get_by_email("a@x.com").id == account.id
        assert repository.get_by_email("b@x.com") is None

    def test_host_auth_password_round_trip(self, repository: SqlAlchemyAccountRepository):
        """测试 HostAuth 密码以密文保存并可解密"""
        key = Fernet.generate_key().decode()
        host_auth = repository.add_host_auth(HostAuth(
            protocol="imap",
            encrypted_password=EncryptedPassword.from_plain("pw", key),
        ))

        loaded = repository.get_host_auth(host_auth.id)

        assert loaded.protocol == "imap"
        assert loaded.get_decrypted_password(key) == "pw"

    def test_get_host_auth_missing(self, repository: SqlAlchemyAccountRepository):
        """测试查询不存在的 HostAuth"""
        assert repository.get_host_auth(999) is None


class TestProtocol:
    """协议查询与更新测试"""

    def test_get_protocol(self, repository: SqlAlchemyAccountRepository):
        """测试获取账号协议"""
        account = create_account(repository, protocol="pop3")

        assert repository.get_protocol(account.id) == "pop3"

    def test_get_protocol_deleted_account(self, repository: SqlAlchemyAccountRepository):
        """测试账号不存在时返回 None"""
        assert repository.get_protocol(999) is None

    def test_update_host_auth_protocol(self, repository: SqlAlchemyAccountRepository):
        """测试更新协议"""
        account = create_account(repository, protocol="eas")

        repository.update_host_auth_protocol(account.host_auth_recv_id, "easV2")

        assert repository.get_protocol(account.id) == "easV2"
        assert repository.get_host_auth(account.host_auth_recv_id).version == 1


class TestFlags:
    """标志位测试"""

    def test_set_flags(self, repository: SqlAlchemyAccountRepository):
        """测试更新标志位"""
        account = create_account(repository)

        repository.set_flags(account.id, Account.FLAGS_INCOMPLETE)

        assert repository.get_by_id(account.id).is_incomplete is True

    def test_set_flags_missing_account(self, repository: SqlAlchemyAccountRepository):
        """测试更新不存在的账号不报错"""
        repository.set_flags(999, Account.FLAGS_INCOMPLETE)
