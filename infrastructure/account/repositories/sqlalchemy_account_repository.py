"""邮件账号 SQLAlchemy 仓储实现"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from domain.account.entities.account import Account
from domain.account.entities.host_auth import HostAuth
from domain.account.repositories.account_repository import AccountRepository
from domain.account.value_objects.encrypted_password import EncryptedPassword
from infrastructure.account.models.account_model import AccountModel, HostAuthModel


class SqlAlchemyAccountRepository(AccountRepository):
    """
    邮件账号 SQLAlchemy 仓储实现

    提供账号与 HostAuth 的持久化操作
    """

    def __init__(self, session: Session):
        """
        初始化仓储

        Args:
            session: SQLAlchemy Session
        """
        self._session = session

    def add(self, account: Account) -> Account:
        """添加账号"""
        model = self._to_account_model(account)
        self._session.add(model)
        self._session.commit()
        account.id = model.id
        return account

    def add_host_auth(self, host_auth: HostAuth) -> HostAuth:
        """添加 HostAuth"""
        model = self._to_host_auth_model(host_auth)
        self._session.add(model)
        self._session.commit()
        host_auth.id = model.id
        return host_auth

    def get_by_id(self, account_id: int) -> Optional[Account]:
        """根据 ID 获取账号"""
        model = self._session.get(AccountModel, account_id)
        if model is None:
            return None
        return self._to_account(model)

    def get_by_email(self, email_address: str) -> Optional[Account]:
        """根据邮箱地址获取账号"""
        model = self._session.query(AccountModel).filter(
            AccountModel.email_address == email_address
        ).first()

        if model is None:
            return None

        return self._to_account(model)

    def get_host_auth(self, host_auth_id: int) -> Optional[HostAuth]:
        """根据 ID 获取 HostAuth"""
        model = self._session.get(HostAuthModel, host_auth_id)
        if model is None:
            return None
        return self._to_host_auth(model)

    def get_protocol(self, account_id: int) -> Optional[str]:
        """获取账号收件 HostAuth 的协议"""
        protocol = self._session.query(HostAuthModel.protocol).join(
            AccountModel, AccountModel.host_auth_recv_id == HostAuthModel.id
        ).filter(
            AccountModel.id == account_id
        ).scalar()

        return protocol

    def set_flags(self, account_id: int, flags: int) -> None:
        """更新账号标志位"""
        model = self._session.get(AccountModel, account_id)
        if model is not None:
            model.flags = flags
            model.updated_at = datetime.now(timezone.utc)
            model.version += 1
            self._session.commit()

    def update_host_auth_protocol(self, host_auth_id: int, protocol: str) -> None:
        """更新 HostAuth 协议"""
        model = self._session.get(HostAuthModel, host_auth_id)
        if model is not None:
            model.protocol = protocol
            model.updated_at = datetime.now(timezone.utc)
            model.version += 1
            self._session.commit()

    def _to_account_model(self, entity: Account) -> AccountModel:
        """将账号实体转换为数据模型"""
        return AccountModel(
            id=entity.id,
            display_name=entity.display_name,
            email_address=entity.email_address,
            host_auth_recv_id=entity.host_auth_recv_id,
            host_auth_send_id=entity.host_auth_send_id,
            flags=entity.flags,
            sync_interval=entity.sync_interval,
            sync_lookback=entity.sync_lookback,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            version=entity.version,
        )

    def _to_account(self, model: AccountModel) -> Account:
        """将数据模型转换为账号实体"""
        return Account(
            id=model.id,
            display_name=model.display_name,
            email_address=model.email_address,
            host_auth_recv_id=model.host_auth_recv_id,
            host_auth_send_id=model.host_auth_send_id,
            flags=model.flags,
            sync_interval=model.sync_interval,
            sync_lookback=model.sync_lookback,
            created_at=model.created_at,
            updated_at=model.updated_at,
            version=model.version,
        )

    def _to_host_auth_model(self, entity: HostAuth) -> HostAuthModel:
        """将 HostAuth 实体转换为数据模型"""
        return HostAuthModel(
            id=entity.id,
            protocol=entity.protocol,
            address=entity.address,
            port=entity.port,
            flags=entity.flags,
            login=entity.login,
            encrypted_password=entity.encrypted_password.encrypted_value if entity.encrypted_password else None,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            version=entity.version,
        )

    def _to_host_auth(self, model: HostAuthModel) -> HostAuth:
        """将数据模型转换为 HostAuth 实体"""
        encrypted_password = None
        if model.encrypted_password:
            encrypted_password = EncryptedPassword.from_stored(model.encrypted_password)

        return HostAuth(
            id=model.id,
            protocol=model.protocol,
            address=model.address,
            port=model.port,
            flags=model.flags,
            login=model.login,
            encrypted_password=encrypted_password,
            created_at=model.created_at,
            updated_at=model.updated_at,
            version=model.version,
        )
