"""身份存储 SQLAlchemy 实现"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from domain.account.value_objects.encrypted_password import EncryptedPassword
from domain.common.exceptions import IdentityStoreException
from domain.identity.services.identity_store import IdentityStore
from domain.identity.value_objects.identity import Identity, IdentityOptions
from domain.identity.value_objects.sync_authority import SyncAuthority
from infrastructure.identity.models.identity_model import IdentityModel, IdentitySyncSettingModel


class SqlAlchemyIdentityStore(IdentityStore):
    """
    身份存储 SQLAlchemy 实现

    身份密码使用 Fernet 加密保存；同步开关按数据源逐条保存。
    """

    def __init__(
        self,
        session: Session,
        encryption_key: Union[str, bytes] = "",
        logger: Optional[logging.Logger] = None,
    ):
        """
        初始化身份存储

        Args:
            session: SQLAlchemy Session
            encryption_key: Fernet 密钥，为空时不保存密码
            logger: 日志记录器（可选）
        """
        self._session = session
        self._encryption_key = encryption_key
        self._logger = logger or logging.getLogger(__name__)

    async def add_identity(self, identity_type: str, options: IdentityOptions) -> Identity:
        """
        创建身份并写入同步开关

        Raises:
            IdentityStoreException: 身份已存在或写入失败
        """
        identity = Identity(name=options.username, type=identity_type)

        if self._find_model(identity.name, identity.type) is not None:
            raise IdentityStoreException(
                "Identity already exists", name=identity.name, identity_type=identity.type
            )

        encrypted = None
        if options.password and self._encryption_key:
            encrypted = EncryptedPassword.from_plain(options.password, self._encryption_key).encrypted_value

        model = IdentityModel(
            name=identity.name,
            type=identity.type,
            encrypted_password=encrypted,
            created_at=datetime.now(timezone.utc),
        )

        try:
            self._session.add(model)
            self._session.flush()
            for authority, enabled in (
                (SyncAuthority.EMAIL, options.email_sync_enabled),
                (SyncAuthority.CONTACTS, options.contacts_sync_enabled),
                (SyncAuthority.CALENDAR, options.calendar_sync_enabled),
            ):
                self._session.add(IdentitySyncSettingModel(
                    identity_id=model.id,
                    authority=authority.value,
                    enabled=enabled,
                ))
            self._session.commit()
        except IntegrityError as e:
            self._session.rollback()
            raise IdentityStoreException(
                "Identity already exists", name=identity.name, identity_type=identity.type
            ) from e
        except SQLAlchemyError as e:
            self._session.rollback()
            raise IdentityStoreException(
                f"Failed to add identity: {e}", name=identity.name, identity_type=identity.type
            ) from e

        self._logger.info(f"[Identity added] {identity}")
        return identity

    async def remove_identity(self, identity: Identity) -> None:
        """
        删除身份及其同步开关

        Raises:
            IdentityStoreException: 身份不存在或删除失败
        """
        model = self._find_model(identity.name, identity.type)
        if model is None:
            raise IdentityStoreException(
                "Identity not found", name=identity.name, identity_type=identity.type
            )

        try:
            self._session.query(IdentitySyncSettingModel).filter(
                IdentitySyncSettingModel.identity_id == model.id
            ).delete(synchronize_session=False)
            self._session.delete(model)
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            raise IdentityStoreException(
                f"Failed to remove identity: {e}", name=identity.name, identity_type=identity.type
            ) from e

        self._logger.info(f"[Identity removed] {identity}")

    def find_identity(self, name: str, identity_type: str) -> Optional[Identity]:
        model = self._find_model(name, identity_type)
        if model is None:
            return None
        return Identity(name=model.name, type=model.type)

    def list_identities(self, identity_type: Optional[str] = None) -> List[Identity]:
        query = self._session.query(IdentityModel)
        if identity_type is not None:
            query = query.filter(IdentityModel.type == identity_type)

        try:
            models = query.order_by(IdentityModel.id).all()
        except SQLAlchemyError as e:
            self._session.rollback()
            raise IdentityStoreException(f"Failed to list identities: {e}", identity_type=identity_type) from e
        return [Identity(name=m.name, type=m.type) for m in models]

    def is_sync_enabled(self, identity: Identity, authority: SyncAuthority) -> bool:
        model = self._find_model(identity.name, identity.type)
        if model is None:
            return False

        try:
            setting = self._session.query(IdentitySyncSettingModel).filter(
                IdentitySyncSettingModel.identity_id == model.id,
                IdentitySyncSettingModel.authority == SyncAuthority(authority).value,
            ).first()
        except SQLAlchemyError as e:
            self._session.rollback()
            raise IdentityStoreException(
                f"Failed to read sync setting: {e}", name=identity.name, identity_type=identity.type
            ) from e

        return bool(setting and setting.enabled)

    def get_password(self, identity: Identity) -> Optional[str]:
        """
        获取身份的明文密码

        Returns:
            未保存密码时返回 None

        Raises:
            IdentityStoreException: 身份不存在
            InvalidValueObjectException: 密钥错误
        """
        model = self._find_model(identity.name, identity.type)
        if model is None:
            raise IdentityStoreException(
                "Identity not found", name=identity.name, identity_type=identity.type
            )
        if not model.encrypted_password:
            return None
        return EncryptedPassword.from_stored(model.encrypted_password).decrypt(self._encryption_key)

    def _find_model(self, name: str, identity_type: str) -> Optional[IdentityModel]:
        """按 (名称, 类型) 查询身份；数据库错误转换为 IdentityStoreException"""
        try:
            return self._session.query(IdentityModel).filter(
                IdentityModel.name == name,
                IdentityModel.type == identity_type,
            ).first()
        except SQLAlchemyError as e:
            self._session.rollback()
            raise IdentityStoreException(
                f"Failed to look up identity: {e}", name=name, identity_type=identity_type
            ) from e
