"""同步游标 SQLAlchemy 存储实现"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from domain.common.exceptions import SyncStateAccessException
from domain.identity.value_objects.identity import Identity
from domain.identity.value_objects.sync_authority import SyncAuthority
from domain.sync_state.services.sync_cursor_store import SyncCursorStore
from infrastructure.sync_state.models.sync_state_model import SyncStateModel


class SqlAlchemySyncCursorStore(SyncCursorStore):
    """
    同步游标存储（单一数据源）

    日历与联系人各使用一个实例，共享 sync_state 表。
    """

    def __init__(self, session: Session, authority: SyncAuthority):
        """
        初始化游标存储

        Args:
            session: SQLAlchemy Session
            authority: 数据源
        """
        self._session = session
        self._authority = SyncAuthority(authority)

    @property
    def authority(self) -> str:
        return self._authority.value

    def get_cursor(self, identity: Identity) -> Optional[bytes]:
        try:
            model = self._find_model(identity)
        except SQLAlchemyError as e:
            raise SyncStateAccessException(
                f"Failed to read cursor for {identity}: {e}", authority=self.authority
            ) from e

        if model is None:
            return None
        return bytes(model.data)

    def set_cursor(self, identity: Identity, data: bytes) -> None:
        try:
            model = self._find_model(identity)
            if model is None:
                model = SyncStateModel(
                    authority=self.authority,
                    identity_name=identity.name,
                    identity_type=identity.type,
                    data=data,
                )
                self._session.add(model)
            else:
                model.data = data
            model.updated_at = datetime.now(timezone.utc)
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            raise SyncStateAccessException(
                f"Failed to write cursor for {identity}: {e}", authority=self.authority
            ) from e

    def _find_model(self, identity: Identity) -> Optional[SyncStateModel]:
        return self._session.query(SyncStateModel).filter(
            SyncStateModel.authority == self.authority,
            SyncStateModel.identity_name == identity.name,
            SyncStateModel.identity_type == identity.type,
        ).first()
