"""同步游标 SQLAlchemy 数据模型"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, LargeBinary, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.base import Base


class SyncStateModel(Base):
    """
    同步游标数据库模型

    每个 (数据源, 身份名, 身份类型) 只保存一份游标
    """

    __tablename__ = "sync_state"
    __table_args__ = (
        UniqueConstraint("authority", "identity_name", "identity_type", name="uq_sync_state_owner"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    authority: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    identity_name: Mapped[str] = mapped_column(String(255), nullable=False)
    identity_type: Mapped[str] = mapped_column(String(128), nullable=False)

    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<SyncStateModel(authority={self.authority}, "
            f"identity={self.identity_name}/{self.identity_type}, bytes={len(self.data or b'')})>"
        )
