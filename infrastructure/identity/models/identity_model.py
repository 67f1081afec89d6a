"""身份存储 SQLAlchemy 数据模型"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, LargeBinary, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.base import Base


class IdentityModel(Base):
    """
    身份数据库模型

    (name, type) 唯一
    """

    __tablename__ = "identities"
    __table_args__ = (
        UniqueConstraint("name", "type", name="uq_identity_name_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    # 加密密码（可为空）
    encrypted_password: Mapped[Optional[bytes]] = mapped_column(LargeBinary, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return f"<IdentityModel(id={self.id}, name={self.name}, type={self.type})>"


class IdentitySyncSettingModel(Base):
    """身份在各数据源上的自动同步开关"""

    __tablename__ = "identity_sync_settings"
    __table_args__ = (
        UniqueConstraint("identity_id", "authority", name="uq_identity_sync_authority"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    identity_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("identities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    authority: Mapped[str] = mapped_column(String(128), nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return (
            f"<IdentitySyncSettingModel(identity_id={self.identity_id}, "
            f"authority={self.authority}, enabled={self.enabled})>"
        )
