"""邮件账号 SQLAlchemy 数据模型"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.base import Base


class HostAuthModel(Base):
    """
    HostAuth 数据库模型

    对应领域层的 HostAuth 实体
    """

    __tablename__ = "host_auths"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    protocol: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    address: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    port: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    flags: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    login: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # 加密密码
    encrypted_password: Mapped[Optional[bytes]] = mapped_column(LargeBinary, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<HostAuthModel(id={self.id}, protocol={self.protocol}, address={self.address})>"


class AccountModel(Base):
    """
    邮件账号数据库模型

    对应领域层的 Account 聚合根
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    display_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email_address: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    host_auth_recv_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("host_auths.id"), nullable=True
    )
    host_auth_send_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("host_auths.id"), nullable=True
    )

    # 标志位（包含 incomplete 标志）
    flags: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    sync_interval: Mapped[int] = mapped_column(Integer, nullable=False, default=15)
    sync_lookback: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<AccountModel(id={self.id}, email={self.email_address}, flags={self.flags})>"
