"""SQLAlchemy 声明式基类"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """SQLAlchemy 声明式基类，所有数据模型共享同一个 metadata"""
    pass
