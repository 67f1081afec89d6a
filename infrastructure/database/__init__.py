"""
数据库基础设施模块
"""

from .base import Base
from .database_factory import (
    DatabaseFactory,
    Environment,
    get_engine,
    get_session_factory,
    get_session,
    reset_database,
)

__all__ = [
    "Base",
    "DatabaseFactory",
    "Environment",
    "get_engine",
    "get_session_factory",
    "get_session",
    "reset_database",
]
