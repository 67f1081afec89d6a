"""
身份界限上下文

- Identity, IdentityOptions 值对象
- SyncAuthority 枚举
- IdentityStore 接口
"""

from domain.identity.value_objects.identity import Identity, IdentityOptions
from domain.identity.value_objects.sync_authority import SyncAuthority
from domain.identity.services.identity_store import IdentityStore

__all__ = [
    "Identity",
    "IdentityOptions",
    "SyncAuthority",
    "IdentityStore",
]
