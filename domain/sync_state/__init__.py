"""同步状态界限上下文"""

from domain.sync_state.services.sync_cursor_store import SyncCursorStore

__all__ = [
    "SyncCursorStore",
]
