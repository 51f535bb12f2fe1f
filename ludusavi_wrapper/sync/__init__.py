# Sync package
from .syncthing import (
    SyncStatus,
    SyncStatusChecker,
    parse_json_dump,
    parse_status_text,
)
from .notifications import notify_sync_warning, build_notification_commands

__all__ = [
    'SyncStatus',
    'SyncStatusChecker',
    'parse_json_dump',
    'parse_status_text',
    'notify_sync_warning',
    'build_notification_commands',
]
