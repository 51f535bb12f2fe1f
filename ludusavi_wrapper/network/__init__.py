# Network package
from .probe import (
    NetworkProbe,
    manifest_flag,
    parse_ping_command,
    TRY_MANIFEST_UPDATE,
    NO_MANIFEST_UPDATE,
    PROBE_HOSTS,
)

__all__ = [
    'NetworkProbe',
    'manifest_flag',
    'parse_ping_command',
    'TRY_MANIFEST_UPDATE',
    'NO_MANIFEST_UPDATE',
    'PROBE_HOSTS',
]
