# Utils package
from .paths import (
    get_home_dir,
    get_cache_dir,
    get_tool_cache_path,
    get_ping_cache_path,
    get_debug_log_path,
    TOOL_CACHE_FILE,
    PING_CACHE_FILE,
    DEFAULT_DEBUG_LOG,
)
from .process import CommandResult, run_captured, run_inherited, shell_exit_status

__all__ = [
    'get_home_dir',
    'get_cache_dir',
    'get_tool_cache_path',
    'get_ping_cache_path',
    'get_debug_log_path',
    'TOOL_CACHE_FILE',
    'PING_CACHE_FILE',
    'DEFAULT_DEBUG_LOG',
    'CommandResult',
    'run_captured',
    'run_inherited',
    'shell_exit_status',
]
