# Tools package
from .locator import (
    ToolKind,
    ToolHandle,
    ToolLocator,
    FlatpakProbe,
    environ_which,
    is_executable_file,
    ludusavi_candidates,
    stc_candidates,
    locate_ludusavi,
    locate_stc,
    LUDUSAVI_FLATPAK_ID,
)

__all__ = [
    'ToolKind',
    'ToolHandle',
    'ToolLocator',
    'FlatpakProbe',
    'environ_which',
    'is_executable_file',
    'ludusavi_candidates',
    'stc_candidates',
    'locate_ludusavi',
    'locate_stc',
    'LUDUSAVI_FLATPAK_ID',
]
