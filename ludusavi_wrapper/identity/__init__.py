# Identity package
from .launchers import (
    LauncherFamily,
    detect_launcher,
    launcher_game_name,
    launcher_variables,
    looks_like_opaque_id,
    find_steam_game_name,
)
from .resolver import (
    IdentityResolver,
    ResolvedIdentity,
    name_from_executable,
    name_from_directory,
    GENERIC_DIR_NAMES,
)

__all__ = [
    'LauncherFamily',
    'detect_launcher',
    'launcher_game_name',
    'launcher_variables',
    'looks_like_opaque_id',
    'find_steam_game_name',
    'IdentityResolver',
    'ResolvedIdentity',
    'name_from_executable',
    'name_from_directory',
    'GENERIC_DIR_NAMES',
]
