"""
Ludusavi Wrapper

Restores game saves before a launch and backs them up afterwards by driving
the ludusavi CLI around the game process. Meant to be set as the "wrapper"
command in Lutris, Heroic, Steam launch options or any launcher that can
prefix a game command.

Features:
- Auto-detects the game name from launcher environment variables
- Checks Syncthing sync status (via stc) before launching
- Updates the ludusavi manifest only when the network is reachable
- Triggers a Syncthing rescan after each backup
- Propagates the game's own exit code to the launcher
"""

__version__ = "1.0.0"
