"""
MPRIS2 media player client.
"""
import dbus

from .base import (
    BASE_INTERFACE,
    MPRIS_PATH,
    MPRIS_PREFIX,
    PLAYER_INTERFACE,
    PLAYLISTS_INTERFACE,
    PROPERTIES_CHANGED_SIGNAL,
    PROPERTIES_INTERFACE,
    TRACKLIST_INTERFACE,
    LoopStatus,
    PlaybackStatus,
    PlayerSnapshot,
)
from .decode import DecodeError
from .player import Player, connect, list_players


# Bus type constants
BUS_SESSION = "session"  # Desktop media players (default)
BUS_SYSTEM = "system"    # System-wide players such as headless daemons


def open_bus(bus_type: str = BUS_SESSION):
    """
    Open a connection to the message bus players live on.

    Args:
        bus_type: Which bus to connect to
            - "session": the user's session bus (default)
            - "system": the system bus
    """
    if bus_type == BUS_SESSION:
        return dbus.SessionBus()
    elif bus_type == BUS_SYSTEM:
        return dbus.SystemBus()
    else:
        raise ValueError(f"Unknown bus type {bus_type!r}")


__all__ = [
    "Player",
    "PlayerSnapshot",
    "PlaybackStatus",
    "LoopStatus",
    "DecodeError",
    "connect",
    "list_players",
    "open_bus",
    "BUS_SESSION",
    "BUS_SYSTEM",
    "MPRIS_PATH",
    "MPRIS_PREFIX",
    "BASE_INTERFACE",
    "PLAYER_INTERFACE",
    "TRACKLIST_INTERFACE",
    "PLAYLISTS_INTERFACE",
    "PROPERTIES_INTERFACE",
    "PROPERTIES_CHANGED_SIGNAL",
]
