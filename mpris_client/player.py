"""
MPRIS2 player discovery and control over D-Bus.
"""
import logging
from typing import Any, Dict, List, Optional

import dbus

from .base import (
    BASE_INTERFACE,
    DBUS_INTERFACE,
    DBUS_PATH,
    DBUS_SERVICE,
    MPRIS_PATH,
    MPRIS_PREFIX,
    PLAYER_INTERFACE,
    PROPERTIES_INTERFACE,
    LoopStatus,
    PlaybackStatus,
)
from . import decode

log = logging.getLogger(__name__)


def _call_options(signature: Optional[str], timeout: Optional[float]) -> dict:
    options = {}
    if signature is not None:
        options["signature"] = signature
    if timeout is not None:
        options["timeout"] = timeout
    return options


def list_players(bus, timeout: Optional[float] = None) -> List[str]:
    """
    List the identifiers of all MPRIS2 players on the bus.

    Args:
        bus: dbus-python bus connection
        timeout: Call timeout in seconds (dbus-python default if None)

    Returns:
        Bus name suffixes after ``org.mpris.MediaPlayer2.``, in the order
        the bus daemon reported them. Empty when no player is registered.
    """
    bus_object = bus.get_object(DBUS_SERVICE, DBUS_PATH, introspect=False)
    list_names = bus_object.get_dbus_method("ListNames", DBUS_INTERFACE)
    names = list_names(**_call_options(None, timeout))

    players = [str(name)[len(MPRIS_PREFIX):] for name in names if name.startswith(MPRIS_PREFIX)]
    log.debug("Found %d MPRIS players out of %d bus names", len(players), len(names))
    return players


def connect(bus, identifier: str, timeout: Optional[float] = None) -> "Player":
    """Get a handle on the player ``identifier``. Performs no I/O."""
    return Player(bus, identifier, timeout=timeout)


class Player:
    """
    Handle on one MPRIS2 player.

    Holds no remote state: every method is one round trip to the player
    process. D-Bus errors (``dbus.exceptions.DBusException``) are raised
    as is, and property values of the wrong type raise
    :class:`~mpris_client.decode.DecodeError`.
    """

    def __init__(self, bus, identifier: str, timeout: Optional[float] = None):
        """
        Initialize the handle.

        Args:
            bus: dbus-python bus connection
            identifier: Player identifier, as returned by list_players()
            timeout: Call timeout in seconds (dbus-python default if None)
        """
        self._bus = bus
        self._proxy = None
        self.identifier = identifier
        self.bus_name = MPRIS_PREFIX + identifier
        self.object_path = MPRIS_PATH
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"Player({self.identifier!r})"

    @property
    def proxy(self):
        """The remote object, created on first use."""
        if self._proxy is None:
            self._proxy = self._bus.get_object(self.bus_name, self.object_path, introspect=False)
        return self._proxy

    def _call(self, interface: str, method: str, *args, signature: Optional[str] = None) -> Any:
        log.debug("%s: %s.%s%r", self.bus_name, interface, method, args)
        dbus_method = self.proxy.get_dbus_method(method, interface)
        return dbus_method(*args, **_call_options(signature, self.timeout))

    def _get(self, interface: str, prop: str) -> Any:
        return self._call(PROPERTIES_INTERFACE, "Get", interface, prop, signature="ss")

    def _set(self, interface: str, prop: str, value: Any) -> None:
        self._call(PROPERTIES_INTERFACE, "Set", interface, prop, value, signature="ssv")

    # org.mpris.MediaPlayer2

    def raise_(self) -> None:
        """Bring the player's user interface to the front."""
        self._call(BASE_INTERFACE, "Raise")

    def quit(self) -> None:
        self._call(BASE_INTERFACE, "Quit")

    def get_identity(self) -> str:
        """Get the human readable player name, e.g. "VLC media player"."""
        return decode.decode_identity(self._get(BASE_INTERFACE, "Identity"))

    # org.mpris.MediaPlayer2.Player

    def next(self) -> None:
        self._call(PLAYER_INTERFACE, "Next")

    def previous(self) -> None:
        self._call(PLAYER_INTERFACE, "Previous")

    def pause(self) -> None:
        self._call(PLAYER_INTERFACE, "Pause")

    def play_pause(self) -> None:
        self._call(PLAYER_INTERFACE, "PlayPause")

    def stop(self) -> None:
        self._call(PLAYER_INTERFACE, "Stop")

    def play(self) -> None:
        self._call(PLAYER_INTERFACE, "Play")

    def seek(self, offset: int) -> None:
        """
        Seek relative to the current position.

        Args:
            offset: Offset in microseconds, negative to seek backwards
        """
        self._call(PLAYER_INTERFACE, "Seek", offset, signature="x")

    def set_position(self, track_id: str, position: int) -> None:
        """
        Jump to an absolute position in a track.

        Args:
            track_id: Object path of the track (``mpris:trackid``)
            position: Position in microseconds
        """
        self._call(PLAYER_INTERFACE, "SetPosition", track_id, position, signature="ox")

    def open_uri(self, uri: str) -> None:
        self._call(PLAYER_INTERFACE, "OpenUri", uri, signature="s")

    def volume_up(self) -> None:
        self._call(PLAYER_INTERFACE, "VolumeUp")

    def volume_down(self) -> None:
        self._call(PLAYER_INTERFACE, "VolumeDown")

    def get_playback_status(self) -> PlaybackStatus:
        return decode.decode_playback_status(self._get(PLAYER_INTERFACE, "PlaybackStatus"))

    def get_loop_status(self) -> LoopStatus:
        return decode.decode_loop_status(self._get(PLAYER_INTERFACE, "LoopStatus"))

    def get_rate(self) -> float:
        return decode.decode_rate(self._get(PLAYER_INTERFACE, "Rate"))

    def get_shuffle(self) -> bool:
        return decode.decode_shuffle(self._get(PLAYER_INTERFACE, "Shuffle"))

    def get_metadata(self) -> Dict[str, Any]:
        """Get the metadata of the current track (``xesam:*``, ``mpris:*`` keys)."""
        return decode.decode_metadata(self._get(PLAYER_INTERFACE, "Metadata"))

    def get_volume(self) -> float:
        return decode.decode_volume(self._get(PLAYER_INTERFACE, "Volume"))

    def set_volume(self, volume: float) -> None:
        """Set the volume, 1.0 being the player's nominal maximum."""
        self._set(PLAYER_INTERFACE, "Volume", dbus.Double(volume))

    def get_position(self) -> int:
        """Get the playback position in microseconds."""
        return decode.decode_position(self._get(PLAYER_INTERFACE, "Position"))
