"""
Protocol constants and value types for MPRIS2.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


MPRIS_PATH = "/org/mpris/MediaPlayer2"

BASE_INTERFACE = "org.mpris.MediaPlayer2"
PLAYER_INTERFACE = "org.mpris.MediaPlayer2.Player"
TRACKLIST_INTERFACE = "org.mpris.MediaPlayer2.TrackList"
PLAYLISTS_INTERFACE = "org.mpris.MediaPlayer2.Playlists"

# Every MPRIS2 bus name is the base interface name plus a player suffix
MPRIS_PREFIX = BASE_INTERFACE + "."

PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"
PROPERTIES_CHANGED_SIGNAL = PROPERTIES_INTERFACE + ".PropertiesChanged"

DBUS_SERVICE = "org.freedesktop.DBus"
DBUS_PATH = "/org/freedesktop/DBus"
DBUS_INTERFACE = "org.freedesktop.DBus"


class _OpenVocabulary(str, Enum):
    """
    String enum that accepts values outside its declared members.

    Looking up an unknown string returns an unrecognized member whose
    value is the raw string, so newer protocol values survive decoding.
    """

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        member = str.__new__(cls, value)
        member._name_ = "UNRECOGNIZED"
        member._value_ = value
        return member

    @property
    def recognized(self) -> bool:
        """True when the value is one of the declared members."""
        return self._value_ in type(self)._value2member_map_


class PlaybackStatus(_OpenVocabulary):
    """Media playback status."""
    PLAYING = "Playing"
    PAUSED = "Paused"
    STOPPED = "Stopped"


class LoopStatus(_OpenVocabulary):
    """Repeat mode of the player."""
    NONE = "None"
    TRACK = "Track"
    PLAYLIST = "Playlist"


@dataclass
class PlayerSnapshot:
    """The mandatory properties of one player, read in one go."""
    identifier: str
    identity: str
    playback_status: PlaybackStatus
    rate: float
    volume: float
    position: int
    metadata: Dict[str, Any]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "identifier": self.identifier,
            "identity": self.identity,
            "playback_status": self.playback_status.value,
            "rate": self.rate,
            "volume": self.volume,
            "position": self.position,
            "metadata": self.metadata,
        }
