"""
Decoders turning property variants into Python values.

dbus-python hands property values back as its own wire types
(``dbus.String``, ``dbus.Double``, ``dbus.Boolean``, ...). Each MPRIS
property gets a small decoder that checks the wire type it expects and
returns a plain Python value. A mismatch is a broken contract on the
remote side and raises :class:`DecodeError` instead of being coerced.
"""
from typing import Any, Dict

import dbus

from .base import BASE_INTERFACE, PLAYER_INTERFACE, LoopStatus, PlaybackStatus


class DecodeError(TypeError):
    """A property value did not have the expected wire type."""

    def __init__(self, interface: str, prop: str, expected: str, value: Any):
        self.interface = interface
        self.prop = prop
        self.expected = expected
        self.value = value
        super().__init__(
            f"{interface}.{prop}: expected {expected}, "
            f"got {type(value).__name__} {value!r}"
        )


def _string(value: Any, interface: str, prop: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(interface, prop, "string", value)
    return str(value)


def _double(value: Any, interface: str, prop: str) -> float:
    if not isinstance(value, float):
        raise DecodeError(interface, prop, "double", value)
    return float(value)


def _boolean(value: Any, interface: str, prop: str) -> bool:
    # dbus.Boolean subclasses int, not bool
    if not isinstance(value, (bool, dbus.Boolean)):
        raise DecodeError(interface, prop, "boolean", value)
    return bool(value)


def _int64(value: Any, interface: str, prop: str) -> int:
    if not isinstance(value, int) or isinstance(value, (bool, dbus.Boolean)):
        raise DecodeError(interface, prop, "int64", value)
    return int(value)


def decode_identity(value: Any) -> str:
    return _string(value, BASE_INTERFACE, "Identity")


def decode_playback_status(value: Any) -> PlaybackStatus:
    return PlaybackStatus(_string(value, PLAYER_INTERFACE, "PlaybackStatus"))


def decode_loop_status(value: Any) -> LoopStatus:
    return LoopStatus(_string(value, PLAYER_INTERFACE, "LoopStatus"))


def decode_rate(value: Any) -> float:
    return _double(value, PLAYER_INTERFACE, "Rate")


def decode_shuffle(value: Any) -> bool:
    return _boolean(value, PLAYER_INTERFACE, "Shuffle")


def decode_metadata(value: Any) -> Dict[str, Any]:
    """Metadata is an ``a{sv}``; the values are passed through as received."""
    if not isinstance(value, dict):
        raise DecodeError(PLAYER_INTERFACE, "Metadata", "a{sv}", value)
    return {str(key): item for key, item in value.items()}


def decode_volume(value: Any) -> float:
    return _double(value, PLAYER_INTERFACE, "Volume")


def decode_position(value: Any) -> int:
    return _int64(value, PLAYER_INTERFACE, "Position")
