"""
MPRIS Control API Server

HTTP API for discovering and controlling MPRIS2 media players on D-Bus.
"""
import argparse
import logging
from typing import Any, Optional

import dbus
from dbus.exceptions import DBusException
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from mpris_client import (
    BUS_SESSION,
    BUS_SYSTEM,
    DecodeError,
    Player,
    PlayerSnapshot,
    connect,
    list_players,
    open_bus,
)

log = logging.getLogger(__name__)

VERSION = "1.0.0"

# Set by command line arguments
_bus_type = BUS_SESSION
_timeout: Optional[float] = None

# Global state
_bus = None


# Commands without arguments, by URL name
COMMANDS = {
    "play": Player.play,
    "pause": Player.pause,
    "play-pause": Player.play_pause,
    "stop": Player.stop,
    "next": Player.next,
    "previous": Player.previous,
    "raise": Player.raise_,
    "quit": Player.quit,
    "volume-up": Player.volume_up,
    "volume-down": Player.volume_down,
}


class SeekRequest(BaseModel):
    offset: int


class PositionRequest(BaseModel):
    track_id: str
    position: int


class OpenUriRequest(BaseModel):
    uri: str


class VolumeRequest(BaseModel):
    volume: float


def get_bus():
    """Get the shared bus connection, connecting on first use."""
    global _bus
    if _bus is None:
        _bus = open_bus(_bus_type)
        print(f"Connected to the {_bus_type} bus")
    return _bus


def get_player(identifier: str, bus=Depends(get_bus)) -> Player:
    return connect(bus, identifier, timeout=_timeout)


def _json_value(value: Any) -> Any:
    """Turn dbus.Boolean (an int subclass) back into bool, recursively."""
    if isinstance(value, dbus.Boolean):
        return bool(value)
    if isinstance(value, dict):
        return {key: _json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_value(item) for item in value]
    return value


# Create FastAPI app
app = FastAPI(
    title="MPRIS Control API",
    description="Discover and control MPRIS2 media players over D-Bus",
    version=VERSION,
)

# Enable CORS for web access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DBusException)
async def dbus_error_handler(request: Request, exc: DBusException):
    """The bus or the player rejected the call."""
    log.warning("D-Bus error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=502,
        content={
            "error": exc.get_dbus_message(),
            "dbus_error": exc.get_dbus_name(),
        }
    )


@app.exception_handler(ValueError)
@app.exception_handler(TypeError)
async def bad_argument_handler(request: Request, exc: Exception):
    """An identifier or argument dbus-python refused to marshal."""
    log.info("Rejected arguments on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=400,
        content={"error": str(exc)}
    )


@app.exception_handler(DecodeError)
async def decode_error_handler(request: Request, exc: DecodeError):
    """The player sent a property value of the wrong type."""
    log.error("Bad property value on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"error": str(exc)}
    )


@app.get("/")
async def root():
    """API status endpoint."""
    return {
        "status": "running",
        "service": "MPRIS Control API",
        "version": VERSION,
        "bus": _bus_type,
    }


@app.get("/players")
def players(bus=Depends(get_bus)):
    """List the identifiers of all MPRIS players on the bus."""
    return {"players": list_players(bus, timeout=_timeout)}


@app.get("/players/{identifier}")
def player_snapshot(player: Player = Depends(get_player)):
    """Read the mandatory properties of a player."""
    snapshot = PlayerSnapshot(
        identifier=player.identifier,
        identity=player.get_identity(),
        playback_status=player.get_playback_status(),
        rate=player.get_rate(),
        volume=player.get_volume(),
        position=player.get_position(),
        metadata=_json_value(player.get_metadata()),
    )
    return snapshot.to_dict()


@app.get("/players/{identifier}/loop-status")
def loop_status(player: Player = Depends(get_player)):
    return {"loop_status": player.get_loop_status().value}


@app.get("/players/{identifier}/shuffle")
def shuffle(player: Player = Depends(get_player)):
    return {"shuffle": player.get_shuffle()}


@app.put("/players/{identifier}/volume")
def set_volume(body: VolumeRequest, player: Player = Depends(get_player)):
    player.set_volume(body.volume)
    return {"player": player.identifier, "volume": body.volume}


@app.post("/players/{identifier}/seek")
def seek(body: SeekRequest, player: Player = Depends(get_player)):
    player.seek(body.offset)
    return {"player": player.identifier, "command": "seek", "ok": True}


@app.post("/players/{identifier}/position")
def set_position(body: PositionRequest, player: Player = Depends(get_player)):
    player.set_position(body.track_id, body.position)
    return {"player": player.identifier, "command": "position", "ok": True}


@app.post("/players/{identifier}/open")
def open_uri(body: OpenUriRequest, player: Player = Depends(get_player)):
    player.open_uri(body.uri)
    return {"player": player.identifier, "command": "open", "ok": True}


@app.post("/players/{identifier}/{command}")
def run_command(command: str, player: Player = Depends(get_player)):
    """Run a player command that takes no arguments."""
    action = COMMANDS.get(command)
    if action is None:
        return JSONResponse(
            status_code=404,
            content={"error": f"Unknown command: {command}"}
        )

    action(player)
    return {"player": player.identifier, "command": command, "ok": True}


if __name__ == "__main__":
    import uvicorn

    parser = argparse.ArgumentParser(
        description="MPRIS Control API Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                      # Players on the session bus
  python main.py --bus system         # Players on the system bus
  python main.py --timeout 2.5        # Give up on slow players after 2.5s
"""
    )
    parser.add_argument(
        "--bus", "-b",
        dest="bus_type",
        choices=[BUS_SESSION, BUS_SYSTEM],
        default=BUS_SESSION,
        help="Message bus to look for players on (default: session)"
    )
    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=None,
        help="D-Bus call timeout in seconds (default: dbus-python default)"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8765,
        help="Port to bind to (default: 8765)"
    )

    args = parser.parse_args()
    _bus_type = args.bus_type
    _timeout = args.timeout

    if _bus_type != BUS_SESSION:
        print(f"Bus: {_bus_type}")

    uvicorn.run(app, host=args.host, port=args.port)
