import argparse
import sys

from dbus.exceptions import DBusException

from mpris_client import BUS_SESSION, BUS_SYSTEM, connect, list_players, open_bus


def check_mpris(bus):
    names = list_players(bus)

    print(f"Found {len(names)} MPRIS services:")

    for name in names:
        print(f"\n--- {name} ---")
        player = connect(bus, name)
        try:
            print(f"Identity: {player.get_identity()}")
            print(f"Status: {player.get_playback_status().value}")
            print("Metadata:")
            for key, val in player.get_metadata().items():
                print(f"  {key}: {val}")
        except DBusException as e:
            print(f"  Error reading properties: {e.get_dbus_name()}: {e.get_dbus_message()}")


def raise_first(bus) -> int:
    names = list_players(bus)
    if not names:
        print("No media player found.", file=sys.stderr)
        return 1

    player = connect(bus, names[0])
    print(f"Found media player: {names[0]}")
    print(f"Media player identity: {player.get_identity()}")
    player.raise_()
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Dump MPRIS players on the bus")
    parser.add_argument("--bus", choices=[BUS_SESSION, BUS_SYSTEM], default=BUS_SESSION)
    parser.add_argument("--raise", dest="raise_player", action="store_true",
                        help="Raise the first player found instead of dumping")
    args = parser.parse_args()

    bus = open_bus(args.bus)
    if args.raise_player:
        sys.exit(raise_first(bus))
    check_mpris(bus)
