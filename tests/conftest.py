import collections

import dbus
import pytest
from dbus.exceptions import DBusException

from mpris_client import PROPERTIES_INTERFACE


Call = collections.namedtuple(
    'Call',
    ['bus_name', 'path', 'interface', 'member', 'args', 'options'],
)


class FakeProxy:
    """Stands in for a dbus.proxies.ProxyObject, routing calls to FakeBus."""

    def __init__(self, bus, bus_name, path):
        self.bus = bus
        self.bus_name = bus_name
        self.path = path

    def get_dbus_method(self, member, dbus_interface=None):
        def method(*args, **options):
            # dbus-python refuses object paths while marshaling, before sending
            for code, arg in zip(options.get('signature', ''), args):
                if code == 'o':
                    dbus.validate_object_path(arg)
            return self.bus.handle(
                Call(self.bus_name, self.path, dbus_interface, member, args, options)
            )

        return method


class FakeBus:
    """
    Records every method call and serves Properties.Get/Set from a dict
    keyed by (bus name, interface, property).
    """

    def __init__(self, names=()):
        self.names = list(names)
        self.properties = {}
        self.errors = {}
        self.calls = []
        self.objects = []

    def get_object(self, bus_name, object_path, introspect=True):
        dbus.validate_bus_name(bus_name)
        dbus.validate_object_path(object_path)
        self.objects.append((bus_name, object_path, introspect))
        return FakeProxy(self, bus_name, object_path)

    def fail(self, bus_name, member, error):
        """Make every call of ``member`` on ``bus_name`` raise ``error``."""
        self.errors[(bus_name, member)] = error

    def handle(self, call):
        self.calls.append(call)
        error = self.errors.get((call.bus_name, call.member))
        if error is not None:
            raise error

        if call.member == 'ListNames':
            return list(self.names)
        if call.interface == PROPERTIES_INTERFACE and call.member == 'Get':
            interface, prop = call.args
            try:
                return self.properties[(call.bus_name, interface, prop)]
            except KeyError:
                raise DBusException(
                    f'No such property {prop!r}',
                    name='org.freedesktop.DBus.Error.InvalidArgs',
                )
        if call.interface == PROPERTIES_INTERFACE and call.member == 'Set':
            interface, prop, value = call.args
            self.properties[(call.bus_name, interface, prop)] = value
            return None
        return None


@pytest.fixture
def bus():
    return FakeBus()
