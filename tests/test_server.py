import dbus
import pytest
from dbus.exceptions import DBusException
from fastapi.testclient import TestClient

import main

VLC = 'org.mpris.MediaPlayer2.vlc'
BASE = 'org.mpris.MediaPlayer2'
PLAYER = 'org.mpris.MediaPlayer2.Player'


@pytest.fixture
def client(bus):
    main.app.dependency_overrides[main.get_bus] = lambda: bus
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


def _fill_vlc(bus):
    bus.properties.update({
        (VLC, BASE, 'Identity'): dbus.String('VLC media player'),
        (VLC, PLAYER, 'PlaybackStatus'): dbus.String('Playing'),
        (VLC, PLAYER, 'Rate'): dbus.Double(1.0),
        (VLC, PLAYER, 'Volume'): dbus.Double(0.8),
        (VLC, PLAYER, 'Position'): dbus.Int64(5000000),
        (VLC, PLAYER, 'Metadata'): dbus.Dictionary(
            {'xesam:title': dbus.String('Song')}, signature='sv'
        ),
    })


def test_root(client):
    response = client.get('/')

    assert response.status_code == 200
    assert response.json()['status'] == 'running'
    assert response.json()['bus'] == 'session'


def test_players(client, bus):
    bus.names = ['org.mpris.MediaPlayer2.vlc', 'com.example.Other', 'org.mpris.MediaPlayer2.mpv']

    response = client.get('/players')

    assert response.json() == {'players': ['vlc', 'mpv']}


def test_players_empty(client, bus):
    response = client.get('/players')

    assert response.status_code == 200
    assert response.json() == {'players': []}


def test_player_snapshot(client, bus):
    _fill_vlc(bus)

    response = client.get('/players/vlc')

    assert response.status_code == 200
    assert response.json() == {
        'identifier': 'vlc',
        'identity': 'VLC media player',
        'playback_status': 'Playing',
        'rate': 1.0,
        'volume': 0.8,
        'position': 5000000,
        'metadata': {'xesam:title': 'Song'},
    }


def test_optional_properties(client, bus):
    bus.properties[(VLC, PLAYER, 'LoopStatus')] = dbus.String('Track')
    bus.properties[(VLC, PLAYER, 'Shuffle')] = dbus.Boolean(False)

    assert client.get('/players/vlc/loop-status').json() == {'loop_status': 'Track'}
    assert client.get('/players/vlc/shuffle').json() == {'shuffle': False}


@pytest.mark.parametrize(
    'command, interface, member',
    [
        ('play', PLAYER, 'Play'),
        ('play-pause', PLAYER, 'PlayPause'),
        ('next', PLAYER, 'Next'),
        ('volume-down', PLAYER, 'VolumeDown'),
        ('raise', BASE, 'Raise'),
        ('quit', BASE, 'Quit'),
    ],
)
def test_commands(client, bus, command, interface, member):
    response = client.post(f'/players/vlc/{command}')

    assert response.status_code == 200
    assert response.json() == {'player': 'vlc', 'command': command, 'ok': True}
    (call,) = bus.calls
    assert (call.bus_name, call.interface, call.member) == (VLC, interface, member)


def test_unknown_command(client, bus):
    response = client.post('/players/vlc/rewind')

    assert response.status_code == 404
    assert bus.calls == []


def test_seek(client, bus):
    response = client.post('/players/vlc/seek', json={'offset': -1000000})

    assert response.status_code == 200
    (call,) = bus.calls
    assert (call.member, call.args) == ('Seek', (-1000000,))


def test_set_position(client, bus):
    response = client.post(
        '/players/vlc/position',
        json={'track_id': '/org/videolan/vlc/playlist/3', 'position': 0},
    )

    assert response.status_code == 200
    (call,) = bus.calls
    assert (call.member, call.args) == ('SetPosition', ('/org/videolan/vlc/playlist/3', 0))


def test_open_uri(client, bus):
    response = client.post('/players/vlc/open', json={'uri': 'https://example.com/stream.mp3'})

    assert response.status_code == 200
    (call,) = bus.calls
    assert (call.member, call.args) == ('OpenUri', ('https://example.com/stream.mp3',))


def test_set_volume(client, bus):
    response = client.put('/players/vlc/volume', json={'volume': 0.3})

    assert response.status_code == 200
    assert bus.properties[(VLC, PLAYER, 'Volume')] == 0.3


def test_dbus_error_maps_to_bad_gateway(client, bus):
    bus.fail(
        'org.mpris.MediaPlayer2.gone',
        'Play',
        DBusException('not running', name='org.freedesktop.DBus.Error.ServiceUnknown'),
    )

    response = client.post('/players/gone/play')

    assert response.status_code == 502
    assert response.json() == {
        'error': 'not running',
        'dbus_error': 'org.freedesktop.DBus.Error.ServiceUnknown',
    }


def test_decode_error_maps_to_server_error(client, bus):
    bus.properties[(VLC, PLAYER, 'Shuffle')] = dbus.String('yes')

    response = client.get('/players/vlc/shuffle')

    assert response.status_code == 500
    assert 'Shuffle' in response.json()['error']


@pytest.mark.parametrize('identifier', ['1abc', 'a b'])
def test_invalid_identifier_is_bad_request(client, bus, identifier):
    response = client.get(f'/players/{identifier}')

    assert response.status_code == 400
    assert 'error' in response.json()
    assert bus.calls == []


def test_invalid_identifier_command_is_bad_request(client, bus):
    response = client.post('/players/1abc/play')

    assert response.status_code == 400
    assert bus.calls == []


def test_invalid_track_id_is_bad_request(client, bus):
    response = client.post(
        '/players/vlc/position',
        json={'track_id': 'not-a-path', 'position': 0},
    )

    assert response.status_code == 400
    assert 'error' in response.json()
    assert bus.calls == []


def test_snapshot_metadata_booleans_stay_booleans(client, bus):
    _fill_vlc(bus)
    bus.properties[(VLC, PLAYER, 'Metadata')] = dbus.Dictionary(
        {
            'xesam:title': dbus.String('Song'),
            'xesam:explicit': dbus.Boolean(True),
            'xesam:trackNumber': dbus.Int32(3),
        },
        signature='sv',
    )

    metadata = client.get('/players/vlc').json()['metadata']

    assert metadata['xesam:explicit'] is True
    assert metadata['xesam:trackNumber'] == 3
    assert metadata['xesam:title'] == 'Song'
