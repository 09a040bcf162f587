"""Tests for the D-Bus player wrapper using fakes."""

from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace
from typing import Any

import pytest

from mpris_block import players
from mpris_block.players import (
    LoopStatus,
    MprisError,
    PlaybackStatus,
    PlayerDirectory,
    SetOutcome,
)


class FakeDBusException(Exception):
    pass


class FakePlayerObject:
    def __init__(self, props: dict[str, Any]) -> None:
        self.props = props
        self.calls: list[str] = []
        self.broken: set[str] = set()

    def Get(self, iface: str, name: str) -> Any:
        assert iface == players.PLAYER_IFACE
        if name in self.broken or name not in self.props:
            raise FakeDBusException(f"no {name}")
        return self.props[name]

    def GetAll(self, iface: str) -> dict[str, Any]:
        assert iface == players.PLAYER_IFACE
        return dict(self.props)

    def Set(self, iface: str, name: str, value: Any) -> None:
        if name in self.broken:
            raise FakeDBusException(f"read-only {name}")
        self.props[name] = value

    def _method(self, name: str) -> None:
        if name in self.broken:
            raise FakeDBusException(f"{name} rejected")
        self.calls.append(name)

    def Stop(self) -> None:
        self._method("Stop")

    def PlayPause(self) -> None:
        self._method("PlayPause")

    def Previous(self) -> None:
        self._method("Previous")

    def Next(self) -> None:
        self._method("Next")


class FakeBus:
    def __init__(self, objects: dict[str, FakePlayerObject]) -> None:
        self.objects = objects

    def list_names(self) -> list[str]:
        return ["org.freedesktop.DBus", ":1.42", *self.objects]

    def get_object(self, name: str, path: str) -> FakePlayerObject:
        assert path == players.MPRIS_PATH
        if name not in self.objects:
            raise FakeDBusException(f"{name} vanished")
        return self.objects[name]


def _fake_dbus(bus: FakeBus) -> SimpleNamespace:
    return SimpleNamespace(
        SessionBus=lambda: bus,
        Interface=lambda obj, _iface: obj,
        Boolean=bool,
        exceptions=SimpleNamespace(DBusException=FakeDBusException),
    )


def _props(**overrides: Any) -> dict[str, Any]:
    props: dict[str, Any] = {
        "PlaybackStatus": "Playing",
        "Metadata": {
            "xesam:artist": ["Nina Simone"],
            "xesam:title": "Sinnerman",
            "mpris:length": 620_000_000,
        },
        "Position": 65_000_000,
        "LoopStatus": "Track",
        "Shuffle": False,
        "CanControl": True,
    }
    props.update(overrides)
    return props


@pytest.fixture
def fake_bus(monkeypatch: pytest.MonkeyPatch) -> FakeBus:
    bus = FakeBus({})
    monkeypatch.setattr(players, "dbus", _fake_dbus(bus))
    monkeypatch.setattr(players, "_DBUS_IMPORT_ERROR", None)
    return bus


def _only_player(bus: FakeBus, props: dict[str, Any]) -> players.Player:
    bus.objects["org.mpris.MediaPlayer2.vlc"] = FakePlayerObject(props)
    (player,) = PlayerDirectory().find_all()
    return player


def test_find_all_filters_mpris_names(fake_bus: FakeBus) -> None:
    fake_bus.objects["org.mpris.MediaPlayer2.vlc"] = FakePlayerObject(_props())
    fake_bus.objects["org.mpris.MediaPlayer2.mpd"] = FakePlayerObject(_props())
    found = players.sort_players(PlayerDirectory().find_all())
    assert [p.bus_name for p in found] == [
        "org.mpris.MediaPlayer2.mpd",
        "org.mpris.MediaPlayer2.vlc",
    ]
    assert [p.suffix for p in found] == ["mpd", "vlc"]


def test_player_reads_properties(fake_bus: FakeBus) -> None:
    player = _only_player(fake_bus, _props())
    assert player.playback_status() is PlaybackStatus.PLAYING
    meta = player.metadata()
    assert meta.artists == ("Nina Simone",)
    assert meta.title == "Sinnerman"
    assert meta.length == timedelta(seconds=620)
    assert player.position() == timedelta(seconds=65)
    assert player.loop_status() is LoopStatus.TRACK
    assert player.shuffle() is False


def test_metadata_defaults_when_missing() -> None:
    meta = players.metadata_from_mapping({"xesam:artist": "Solo"})
    assert meta.artists == ("Solo",)
    assert meta.title is None
    assert meta.length is None


def test_position_is_optional(fake_bus: FakeBus) -> None:
    props = _props()
    del props["Position"]
    player = _only_player(fake_bus, props)
    assert player.position() is None


def test_status_failure_raises(fake_bus: FakeBus) -> None:
    player = _only_player(fake_bus, _props())
    fake_bus.objects[player.bus_name].broken.add("PlaybackStatus")
    with pytest.raises(MprisError):
        player.playback_status()


def test_unknown_status_raises(fake_bus: FakeBus) -> None:
    player = _only_player(fake_bus, _props(PlaybackStatus="Buffering"))
    with pytest.raises(MprisError):
        player.playback_status()


def test_vanished_player_raises(fake_bus: FakeBus) -> None:
    player = _only_player(fake_bus, _props())
    fake_bus.objects.clear()
    with pytest.raises(MprisError):
        player.stop()


def test_transport_methods(fake_bus: FakeBus) -> None:
    player = _only_player(fake_bus, _props())
    player.stop()
    player.play_pause()
    player.previous()
    player.next()
    assert fake_bus.objects[player.bus_name].calls == [
        "Stop",
        "PlayPause",
        "Previous",
        "Next",
    ]


def test_transport_failure_raises(fake_bus: FakeBus) -> None:
    player = _only_player(fake_bus, _props())
    fake_bus.objects[player.bus_name].broken.add("Next")
    with pytest.raises(MprisError):
        player.next()


def test_checked_setters_apply(fake_bus: FakeBus) -> None:
    player = _only_player(fake_bus, _props())
    assert player.checked_set_loop_status(LoopStatus.PLAYLIST).outcome is (
        SetOutcome.APPLIED
    )
    assert player.checked_set_shuffle(True).outcome is SetOutcome.APPLIED
    props = fake_bus.objects[player.bus_name].props
    assert props["LoopStatus"] == "Playlist"
    assert props["Shuffle"] is True


def test_checked_setters_unsupported(fake_bus: FakeBus) -> None:
    props = _props(CanControl=False)
    player = _only_player(fake_bus, props)
    assert player.checked_set_shuffle(True).outcome is SetOutcome.UNSUPPORTED
    assert props["Shuffle"] is False


def test_checked_setter_without_property(fake_bus: FakeBus) -> None:
    props = _props()
    del props["LoopStatus"]
    player = _only_player(fake_bus, props)
    assert player.can_loop() is False
    result = player.checked_set_loop_status(LoopStatus.TRACK)
    assert result.outcome is SetOutcome.UNSUPPORTED


def test_checked_setter_failure(fake_bus: FakeBus) -> None:
    player = _only_player(fake_bus, _props())
    fake_bus.objects[player.bus_name].broken.add("Shuffle")
    result = player.checked_set_shuffle(True)
    assert result.outcome is SetOutcome.FAILED
    assert "read-only" in result.reason


def test_missing_dbus_raises_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(players, "dbus", None)
    monkeypatch.setattr(players, "_DBUS_IMPORT_ERROR", RuntimeError("missing"))
    with pytest.raises(RuntimeError, match="dbus-python"):
        PlayerDirectory()


def test_session_bus_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def no_bus() -> None:
        raise FakeDBusException("no session bus")

    fake = _fake_dbus(FakeBus({}))
    fake.SessionBus = no_bus
    monkeypatch.setattr(players, "dbus", fake)
    monkeypatch.setattr(players, "_DBUS_IMPORT_ERROR", None)
    with pytest.raises(MprisError, match="player finder"):
        PlayerDirectory()


def test_load_dbus_import_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    import builtins

    original_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "dbus":
            raise ModuleNotFoundError("dbus")
        return original_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)
    monkeypatch.setattr(players, "dbus", None)
    monkeypatch.setattr(players, "_DBUS_IMPORT_ERROR", None)
    players._load_dbus()
    assert players.dbus is None
    assert isinstance(players._DBUS_IMPORT_ERROR, ModuleNotFoundError)


@pytest.mark.dbus
def test_live_session_bus_lists_players() -> None:
    pytest.importorskip("dbus")
    found = PlayerDirectory().find_all()
    assert all(p.bus_name.startswith(players.MPRIS_PREFIX) for p in found)
