"""MPRIS2 players reachable on the D-Bus session bus."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any, Optional, cast
import logging

dbus: Any | None = None
_DBUS_IMPORT_ERROR: Optional[Exception] = None

MPRIS_PREFIX = "org.mpris.MediaPlayer2."
MPRIS_PATH = "/org/mpris/MediaPlayer2"
PLAYER_IFACE = "org.mpris.MediaPlayer2.Player"
PROPS_IFACE = "org.freedesktop.DBus.Properties"

logger = logging.getLogger(__name__)


def _load_dbus() -> None:
    global dbus
    global _DBUS_IMPORT_ERROR
    if dbus is not None or _DBUS_IMPORT_ERROR is not None:
        return
    try:
        import dbus as dbus_module  # type: ignore
    except Exception as exc:  # pragma: no cover - platform-dependent import
        dbus = None
        _DBUS_IMPORT_ERROR = exc
    else:
        dbus = cast(Any, dbus_module)
        _DBUS_IMPORT_ERROR = None


def _bus_errors() -> tuple[type[BaseException], ...]:
    return (cast(Any, dbus).exceptions.DBusException,)


class MprisError(RuntimeError):
    """A call on the bus or on a player failed."""


class UnsupportedError(MprisError):
    """The player does not support the requested change."""


class PlaybackStatus(Enum):
    PLAYING = "Playing"
    PAUSED = "Paused"
    STOPPED = "Stopped"


class LoopStatus(Enum):
    NONE = "None"
    TRACK = "Track"
    PLAYLIST = "Playlist"


class SetOutcome(Enum):
    APPLIED = "applied"
    UNSUPPORTED = "unsupported"
    FAILED = "failed"


@dataclass(frozen=True)
class SetResult:
    """Outcome of a capability-checked property change."""

    outcome: SetOutcome
    reason: str = ""


APPLIED = SetResult(SetOutcome.APPLIED)
UNSUPPORTED = SetResult(SetOutcome.UNSUPPORTED)


@dataclass(frozen=True)
class Metadata:
    artists: tuple[str, ...] = field(default_factory=tuple)
    title: Optional[str] = None
    length: Optional[timedelta] = None


def strip_prefix(bus_name: str) -> str:
    """Return the bus name without the MPRIS well-known prefix."""
    return bus_name[len(MPRIS_PREFIX) :]


def full_name(suffix: str) -> str:
    """Return the full bus name for a stored suffix."""
    return MPRIS_PREFIX + suffix


def _micros(value: object) -> Optional[timedelta]:
    try:
        micros = int(cast(Any, value))
    except (TypeError, ValueError):
        return None
    if micros < 0:
        return None
    return timedelta(microseconds=micros)


def metadata_from_mapping(raw: dict[str, Any]) -> Metadata:
    """Convert an MPRIS ``Metadata`` dictionary into a Metadata value."""
    artists_raw = raw.get("xesam:artist") or ()
    if isinstance(artists_raw, str):
        artists_raw = (artists_raw,)
    title = raw.get("xesam:title")
    length = raw.get("mpris:length")
    return Metadata(
        artists=tuple(str(artist) for artist in artists_raw),
        title=str(title) if title is not None else None,
        length=_micros(length) if length is not None else None,
    )


class Player:
    """Live handle to one MPRIS2 player; every getter asks the bus."""

    def __init__(self, bus: Any, bus_name: str) -> None:
        self._bus = bus
        self._bus_name = str(bus_name)
        self._proxy: Any | None = None

    def __repr__(self) -> str:
        return f"Player({self._bus_name!r})"

    @property
    def bus_name(self) -> str:
        return self._bus_name

    @property
    def suffix(self) -> str:
        return strip_prefix(self._bus_name)

    def _object(self) -> Any:
        if self._proxy is None:
            try:
                self._proxy = self._bus.get_object(self._bus_name, MPRIS_PATH)
            except _bus_errors() as exc:
                raise MprisError(f"{self._bus_name}: cannot reach player") from exc
        return self._proxy

    def _props(self) -> Any:
        return cast(Any, dbus).Interface(self._object(), PROPS_IFACE)

    def _get(self, name: str) -> Any:
        try:
            return self._props().Get(PLAYER_IFACE, name)
        except _bus_errors() as exc:
            raise MprisError(f"{self._bus_name}: cannot read {name}: {exc}") from exc

    def _call(self, method: str) -> None:
        iface = cast(Any, dbus).Interface(self._object(), PLAYER_IFACE)
        try:
            getattr(iface, method)()
        except _bus_errors() as exc:
            raise MprisError(f"{self._bus_name}: {method} failed: {exc}") from exc

    def _has_property(self, name: str) -> bool:
        try:
            props = self._props().GetAll(PLAYER_IFACE)
        except _bus_errors() as exc:
            raise MprisError(
                f"{self._bus_name}: cannot list properties: {exc}"
            ) from exc
        return name in props

    def _checked_set(self, name: str, value: Any, supported: bool) -> SetResult:
        if not supported:
            return UNSUPPORTED
        try:
            self._props().Set(PLAYER_IFACE, name, value)
        except _bus_errors() as exc:
            return SetResult(SetOutcome.FAILED, str(exc))
        return APPLIED

    def playback_status(self) -> PlaybackStatus:
        raw = str(self._get("PlaybackStatus"))
        try:
            return PlaybackStatus(raw)
        except ValueError as exc:
            raise MprisError(
                f"{self._bus_name}: unknown playback status {raw!r}"
            ) from exc

    def metadata(self) -> Metadata:
        return metadata_from_mapping(dict(self._get("Metadata")))

    def position(self) -> Optional[timedelta]:
        """Return the playback position, or None when it cannot be read."""
        try:
            return _micros(self._get("Position"))
        except MprisError:
            logger.debug("%s: no position available", self._bus_name)
            return None

    def loop_status(self) -> LoopStatus:
        raw = str(self._get("LoopStatus"))
        try:
            return LoopStatus(raw)
        except ValueError as exc:
            raise MprisError(f"{self._bus_name}: unknown loop status {raw!r}") from exc

    def shuffle(self) -> bool:
        return bool(self._get("Shuffle"))

    def can_control(self) -> bool:
        return bool(self._get("CanControl"))

    def can_loop(self) -> bool:
        return self.can_control() and self._has_property("LoopStatus")

    def can_shuffle(self) -> bool:
        return self.can_control() and self._has_property("Shuffle")

    def stop(self) -> None:
        self._call("Stop")

    def play_pause(self) -> None:
        self._call("PlayPause")

    def previous(self) -> None:
        self._call("Previous")

    def next(self) -> None:
        self._call("Next")

    def checked_set_loop_status(self, status: LoopStatus) -> SetResult:
        return self._checked_set("LoopStatus", status.value, self.can_loop())

    def checked_set_shuffle(self, value: bool) -> SetResult:
        return self._checked_set(
            "Shuffle", cast(Any, dbus).Boolean(value), self.can_shuffle()
        )


class PlayerDirectory:
    """Enumerates the MPRIS2 players on the session bus."""

    def __init__(self) -> None:
        _load_dbus()
        if dbus is None:
            raise RuntimeError(
                "D-Bus backend is unavailable. Install the dbus-python package."
            ) from _DBUS_IMPORT_ERROR
        try:
            self._bus = cast(Any, dbus).SessionBus()
        except _bus_errors() as exc:
            raise MprisError(f"Cannot open a player finder: {exc}") from exc

    def find_all(self) -> list[Player]:
        try:
            names = [str(name) for name in self._bus.list_names()]
        except _bus_errors() as exc:
            raise MprisError(f"Cannot find players: {exc}") from exc
        players = [
            Player(self._bus, name) for name in names if name.startswith(MPRIS_PREFIX)
        ]
        logger.debug("Found %d players", len(players))
        return players


def sort_players(players: list[Player]) -> list[Player]:
    """Return players ordered by bus name."""
    return sorted(players, key=lambda player: player.bus_name)
