"""Pytest configuration and fakes for mpris-block."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
import os
from typing import Callable, Optional

import pytest

from mpris_block.players import (
    APPLIED,
    UNSUPPORTED,
    LoopStatus,
    Metadata,
    MprisError,
    PlaybackStatus,
    SetResult,
    full_name,
    strip_prefix,
)
from mpris_block.selection_store import MemorySelectionStore


@dataclass
class FakePlayer:
    bus_name: str
    status: PlaybackStatus = PlaybackStatus.STOPPED
    meta: Metadata = field(default_factory=Metadata)
    pos: Optional[timedelta] = None
    loop: LoopStatus = LoopStatus.NONE
    shuffled: bool = False
    controllable: bool = True
    loopable: bool = True
    shufflable: bool = True
    fail: bool = False
    calls: list[str] = field(default_factory=list)

    @property
    def suffix(self) -> str:
        return strip_prefix(self.bus_name)

    def _record(self, name: str) -> None:
        if self.fail:
            raise MprisError(f"{self.bus_name}: {name} failed")
        self.calls.append(name)

    def playback_status(self) -> PlaybackStatus:
        if self.fail:
            raise MprisError(f"{self.bus_name}: cannot read PlaybackStatus")
        return self.status

    def metadata(self) -> Metadata:
        return self.meta

    def position(self) -> Optional[timedelta]:
        return self.pos

    def loop_status(self) -> LoopStatus:
        return self.loop

    def shuffle(self) -> bool:
        return self.shuffled

    def can_control(self) -> bool:
        return self.controllable

    def can_loop(self) -> bool:
        return self.controllable and self.loopable

    def can_shuffle(self) -> bool:
        return self.controllable and self.shufflable

    def stop(self) -> None:
        self._record("stop")

    def play_pause(self) -> None:
        self._record("play_pause")

    def previous(self) -> None:
        self._record("previous")

    def next(self) -> None:
        self._record("next")

    def checked_set_loop_status(self, status: LoopStatus) -> SetResult:
        if not self.can_loop():
            return UNSUPPORTED
        self._record(f"loop={status.value}")
        self.loop = status
        return APPLIED

    def checked_set_shuffle(self, value: bool) -> SetResult:
        if not self.can_shuffle():
            return UNSUPPORTED
        self._record(f"shuffle={value}")
        self.shuffled = value
        return APPLIED


@pytest.fixture
def make_player() -> Callable[..., FakePlayer]:
    def factory(suffix: str, status: str = "Stopped", **kwargs) -> FakePlayer:
        return FakePlayer(full_name(suffix), PlaybackStatus(status), **kwargs)

    return factory


@pytest.fixture
def store() -> MemorySelectionStore:
    return MemorySelectionStore()


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    del config
    if os.environ.get("MPRIS_BLOCK_CI") != "1" and os.environ.get(
        "DBUS_SESSION_BUS_ADDRESS"
    ):
        return
    skip_dbus = pytest.mark.skip(reason="No D-Bus session bus for live tests.")
    for item in items:
        if "dbus" in item.keywords:
            item.add_marker(skip_dbus)
