"""Click actions applied to the selected player."""

from __future__ import annotations

import logging
from typing import Optional

from mpris_block.buttons import Button
from mpris_block.players import (
    LoopStatus,
    MprisError,
    Player,
    SetOutcome,
    SetResult,
    UnsupportedError,
)

logger = logging.getLogger(__name__)


def toggle_playlist_loop(current: LoopStatus) -> LoopStatus:
    """Playlist goes to None, anything else goes to Playlist."""
    if current is LoopStatus.PLAYLIST:
        return LoopStatus.NONE
    return LoopStatus.PLAYLIST


def toggle_track_loop(current: LoopStatus) -> LoopStatus:
    """Track goes to Playlist, anything else goes to Track."""
    if current is LoopStatus.TRACK:
        return LoopStatus.PLAYLIST
    return LoopStatus.TRACK


def action_status(player: Player, button: Optional[Button]) -> bool:
    """Apply a transport control; returns False for unmapped buttons."""
    if button is Button.MIDDLE:
        player.stop()
    elif button is Button.RIGHT:
        player.play_pause()
    elif button is Button.SCROLL_UP:
        player.previous()
    elif button is Button.SCROLL_DOWN:
        player.next()
    else:
        return False
    logger.info("%s: %s applied", player.bus_name, button.name.lower())
    return True


def _require(result: SetResult, player: Player, what: str) -> None:
    if result.outcome is SetOutcome.UNSUPPORTED:
        raise UnsupportedError(f"{player.bus_name}: cannot change {what}")
    if result.outcome is SetOutcome.FAILED:
        raise MprisError(
            f"{player.bus_name}: changing {what} failed: {result.reason}"
        )


def _loop_status(player: Player) -> LoopStatus:
    if not player.can_loop():
        raise UnsupportedError(f"{player.bus_name}: cannot change loop status")
    return player.loop_status()


def _shuffle(player: Player) -> bool:
    if not player.can_shuffle():
        raise UnsupportedError(f"{player.bus_name}: cannot change shuffle")
    return player.shuffle()


def action_modes(player: Player, button: Optional[Button]) -> bool:
    """Toggle loop or shuffle; returns False for unmapped buttons."""
    if button is Button.LEFT:
        target = toggle_playlist_loop(_loop_status(player))
        _require(player.checked_set_loop_status(target), player, "loop status")
        logger.info("%s: loop set to %s", player.bus_name, target.value)
    elif button is Button.MIDDLE:
        shuffle = not _shuffle(player)
        _require(player.checked_set_shuffle(shuffle), player, "shuffle")
        logger.info("%s: shuffle set to %s", player.bus_name, shuffle)
    elif button is Button.RIGHT:
        target = toggle_track_loop(_loop_status(player))
        _require(player.checked_set_loop_status(target), player, "loop status")
        logger.info("%s: loop set to %s", player.bus_name, target.value)
    else:
        return False
    return True
