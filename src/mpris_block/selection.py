"""Choosing the active player and cycling between players."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Optional, Sequence

from mpris_block.buttons import Button
from mpris_block.players import MprisError, PlaybackStatus, Player, full_name
from mpris_block.selection_store import SelectionStore

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PLAYER = "mpd"


@dataclass
class Selection:
    """The chosen player plus every player that was not chosen.

    ``changed`` is True when the stored record named another player and was
    rewritten to point at ``player``.
    """

    player: Player
    others: list[Player]
    changed: bool


def _stored_name(store: SelectionStore) -> str:
    stored = store.read()
    return full_name(stored) if stored is not None else ""


def _first(
    players: Sequence[Player], predicate: Callable[[Player], bool]
) -> Optional[int]:
    for index, player in enumerate(players):
        if predicate(player):
            return index
    return None


def _is_playing(player: Player) -> bool:
    try:
        return player.playback_status() is PlaybackStatus.PLAYING
    except MprisError as exc:
        logger.debug("Status of %s unavailable: %s", player.bus_name, exc)
        return False


def pick_player(
    players: Sequence[Player],
    store: SelectionStore,
    reference_player: str = DEFAULT_REFERENCE_PLAYER,
) -> Optional[Selection]:
    """Pick the current player from players sorted by bus name.

    In order: the stored player, the first one playing, the first one that
    is not the reference player, the first one. When the pick differs from
    the stored record the record is rewritten. A player whose status cannot
    be read counts as not playing.
    """
    if not players:
        return None
    stored = _stored_name(store)
    reference = full_name(reference_player)

    index = _first(players, lambda p: p.bus_name == stored)
    if index is None:
        index = _first(players, _is_playing)
    if index is None:
        index = _first(players, lambda p: p.bus_name != reference)
    if index is None:
        index = 0

    others = list(players)
    player = others.pop(index)
    changed = player.bus_name != stored
    if changed:
        logger.debug("Selection %r replaced by %s", stored, player.bus_name)
        store.write(player.suffix)
    return Selection(player=player, others=others, changed=changed)


def cycle_index(current: int, count: int, button: Optional[Button]) -> Optional[int]:
    """Return the index a scroll moves to, or None for other buttons."""
    if count <= 0:
        raise ValueError("cannot cycle through an empty player list")
    if button is Button.SCROLL_UP:
        return (current - 1 + count) % count
    if button is Button.SCROLL_DOWN:
        return (current + 1) % count
    return None


def cycle_player(
    players: Sequence[Player],
    store: SelectionStore,
    button: Optional[Button],
) -> bool:
    """Move the selection on a scroll click; True when the click was handled."""
    stored = _stored_name(store)
    current = _first(players, lambda p: p.bus_name == stored) or 0
    index = cycle_index(current, len(players), button)
    if index is None:
        return False
    store.write(players[index].suffix)
    return True
