"""One invocation of the block: pick a player, then report or act."""

from __future__ import annotations

from enum import Enum
import logging
from typing import Optional, Sequence

from mpris_block.actions import action_modes, action_status
from mpris_block.buttons import Button
from mpris_block.config import AppConfig
from mpris_block.players import Player, sort_players
from mpris_block.render import Report, render_modes, render_player, render_status
from mpris_block.selection import cycle_player, pick_player
from mpris_block.selection_store import SelectionStore

logger = logging.getLogger(__name__)


class Mode(Enum):
    PLAYER = "player"
    STATUS = "status"
    MODES = "modes"


def parse_mode(raw: Optional[str]) -> Optional[Mode]:
    if raw is None:
        return None
    try:
        return Mode(raw)
    except ValueError:
        return None


def run_block(
    mode: Optional[Mode],
    button: Optional[Button],
    players: Sequence[Player],
    store: SelectionStore,
    cfg: AppConfig = AppConfig(),
) -> Optional[Report]:
    """Run one invocation and return the report to print, if any.

    Mutations (selection writes, player controls) happen here; nothing is
    returned when a player switch was handled or there is nothing to show.
    Bus and storage failures propagate.
    """
    if mode is None:
        return None
    ordered = sort_players(list(players))

    if mode is Mode.PLAYER and ordered and cycle_player(ordered, store, button):
        return None

    selection = pick_player(ordered, store, cfg.reference_player)
    if selection is None:
        logger.debug("No players")
        return None
    player = selection.player
    logger.debug(
        "Using %s (record %s)",
        player.bus_name,
        "repaired" if selection.changed else "kept",
    )

    if mode is Mode.PLAYER:
        return render_player(player, selection.others, cfg.colors)
    if mode is Mode.STATUS:
        report = render_status(player, font=cfg.font, colors=cfg.colors)
        action_status(player, button)
        return report
    if mode is Mode.MODES:
        modes_report = render_modes(player, cfg.colors)
        if modes_report is None:
            return None
        action_modes(player, button)
        return modes_report
    return None
