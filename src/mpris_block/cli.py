"""Command-line entry point for the mpris-block status bar helper."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from types import TracebackType
from typing import Iterable, Optional, Sequence, TextIO

from mpris_block.buttons import parse_button
from mpris_block.config import AppConfig, get_config_path, load_config, save_config
from mpris_block.dispatch import parse_mode, run_block
from mpris_block.logging_setup import init_logging, set_console_level
from mpris_block.players import MprisError, Player, PlayerDirectory, sort_players
from mpris_block.selection import pick_player
from mpris_block.selection_store import FileSelectionStore, MemorySelectionStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="mpris-block",
        description="Status bar block for the active MPRIS player",
    )
    parser.add_argument(
        "--mode",
        default=os.environ.get("MPRIS_MODE"),
        help="Report to produce: player, status or modes (default: $MPRIS_MODE)",
    )
    parser.add_argument(
        "--button",
        default=os.environ.get("BLOCK_BUTTON"),
        help="Click code 1-5 (default: $BLOCK_BUTTON)",
    )
    parser.add_argument(
        "--state-file",
        default=None,
        help="File holding the selected player",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Show the live players and the selection, then exit",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write the current configuration to the config file, then exit",
    )
    return parser


def list_players(
    players: Sequence[Player], store: FileSelectionStore, cfg: AppConfig
) -> None:
    """Print a table of the live players without touching the stored record."""
    from rich.console import Console
    from rich.table import Table
    from rich.text import Text

    ordered = sort_players(list(players))
    stored = store.read()
    preview = pick_player(ordered, MemorySelectionStore(stored), cfg.reference_player)
    table = Table(title=f"Selection record: {store.path}")
    table.add_column("")
    table.add_column("Player")
    table.add_column("Status")
    for player in ordered:
        status = player.playback_status()
        marker = "*" if preview and preview.player is player else ""
        name = Text(player.suffix)
        if player.suffix == stored:
            name.stylize("bold")
        table.add_row(marker, name, Text(status.value, style=cfg.colors[status]))
    Console().print(table)


def _write_report(lines: Iterable[str], out: TextIO) -> None:
    out.write("".join(f"{line}\n" for line in lines))
    out.flush()


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    init_logging()
    set_console_level(logging.WARNING)

    def excepthook(
        exc_type: type[BaseException],
        exc: BaseException,
        tb: Optional[TracebackType],
    ) -> None:
        logger.exception("Uncaught exception", exc_info=(exc_type, exc, tb))

    sys.excepthook = excepthook

    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    cfg = load_config()

    if args.init_config:
        save_config(cfg)
        print(get_config_path())
        return 0

    store = FileSelectionStore(Path(args.state_file or cfg.state_file))
    mode = parse_mode(args.mode)
    button = parse_button(args.button)
    logger.debug("mode=%s button=%s", args.mode, args.button)
    if mode is None and not args.list:
        return 0

    try:
        directory = PlayerDirectory()
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    try:
        players = directory.find_all()
        if args.list:
            list_players(players, store, cfg)
            return 0
        report = run_block(mode, button, players, store, cfg)
    except (MprisError, OSError) as exc:
        logger.error("Invocation failed: %s", exc)
        print(str(exc), file=sys.stderr)
        return 1

    if report is not None:
        _write_report(report.lines(), sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
