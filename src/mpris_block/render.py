"""Three-line status bar reports."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
import html
from typing import Mapping, Optional, Sequence

from mpris_block.players import LoopStatus, Metadata, PlaybackStatus, Player

DEFAULT_COLORS: Mapping[PlaybackStatus, str] = {
    PlaybackStatus.PLAYING: "#00ff00",
    PlaybackStatus.PAUSED: "#ffa500",
    PlaybackStatus.STOPPED: "#ff0000",
}
DEFAULT_FONT = "Sarasa Gothic J 13"
EMPTY_MODES = "　"


@dataclass(frozen=True)
class Report:
    """Long text, short text and color, printed one per line."""

    long: str
    short: str
    color: str

    def lines(self) -> list[str]:
        return [self.long, self.short, self.color]


def status_color(
    status: PlaybackStatus,
    colors: Mapping[PlaybackStatus, str] = DEFAULT_COLORS,
) -> str:
    return colors.get(status, DEFAULT_COLORS[status])


def metadata_string(meta: Metadata) -> str:
    artists = "/".join(meta.artists) or "unknown artist"
    return f"{artists} - {meta.title or 'untitled'}"


def _format_time(value: Optional[timedelta]) -> str:
    if value is None:
        return "..."
    total_seconds = max(0, int(value.total_seconds()))
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def duration(position: Optional[timedelta], length: Optional[timedelta]) -> str:
    return f"{_format_time(position)} / {_format_time(length)}"


def render_player(
    player: Player,
    others: Sequence[Player],
    colors: Mapping[PlaybackStatus, str] = DEFAULT_COLORS,
) -> Optional[Report]:
    """Show which player is selected; nothing when there is no alternative."""
    if not others:
        return None
    display = f"<{player.suffix}>"
    return Report(display, display, status_color(player.playback_status(), colors))


def render_status(
    player: Player,
    *,
    font: str = DEFAULT_FONT,
    colors: Mapping[PlaybackStatus, str] = DEFAULT_COLORS,
) -> Report:
    status = player.playback_status()
    color = status_color(status, colors)
    if status is PlaybackStatus.PAUSED:
        return Report("⏸️ paused", "⏸️", color)
    if status is PlaybackStatus.STOPPED:
        return Report("🛑 stopped", "🛑", color)
    meta = player.metadata()
    text = f"{metadata_string(meta)} [{duration(player.position(), meta.length)}]"
    if font:
        text = html.escape(text, quote=False)
        text = f'<span font="{html.escape(font)}">{text}</span>'
    return Report(f"🎹 {text}", "🎹", color)


def modes_string(shuffle: bool, loop: LoopStatus) -> str:
    modes = "".join(
        (
            "🔀" if shuffle else "",
            "🔂" if loop is LoopStatus.TRACK else "",
            "🔁" if loop is LoopStatus.PLAYLIST else "",
        )
    )
    return f"[{modes or EMPTY_MODES}]"


def render_modes(
    player: Player,
    colors: Mapping[PlaybackStatus, str] = DEFAULT_COLORS,
) -> Optional[Report]:
    """Show shuffle and loop flags; only while the player is playing."""
    status = player.playback_status()
    if status is not PlaybackStatus.PLAYING:
        return None
    shuffle = player.shuffle() if player.can_shuffle() else False
    loop = player.loop_status() if player.can_loop() else LoopStatus.NONE
    return Report(modes_string(shuffle, loop), "", status_color(status, colors))
