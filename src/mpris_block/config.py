"""User configuration for mpris-block."""

from __future__ import annotations

from dataclasses import dataclass, replace
import json
import logging
import os
from pathlib import Path
import re
from typing import Any, Mapping

from mpris_block.players import PlaybackStatus
from mpris_block.render import DEFAULT_COLORS, DEFAULT_FONT
from mpris_block.selection import DEFAULT_REFERENCE_PLAYER
from mpris_block.selection_store import DEFAULT_STATE_FILE

logger = logging.getLogger(__name__)

STATE_FILE_ENV = "MPRIS_BLOCK_STATE_FILE"
_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


@dataclass(frozen=True)
class AppConfig:
    """Immutable user configuration loaded from disk."""

    state_file: str = str(DEFAULT_STATE_FILE)
    reference_player: str = DEFAULT_REFERENCE_PLAYER
    font: str = DEFAULT_FONT
    color_playing: str = DEFAULT_COLORS[PlaybackStatus.PLAYING]
    color_paused: str = DEFAULT_COLORS[PlaybackStatus.PAUSED]
    color_stopped: str = DEFAULT_COLORS[PlaybackStatus.STOPPED]

    @property
    def colors(self) -> Mapping[PlaybackStatus, str]:
        return {
            PlaybackStatus.PLAYING: self.color_playing,
            PlaybackStatus.PAUSED: self.color_paused,
            PlaybackStatus.STOPPED: self.color_stopped,
        }


def get_config_dir(app_name: str = "mpris-block") -> Path:
    """Return the per-user config directory."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / app_name


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / "config.json"


def load_config() -> AppConfig:
    """Load configuration from disk, falling back to defaults on error."""
    path = get_config_path()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raw = {}
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        raw = {}
    if not isinstance(raw, dict):
        raw = {}
    cfg = _config_from_mapping(raw)
    state_file = os.environ.get(STATE_FILE_ENV)
    if state_file:
        cfg = replace(cfg, state_file=state_file)
    return cfg


def save_config(cfg: AppConfig) -> None:
    """Persist configuration to disk atomically."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(".tmp")
    data = {
        "state_file": cfg.state_file,
        "reference_player": cfg.reference_player,
        "font": cfg.font,
        "color_playing": cfg.color_playing,
        "color_paused": cfg.color_paused,
        "color_stopped": cfg.color_stopped,
    }
    temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    os.replace(temp_path, path)


def _get_str(
    raw: dict[str, Any],
    key: str,
    default: str,
    *,
    allow_empty: bool = False,
) -> str:
    """Fetch a string value, optionally allowing empty strings."""
    value = raw.get(key, default)
    if not isinstance(value, str):
        return default
    if not value and not allow_empty:
        return default
    return value


def _get_color(raw: dict[str, Any], key: str, default: str) -> str:
    """Fetch a ``#rrggbb`` color, keeping the default for anything else."""
    value = _get_str(raw, key, default)
    if not _HEX_COLOR.match(value):
        return default
    return value


def _config_from_mapping(raw: dict[str, Any]) -> AppConfig:
    """Normalize raw JSON data into an AppConfig."""
    defaults = AppConfig()
    return AppConfig(
        state_file=_get_str(raw, "state_file", defaults.state_file),
        reference_player=_get_str(
            raw, "reference_player", defaults.reference_player
        ),
        font=_get_str(raw, "font", defaults.font, allow_empty=True),
        color_playing=_get_color(raw, "color_playing", defaults.color_playing),
        color_paused=_get_color(raw, "color_paused", defaults.color_paused),
        color_stopped=_get_color(raw, "color_stopped", defaults.color_stopped),
    )
