"""Click codes delivered by the status bar."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Button(Enum):
    LEFT = "1"
    MIDDLE = "2"
    RIGHT = "3"
    SCROLL_UP = "4"
    SCROLL_DOWN = "5"


def parse_button(raw: Optional[str]) -> Optional[Button]:
    """Map a ``BLOCK_BUTTON`` value to a Button; unknown codes mean no click."""
    if raw is None:
        return None
    try:
        return Button(raw.strip())
    except ValueError:
        return None
