"""Light/dark theme preference for the terminal client.

The choice is persisted to a small JSON file. Until the user picks one, the
operating system / terminal preference is followed.
"""

import json
import os
from pathlib import Path
from typing import Callable, Optional, Union

from src.utils.logger import logger

THEMES = ("light", "dark")


def system_prefers_dark() -> bool:
    """Best-effort terminal background detection.

    Many terminals export COLORFGBG as "<fg>;<bg>"; background colors 0-6 and 8 are dark.
    Defaults to light when unknown.
    """
    value = os.getenv("COLORFGBG", "")
    background = value.split(";")[-1] if value else ""
    if not background.isdigit():
        return False
    return int(background) in (0, 1, 2, 3, 4, 5, 6, 8)


class ThemeStore:
    """Reads and writes the stored theme preference."""

    def __init__(
        self,
        path: Union[str, Path],
        prefers_dark: Callable[[], bool] = system_prefers_dark,
    ) -> None:
        self.path = Path(path).expanduser()
        self.prefers_dark = prefers_dark

    def stored(self) -> Optional[str]:
        """Stored theme, or None when nothing valid was saved yet."""
        if not self.path.is_file():
            return None
        try:
            theme = json.loads(self.path.read_text(encoding="utf-8")).get("theme")
        except (OSError, ValueError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable theme file {self.path}: {e}")
            return None
        return theme if theme in THEMES else None

    def current(self) -> str:
        """Stored theme, falling back to the system preference."""
        return self.stored() or ("dark" if self.prefers_dark() else "light")

    def save(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"theme must be one of {THEMES}, got: {theme}")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"theme": theme}), encoding="utf-8")

    def toggle(self) -> str:
        """Flip the current theme, persist and return it."""
        theme = "light" if self.current() == "dark" else "dark"
        self.save(theme)
        return theme
