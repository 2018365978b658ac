import random

from textual.widgets import Static
from textual.reactive import reactive
from textual.containers import Vertical
from textual.app import ComposeResult
from rich.text import Text
from styles import COLOR_BASS, COLOR_PRIMARY, COLOR_HIGHLIGHT, COLOR_FOCUS, COLOR_MUTED, COLOR_INACTIVE

TITLE_PHRASES = [
    "Spinning Vinyl...",
    "Warm Crackle Vibes",
    "Analog Dreams",
    "Groove On!",
    "Retro Beats",
    "Sonic Nostalgia",
    "Vinyl Vibes",
    "Spin It to Win It",
]

VOLUME_BAR_WIDTH = 20
DEFAULT_VOLUME_LEVEL = 25
SPEEDS = (33, 45, 78)


class Header(Vertical):
    volume_level: reactive[int] = reactive(DEFAULT_VOLUME_LEVEL)
    rpm: reactive[int] = reactive(33)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.phrase = random.choice(TITLE_PHRASES)

    def compose(self) -> ComposeResult:
        yield Static(self._render_title(), id="header-title")
        yield Static(self._render_status_bar(), id="header-status")

    def _render_title(self) -> Text:
        result = Text()
        result.append("Levari", style=f"{COLOR_PRIMARY} bold")
        result.append(" - ", style=COLOR_MUTED)
        result.append(self.phrase, style=COLOR_FOCUS)
        return result

    def _render_status_bar(self) -> Text:
        result = Text()
        filled_bars = int((self.volume_level / 100) * VOLUME_BAR_WIDTH)

        result.append("Volume ", style=COLOR_MUTED)
        result.append("│", style=COLOR_MUTED)

        for i in range(VOLUME_BAR_WIDTH):
            if i < filled_bars:
                if i < VOLUME_BAR_WIDTH * 0.5:
                    result.append("█", style=COLOR_BASS)
                elif i < VOLUME_BAR_WIDTH * 0.75:
                    result.append("█", style=COLOR_PRIMARY)
                else:
                    result.append("█", style=COLOR_HIGHLIGHT)
            else:
                result.append("─", style=COLOR_INACTIVE)

        result.append("│ ", style=COLOR_MUTED)
        result.append(f"{self.volume_level}%", style=f"{COLOR_PRIMARY} bold")

        result.append("    │    Speed ", style=COLOR_MUTED)
        for speed in SPEEDS:
            if speed == self.rpm:
                result.append(f"[{speed}]", style=f"{COLOR_PRIMARY} bold")
            else:
                result.append(f" {speed} ", style=COLOR_INACTIVE)
        result.append(" RPM", style=COLOR_MUTED)

        return result

    def _refresh_status_bar(self) -> None:
        if not self.is_mounted:
            return
        self.query_one("#header-status", Static).update(self._render_status_bar())

    def watch_volume_level(self, new_value: int) -> None:
        self._refresh_status_bar()

    def watch_rpm(self, new_value: int) -> None:
        self._refresh_status_bar()
