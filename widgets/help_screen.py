from __future__ import annotations

from textual import events
from textual.screen import ModalScreen
from textual.widgets import Static
from textual.containers import VerticalScroll
from textual.app import ComposeResult

HELP_TEXT = """[bold #ff8c00]💿 LEVARI - Terminal Record Player[/bold #ff8c00]

The shelf is shuffled every time you start. Pick a record,
put it on, and let the whole side play.

[bold]NAVIGATION[/bold]
  j/k         Move down/up in the focused list
  l           Open the selected album's song list
  h           Back to the shelf
  Shift+H/K   Focus the shelf
  Shift+L/J   Focus the song list
  gg / G      Top / bottom of the shelf
  Ctrl+d/u    Half a shelf down/up

[bold]TURNTABLE[/bold]
  Space       Insert selected album, or play/pause it
              (in the song list: skip to the selected song)
  Enter       Insert / eject the selected album
  > / <       Speed up / slow down (33, 45, 78 RPM)
  + / -       Volume up / down

[bold]BOOKMARKS[/bold]
  m           Bookmark the selected album
  n / N       Jump to next / previous bookmarked album
  p           Jump to the album on the turntable

[bold]OTHER[/bold]
  ?           Show this help
  q           Quit

[bold]SHELF[/bold]
  • [*] marks a bookmarked album
  • [INSERTED] marks the album on the turntable
  • Albums finish at their last track; nothing plays after"""


class HelpScreen(ModalScreen[None]):
    """The key map, printed like liner notes on the record sleeve."""

    def compose(self) -> ComposeResult:
        sleeve = VerticalScroll(Static(HELP_TEXT), id="liner-notes")
        sleeve.border_title = "Liner notes"
        sleeve.border_subtitle = "Esc or ? to close"
        yield sleeve

    def on_key(self, event: events.Key) -> None:
        sleeve = self.query_one("#liner-notes", VerticalScroll)
        if event.key in ("escape", "question_mark"):
            self.dismiss()
        elif event.key == "j":
            sleeve.scroll_down()
        elif event.key == "k":
            sleeve.scroll_up()
        else:
            return
        event.prevent_default()
        event.stop()
