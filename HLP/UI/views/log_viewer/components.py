"""
Log Viewer Components Module - panels of the log viewer

Handles:
- Header with counts, filter mode, view mode and connection state
- Log list with level colouring
- Entry detail panel
- Filter bar (active filters or the search prompt)
- Status line
"""
from typing import List, Optional

from rich.text import Text
from textual.widgets import Static

from HLP.log_analysis.log_parser import LogEntry
from HLP.log_analysis.messages import InputMode
from HLP.log_analysis.view_state import RenderSnapshot

APP_TITLE = "Heroku Logs Parser"


class StatsHeader(Static):
    """Title plus summary counts"""

    def show(self, snapshot: RenderSnapshot, connection: Optional[str] = None) -> None:
        if snapshot.input_mode == InputMode.SEARCH:
            title = f"{APP_TITLE} [SEARCH MODE]"
        elif snapshot.is_paused:
            title = f"{APP_TITLE} [PAUSED]"
        else:
            title = APP_TITLE

        stats = snapshot.stats
        info = (
            f"Logs: {stats.filtered}/{stats.total} | "
            f"Filters: {stats.active_filters} ({snapshot.filter_mode.value}) | "
            f"View: {snapshot.view_mode.value}"
        )
        if connection:
            info += f" | {connection}"

        text = Text(title, style="bold cyan")
        text.append("\n")
        text.append(info)
        self.update(text)


class LogListPanel(Static):
    """The visible window of log entries, newest at the bottom"""

    def viewport_height(self) -> int:
        return max(self.content_size.height, 1)

    def show(self, entries: List[LogEntry], selected: Optional[LogEntry] = None) -> None:
        text = Text(no_wrap=True, overflow="ellipsis")
        for i, entry in enumerate(entries):
            if i:
                text.append("\n")
            style = "reverse" if entry is selected else ""
            text.append(entry.format_time(), style=f"dim {style}".strip())
            text.append(" ")
            text.append(entry.source, style="cyan")
            text.append(f"[{entry.dyno}] ", style="magenta")
            text.append(entry.message, style=f"{entry.level.color} {style}".strip())
        if not entries:
            text.append("Waiting for logs...", style="dim")
        self.update(text)


class EntryDetailsPanel(Static):
    """Detailed view of the selected entry"""

    def show_entry_details(self, entry: Optional[LogEntry]) -> None:
        if entry is None:
            self.update("Select a log entry to view details")
            return

        level_color = entry.level.color
        details = Text.assemble(
            ("Timestamp: ", "bold"), entry.timestamp.isoformat(), "\n",
            ("Source: ", "bold"), entry.source, "\n",
            ("Dyno: ", "bold"), entry.dyno, "\n",
            ("Level: ", "bold"), (entry.level.value, level_color), "\n",
            ("Message:", "bold"), "\n", entry.message, "\n\n",
            ("Raw Line:", "bold"), "\n", entry.raw,
        )
        self.update(details)


class FilterBar(Static):
    """Active filters, or the query being typed in search mode"""

    def show(self, snapshot: RenderSnapshot) -> None:
        if snapshot.input_mode == InputMode.SEARCH:
            text = Text("Search: ", style="bold yellow")
            text.append(snapshot.search_buffer)
            text.append("_", style="blink")
        elif snapshot.filters:
            joiner = f" {snapshot.filter_mode.value} "
            text = Text("Filters: ", style="bold")
            text.append(joiner.join(f.display() for f in snapshot.filters))
        else:
            text = Text("No filters (press / to search)", style="dim")
        self.update(text)


class StatusBar(Static):
    """Last status message and key hints"""

    HINTS = "q quit | / search | f AND/OR | c clear | d drop filter | p pause | 1/2/3 view | y copy | ctrl+s export | t theme"

    def show(self, status_message: Optional[str]) -> None:
        text = Text()
        if status_message:
            text.append(status_message, style="bold")
            text.append(" | ")
        text.append(self.HINTS, style="dim")
        self.update(text)
