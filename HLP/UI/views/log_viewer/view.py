"""
Log Viewer View Module - layout of the log viewer

Handles:
- Composition of the header, log list, detail panel, filter bar and status line
- Showing/hiding panels for the list, detail and split view modes
- Painting a RenderSnapshot onto the panels
"""
from typing import Optional

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical

from HLP.log_analysis.messages import ViewMode
from HLP.log_analysis.view_state import RenderSnapshot

from .components import (
    StatsHeader,
    LogListPanel,
    EntryDetailsPanel,
    FilterBar,
    StatusBar,
)


class LogViewerView(Vertical):
    """
    Full-screen log viewer

    The view holds no state of its own; everything it shows comes from the
    snapshot passed to render_snapshot().
    """

    def compose(self) -> ComposeResult:
        yield StatsHeader(id="stats-header")

        with Horizontal(id="log-viewer-content"):
            yield LogListPanel(id="log-list", classes="main-panel")
            yield EntryDetailsPanel(id="entry-details", classes="right-panel")

        yield FilterBar(id="filter-bar")
        yield StatusBar(id="status-bar")

    def viewport_height(self) -> int:
        """Number of log rows the list panel can show"""
        return self.query_one("#log-list", LogListPanel).viewport_height()

    def render_snapshot(self, snapshot: RenderSnapshot, connection: Optional[str] = None) -> None:
        log_list = self.query_one("#log-list", LogListPanel)
        details = self.query_one("#entry-details", EntryDetailsPanel)

        log_list.display = snapshot.view_mode in (ViewMode.LIST, ViewMode.SPLIT)
        details.display = snapshot.view_mode in (ViewMode.DETAIL, ViewMode.SPLIT)
        details.set_class(snapshot.view_mode == ViewMode.DETAIL, "full-width")

        self.query_one("#stats-header", StatsHeader).show(snapshot, connection)
        log_list.show(snapshot.entries, snapshot.selected_entry)
        details.show_entry_details(snapshot.selected_entry)
        self.query_one("#filter-bar", FilterBar).show(snapshot)
        self.query_one("#status-bar", StatusBar).show(snapshot.status_message)
