"""
View State Module - Message driven state for the log viewer

All mutation goes through ViewState.update(message), one message at a
time. The render layer only reads snapshots; it never touches the
buffer or the filters directly.

Scrolling is measured backwards from the newest entry:
    scroll_offset == 0            -> newest entries visible
    scroll_offset == filtered - 1 -> oldest entry at the bottom of the view
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..config import get_logger
from .filters import Filter, FilterMode, FilterSet, parse_filter
from .log_parser import LogEntry, parse_log_line
from .messages import (
    Message, NewLine, NewEntry, ScrollUp, ScrollDown, ScrollToTop, ScrollToBottom,
    PageUp, PageDown, TogglePause, AddFilter, RemoveFilter, ClearFilters,
    ToggleFilterMode, SetViewMode, EnterSearch, SearchInput, SearchBackspace,
    ExitSearch, CopyToClipboard, ExportToFile, Quit, Tick, ViewMode, InputMode,
)
from .retention_buffer import RetentionBuffer, DEFAULT_CAPACITY

DEFAULT_PAGE_SIZE = 20
# Tunable: how close to either end of the filtered list still counts as
# "at the bottom" when deciding whether new lines re-pin the view.
DEFAULT_BOTTOM_THRESHOLD = 5

EntryCollaborator = Callable[[Sequence[LogEntry]], str]

logger = get_logger("view_state")


@dataclass(frozen=True)
class Stats:
    """Summary counts shown in the header"""
    total: int
    filtered: int
    capacity: int
    active_filters: int


@dataclass(frozen=True)
class RenderSnapshot:
    """Read-only projection handed to the render layer"""
    entries: List[LogEntry]
    stats: Stats
    input_mode: InputMode
    view_mode: ViewMode
    is_paused: bool
    filter_mode: FilterMode
    filters: List[Filter]
    search_buffer: str
    status_message: Optional[str]
    selected_entry: Optional[LogEntry]


class ViewState:
    """
    Application state for the log viewer

    Attributes:
        buffer: Retained entries
        filter_set: Active filters and their combination mode
        filtered: Buffer positions of the entries passing the filters
        scroll_offset: Distance in filtered entries back from the newest
        selected_index: Position in `filtered` of the newest visible entry
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        page_size: int = DEFAULT_PAGE_SIZE,
        bottom_threshold: int = DEFAULT_BOTTOM_THRESHOLD,
        exporter: Optional[EntryCollaborator] = None,
        clipboard: Optional[EntryCollaborator] = None,
    ):
        """
        Initialize the view state

        Args:
            capacity: Retention buffer capacity
            page_size: Entries moved by PageUp/PageDown
            bottom_threshold: Fuzzy distance that still counts as "at the bottom"
            exporter: Writes entries to a file and returns a status string
            clipboard: Copies entries to the clipboard and returns a status string
        """
        self.buffer = RetentionBuffer(capacity)
        self.filter_set = FilterSet()
        self.filtered: List[int] = []
        self.scroll_offset = 0
        self.selected_index = 0
        self.is_paused = False
        self.view_mode = ViewMode.LIST
        self.input_mode = InputMode.NORMAL
        self.search_buffer = ""
        self.status_message: Optional[str] = None
        self.should_quit = False

        self.page_size = page_size
        self.bottom_threshold = bottom_threshold
        self.exporter = exporter
        self.clipboard = clipboard

    def update(self, message: Message) -> None:
        """Apply a single message to the state"""
        if isinstance(message, NewLine):
            if self.is_paused:
                return
            entry = parse_log_line(message.text)
            if entry is not None:
                self._ingest(entry)

        elif isinstance(message, NewEntry):
            if not self.is_paused:
                self._ingest(message.entry)

        elif isinstance(message, ScrollUp):
            # Up = back in history = larger offset
            self.scroll_offset = min(self.scroll_offset + 1, self._max_offset())
            self._sync_selection()

        elif isinstance(message, ScrollDown):
            self.scroll_offset = max(self.scroll_offset - 1, 0)
            self._sync_selection()

        elif isinstance(message, ScrollToTop):
            self.scroll_offset = self._max_offset()
            self._sync_selection()

        elif isinstance(message, ScrollToBottom):
            self.scroll_offset = 0
            self._sync_selection()

        elif isinstance(message, PageUp):
            self.scroll_offset = min(self.scroll_offset + self.page_size, self._max_offset())
            self._sync_selection()

        elif isinstance(message, PageDown):
            self.scroll_offset = max(self.scroll_offset - self.page_size, 0)
            self._sync_selection()

        elif isinstance(message, TogglePause):
            self.is_paused = not self.is_paused
            self.status_message = "Paused" if self.is_paused else "Resumed"

        elif isinstance(message, AddFilter):
            filter_ = parse_filter(message.text)
            if filter_ is not None:
                self.filter_set.add(filter_)
                self._recompute()
                self.status_message = f"Added filter: {filter_.display()}"

        elif isinstance(message, RemoveFilter):
            removed = self.filter_set.remove(message.index)
            self._recompute()
            if removed is not None:
                self.status_message = f"Removed filter: {removed.display()}"

        elif isinstance(message, ClearFilters):
            self.filter_set.clear()
            self._recompute()
            self.status_message = "Filters cleared"

        elif isinstance(message, ToggleFilterMode):
            self.filter_set.toggle_mode()
            self._recompute()
            self.status_message = f"Filter mode: {self.filter_set.mode.value}"

        elif isinstance(message, SetViewMode):
            self.view_mode = message.mode

        elif isinstance(message, EnterSearch):
            self.input_mode = InputMode.SEARCH
            self.search_buffer = ""
            self.status_message = "SEARCH MODE - Type your query and press Enter"

        elif isinstance(message, SearchInput):
            if self.input_mode == InputMode.SEARCH:
                self.search_buffer += message.char

        elif isinstance(message, SearchBackspace):
            if self.input_mode == InputMode.SEARCH:
                self.search_buffer = self.search_buffer[:-1]

        elif isinstance(message, ExitSearch):
            self.input_mode = InputMode.NORMAL
            # Confirming a search always turns it into a filter
            if self.search_buffer:
                self.update(AddFilter(self.search_buffer))
            self.search_buffer = ""

        elif isinstance(message, CopyToClipboard):
            self.status_message = self._delegate(self.clipboard, "Copy")

        elif isinstance(message, ExportToFile):
            self.status_message = self._delegate(self.exporter, "Export")

        elif isinstance(message, Quit):
            self.should_quit = True

        elif isinstance(message, Tick):
            # Hook for periodic work
            pass

    # Queries

    def is_at_bottom(self) -> bool:
        """True when the view should follow newly arriving entries"""
        if not self.filtered:
            return True
        return self.scroll_offset == 0 or self.scroll_offset + self.bottom_threshold >= len(self.filtered)

    def visible_entries(self, viewport_height: int) -> List[LogEntry]:
        """
        Entries in the window of `viewport_height` rows ending `scroll_offset`
        entries before the newest one
        """
        total = len(self.filtered)
        end = max(total - self.scroll_offset, 0)
        start = max(end - max(viewport_height, 0), 0)
        entries = (self.buffer.get(i) for i in self.filtered[start:end])
        return [entry for entry in entries if entry is not None]

    def all_filtered_entries(self) -> List[LogEntry]:
        """Every entry passing the filters, for export and clipboard"""
        entries = (self.buffer.get(i) for i in self.filtered)
        return [entry for entry in entries if entry is not None]

    def selected_entry(self) -> Optional[LogEntry]:
        if 0 <= self.selected_index < len(self.filtered):
            return self.buffer.get(self.filtered[self.selected_index])
        return None

    def stats(self) -> Stats:
        return Stats(
            total=len(self.buffer),
            filtered=len(self.filtered),
            capacity=self.buffer.capacity,
            active_filters=len(self.filter_set),
        )

    def snapshot(self, viewport_height: int) -> RenderSnapshot:
        """Everything the render layer needs for one frame"""
        return RenderSnapshot(
            entries=self.visible_entries(viewport_height),
            stats=self.stats(),
            input_mode=self.input_mode,
            view_mode=self.view_mode,
            is_paused=self.is_paused,
            filter_mode=self.filter_set.mode,
            filters=self.filter_set.filters,
            search_buffer=self.search_buffer,
            status_message=self.status_message,
            selected_entry=self.selected_entry(),
        )

    # Internals

    def _ingest(self, entry: LogEntry) -> None:
        self.buffer.push(entry)
        self._recompute()
        if self.is_at_bottom():
            self.scroll_offset = 0
            self._sync_selection()

    def _recompute(self) -> None:
        """Re-run the filters over the buffer and keep the offset in range"""
        self.filtered = self.filter_set.filtered_indices(self.buffer.all())
        self.scroll_offset = min(self.scroll_offset, self._max_offset())
        self._sync_selection()

    def _max_offset(self) -> int:
        return max(len(self.filtered) - 1, 0)

    def _sync_selection(self) -> None:
        self.selected_index = max(len(self.filtered) - 1 - self.scroll_offset, 0)

    def _delegate(self, collaborator: Optional[EntryCollaborator], action: str) -> str:
        if collaborator is None:
            return f"{action} unavailable"
        try:
            return collaborator(self.all_filtered_entries())
        except Exception as e:
            logger.warning(f"{action} failed: {e}", exc_info=True)
            return f"{action} failed: {e}"
