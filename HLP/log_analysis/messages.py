"""
Messages accepted by ViewState.update

Producers (stdin reader, stream supervisor, keyboard, ticker) only ever
talk to the view state through these values.
"""
from dataclasses import dataclass
from enum import Enum

from .log_parser import LogEntry


class ViewMode(Enum):
    LIST = "List"
    DETAIL = "Detail"
    SPLIT = "Split"


class InputMode(Enum):
    NORMAL = "Normal"
    SEARCH = "Search"


class Message:
    """Base class for view state messages"""


@dataclass(frozen=True)
class NewLine(Message):
    """A raw log line arrived from stdin or a file"""
    text: str


@dataclass(frozen=True)
class NewEntry(Message):
    """An already parsed entry arrived from the stream supervisor"""
    entry: LogEntry


@dataclass(frozen=True)
class ScrollUp(Message):
    pass


@dataclass(frozen=True)
class ScrollDown(Message):
    pass


@dataclass(frozen=True)
class ScrollToTop(Message):
    pass


@dataclass(frozen=True)
class ScrollToBottom(Message):
    pass


@dataclass(frozen=True)
class PageUp(Message):
    pass


@dataclass(frozen=True)
class PageDown(Message):
    pass


@dataclass(frozen=True)
class TogglePause(Message):
    pass


@dataclass(frozen=True)
class AddFilter(Message):
    text: str


@dataclass(frozen=True)
class RemoveFilter(Message):
    index: int


@dataclass(frozen=True)
class ClearFilters(Message):
    pass


@dataclass(frozen=True)
class ToggleFilterMode(Message):
    pass


@dataclass(frozen=True)
class SetViewMode(Message):
    mode: ViewMode


@dataclass(frozen=True)
class EnterSearch(Message):
    pass


@dataclass(frozen=True)
class SearchInput(Message):
    char: str


@dataclass(frozen=True)
class SearchBackspace(Message):
    pass


@dataclass(frozen=True)
class ExitSearch(Message):
    pass


@dataclass(frozen=True)
class CopyToClipboard(Message):
    pass


@dataclass(frozen=True)
class ExportToFile(Message):
    pass


@dataclass(frozen=True)
class Quit(Message):
    pass


@dataclass(frozen=True)
class Tick(Message):
    pass
