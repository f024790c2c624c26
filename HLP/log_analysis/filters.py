"""
Filters Module - Composable predicates over parsed log entries

Handles:
- Individual filters (text, regex, dyno, source, level, time range)
- AND/OR composition of the active filters
- The filter mini-language typed into the search bar:
    dyno:web.1    -> DynoEquals
    source:app    -> SourceEquals
    level:error   -> LevelEquals (error, warn, warning, info, debug)
    /regex/       -> RegexMatch (falls back to text search if it does not compile)
    anything else -> TextSearch
"""
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterator, List, Optional, Sequence

from .log_parser import LogEntry, LogLevel


class Filter:
    """Base class for all filters"""

    def matches(self, entry: LogEntry) -> bool:
        raise NotImplementedError

    def display(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class TextSearch(Filter):
    """Case-insensitive substring search in the message"""
    text: str

    def matches(self, entry: LogEntry) -> bool:
        return self.text.lower() in entry.message.lower()

    def display(self) -> str:
        return f'Text: "{self.text}"'


@dataclass(frozen=True)
class RegexMatch(Filter):
    """
    Regex search over the message

    Two RegexMatch filters are equal when their pattern text is equal;
    the compiled object is not compared.
    """
    pattern: str
    compiled: re.Pattern = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        # Raises re.error for an invalid pattern
        object.__setattr__(self, 'compiled', re.compile(self.pattern))

    def matches(self, entry: LogEntry) -> bool:
        return self.compiled.search(entry.message) is not None

    def display(self) -> str:
        return f"Regex: /{self.pattern}/"


@dataclass(frozen=True)
class DynoEquals(Filter):
    """Filter by dyno name (e.g. web.1, worker.3), case-insensitive"""
    dyno: str

    def matches(self, entry: LogEntry) -> bool:
        return entry.dyno.lower() == self.dyno.lower()

    def display(self) -> str:
        return f"Dyno: {self.dyno}"


@dataclass(frozen=True)
class SourceEquals(Filter):
    """Filter by source (e.g. app, heroku), case-insensitive"""
    source: str

    def matches(self, entry: LogEntry) -> bool:
        return entry.source.lower() == self.source.lower()

    def display(self) -> str:
        return f"Source: {self.source}"


@dataclass(frozen=True)
class LevelEquals(Filter):
    level: LogLevel

    def matches(self, entry: LogEntry) -> bool:
        return entry.level == self.level

    def display(self) -> str:
        return f"Level: {self.level.value}"


@dataclass(frozen=True)
class TimeRange(Filter):
    """Inclusive time window; a missing bound is open"""
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def matches(self, entry: LogEntry) -> bool:
        after_start = self.start is None or entry.timestamp >= self.start
        before_end = self.end is None or entry.timestamp <= self.end
        return after_start and before_end

    def display(self) -> str:
        start_str = self.start.strftime('%Y-%m-%d %H:%M:%S') if self.start else "start"
        end_str = self.end.strftime('%Y-%m-%d %H:%M:%S') if self.end else "end"
        return f"Time: {start_str} to {end_str}"


class FilterMode(Enum):
    """How multiple active filters are combined"""
    AND = "AND"
    OR = "OR"


class FilterSet:
    """
    Ordered list of filters plus a combination mode

    An empty set matches every entry regardless of mode.
    """

    def __init__(self, mode: FilterMode = FilterMode.AND):
        self._filters: List[Filter] = []
        self.mode = mode

    def add(self, filter_: Filter) -> None:
        self._filters.append(filter_)

    def remove(self, index: int) -> Optional[Filter]:
        """Remove the filter at index, None if out of range"""
        if 0 <= index < len(self._filters):
            return self._filters.pop(index)
        return None

    def clear(self) -> None:
        self._filters.clear()

    def toggle_mode(self) -> None:
        self.mode = FilterMode.OR if self.mode == FilterMode.AND else FilterMode.AND

    @property
    def filters(self) -> List[Filter]:
        return list(self._filters)

    def is_empty(self) -> bool:
        return not self._filters

    def __len__(self) -> int:
        return len(self._filters)

    def __iter__(self) -> Iterator[Filter]:
        return iter(self._filters)

    def matches(self, entry: LogEntry) -> bool:
        """Check if an entry passes the active filters"""
        if not self._filters:
            return True
        if self.mode == FilterMode.AND:
            return all(f.matches(entry) for f in self._filters)
        return any(f.matches(entry) for f in self._filters)

    def filtered_indices(self, entries: Sequence[LogEntry]) -> List[int]:
        """Positions of matching entries, in input order"""
        return [i for i, entry in enumerate(entries) if self.matches(entry)]


def parse_filter(text: str) -> Optional[Filter]:
    """
    Convert a raw search string into a Filter

    Prefixes are checked before the regex form, so "dyno:/x/" is a dyno filter.

    Returns:
        The Filter, or None for blank input
    """
    trimmed = text.strip()
    if not trimmed:
        return None

    if trimmed.startswith("dyno:"):
        return DynoEquals(trimmed[len("dyno:"):])

    if trimmed.startswith("source:"):
        return SourceEquals(trimmed[len("source:"):])

    if trimmed.startswith("level:"):
        return LevelEquals(LogLevel.from_name(trimmed[len("level:"):]))

    if trimmed.startswith("/") and trimmed.endswith("/") and len(trimmed) > 2:
        try:
            return RegexMatch(trimmed[1:-1])
        # Huge repeat counts raise OverflowError, deep nesting RecursionError
        except (re.error, OverflowError, RecursionError):
            pass

    return TextSearch(trimmed)
