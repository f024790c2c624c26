"""
Log Analysis Package - parsing, retention, filtering and view state

Package Structure:
- log_parser: Heroku log line parsing (parse_log_line, LogParser, LogEntry, LogLevel)
- retention_buffer: Fixed-capacity FIFO of entries (RetentionBuffer)
- filters: Filter predicates and their AND/OR combination (FilterSet, parse_filter)
- messages: Events applied to the view state (Message and its variants)
- view_state: Scroll/filter/pause/search state machine (ViewState)
- export: Plain-text export and clipboard formatting
"""

from .log_parser import LogLevel, LogEntry, LogParser, parse_log_line
from .retention_buffer import RetentionBuffer
from .filters import (
    Filter,
    TextSearch,
    RegexMatch,
    DynoEquals,
    SourceEquals,
    LevelEquals,
    TimeRange,
    FilterMode,
    FilterSet,
    parse_filter,
)
from .view_state import ViewState, RenderSnapshot, Stats

__all__ = [
    # Parsing
    'LogLevel',
    'LogEntry',
    'LogParser',
    'parse_log_line',

    # Storage
    'RetentionBuffer',

    # Filtering
    'Filter',
    'TextSearch',
    'RegexMatch',
    'DynoEquals',
    'SourceEquals',
    'LevelEquals',
    'TimeRange',
    'FilterMode',
    'FilterSet',
    'parse_filter',

    # State
    'ViewState',
    'RenderSnapshot',
    'Stats',
]
