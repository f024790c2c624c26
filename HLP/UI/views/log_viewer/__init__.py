"""
Log Viewer Package - terminal rendering of the log view state

Package Structure:
- view: Layout and snapshot painting (LogViewerView)
- components: Panels (StatsHeader, LogListPanel, EntryDetailsPanel, FilterBar, StatusBar)
- key_map: Key press to message translation (key_to_message)
"""

from .view import LogViewerView

from .components import (
    StatsHeader,
    LogListPanel,
    EntryDetailsPanel,
    FilterBar,
    StatusBar,
)
from .key_map import key_to_message

__all__ = [
    # Main view
    'LogViewerView',

    # UI components
    'StatsHeader',
    'LogListPanel',
    'EntryDetailsPanel',
    'FilterBar',
    'StatusBar',

    # Input
    'key_to_message',
]
