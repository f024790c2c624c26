"""
Export Module - Write filtered log entries to a file or the clipboard

Entries are exported in their raw form so the output can be fed back
into the parser unchanged.
"""
from datetime import datetime
from pathlib import Path
from typing import Callable, Sequence

from .log_parser import LogEntry


def format_logs_for_export(entries: Sequence[LogEntry]) -> str:
    """Join the raw lines of the entries, one per line"""
    return "\n".join(entry.raw for entry in entries)


def export_to_file(entries: Sequence[LogEntry], directory: Path) -> str:
    """
    Export entries to a timestamped file

    Args:
        entries: Entries to export
        directory: Directory the file is created in

    Returns:
        Status message for the user

    Raises:
        OSError: If the file cannot be written
    """
    if not entries:
        return "No logs to export"

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    export_file = Path(directory) / f"heroku_logs_{timestamp}.log"

    with open(export_file, 'w', encoding='utf-8') as f:
        f.write(format_logs_for_export(entries))

    return f"Exported {len(entries)} log entries to {export_file.name}"


def copy_to_clipboard(entries: Sequence[LogEntry], writer: Callable[[str], None]) -> str:
    """
    Copy entries to the clipboard through `writer`

    The writer is whatever the UI uses to reach the system clipboard
    (Textual's App.copy_to_clipboard in the terminal client).
    """
    if not entries:
        return "No logs to copy"

    writer(format_logs_for_export(entries))
    return f"Copied {len(entries)} log entries to clipboard"
