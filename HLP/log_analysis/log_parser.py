"""
Log Parser Module - Heroku log line parsing

Handles:
- Line format matching (timestamp, source, dyno, message)
- RFC3339 timestamp parsing with a fixed UTC offset
- Log level inference from message keywords
- Preservation of the raw line for export
"""
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, List, Iterable


class LogLevel(Enum):
    """Log severity levels inferred from message content"""
    ERROR = "ERROR"
    WARN = "WARN"
    INFO = "INFO"
    DEBUG = "DEBUG"
    UNKNOWN = "UNKNOWN"

    @property
    def color(self) -> str:
        """Get color representation for this log level"""
        colors = {
            LogLevel.ERROR: "red",
            LogLevel.WARN: "yellow",
            LogLevel.INFO: "green",
            LogLevel.DEBUG: "blue",
            LogLevel.UNKNOWN: "white",
        }
        return colors.get(self, "white")

    @classmethod
    def from_message(cls, message: str) -> "LogLevel":
        """
        Detect log level from message content by looking for keywords

        Order matters: ERROR wins over WARN, WARN over DEBUG, DEBUG over INFO.
        """
        lower = message.lower()
        if "error" in lower or "fatal" in lower or "panic" in lower:
            return cls.ERROR
        elif "warn" in lower:
            return cls.WARN
        elif "debug" in lower or "trace" in lower:
            return cls.DEBUG
        elif "info" in lower:
            return cls.INFO
        return cls.UNKNOWN

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """
        Map a user supplied level name (error, warn, warning, info, debug) to a LogLevel

        Case-insensitive but not trimmed: " error" is UNKNOWN.
        """
        names = {
            "error": cls.ERROR,
            "warn": cls.WARN,
            "warning": cls.WARN,
            "info": cls.INFO,
            "debug": cls.DEBUG,
        }
        return names.get(name.lower(), cls.UNKNOWN)


@dataclass(frozen=True)
class LogEntry:
    """Parsed Heroku log entry"""
    timestamp: datetime
    source: str
    dyno: str
    message: str
    level: LogLevel
    raw: str

    def __str__(self) -> str:
        return self.raw

    def format_time(self) -> str:
        """Time portion with millisecond precision, e.g. 15:13:46.677"""
        return self.timestamp.strftime('%H:%M:%S.') + f"{self.timestamp.microsecond // 1000:03d}"

    def format_display(self) -> str:
        """Single line representation used by the log list"""
        return f"{self.format_time()} {self.source} [{self.dyno}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for export"""
        return {
            'timestamp': self.timestamp.isoformat(),
            'source': self.source,
            'dyno': self.dyno,
            'level': self.level.value,
            'message': self.message,
            'raw': self.raw,
        }


# Example: 2010-09-16T15:13:46.677020+00:00 app[web.1]: Starting process
LOG_LINE_PATTERN = re.compile(
    r'^([0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}\.[0-9]+[+-][0-9]{2}:[0-9]{2})'
    r'\s+(\w+)'
    r'\[([^\]]+)\]:'
    r'\s*(.*)\Z'
)

_FRACTION_PATTERN = re.compile(r'\.(\d+)')


def parse_timestamp(timestamp_str: str) -> Optional[datetime]:
    """
    Parse an RFC3339 timestamp into an offset-aware datetime

    Fractions longer than microsecond precision are truncated, since
    datetime cannot represent them.

    Returns:
        datetime with a fixed UTC offset, or None if the string is invalid
    """
    normalized = _FRACTION_PATTERN.sub(lambda m: '.' + m.group(1)[:6].ljust(6, '0'), timestamp_str, count=1)
    try:
        return datetime.strptime(normalized, '%Y-%m-%dT%H:%M:%S.%f%z')
    except ValueError:
        return None


def parse_log_line(line: str) -> Optional[LogEntry]:
    """
    Parse a single Heroku log line

    Args:
        line: The raw log line (without trailing newline)

    Returns:
        LogEntry if the line matches the expected format, None otherwise
    """
    if not isinstance(line, str):
        return None

    match = LOG_LINE_PATTERN.match(line)
    if not match:
        return None

    timestamp_str, source, dyno, message = match.groups()
    timestamp = parse_timestamp(timestamp_str)
    if timestamp is None:
        return None

    return LogEntry(
        timestamp=timestamp,
        source=source,
        dyno=dyno,
        message=message,
        level=LogLevel.from_message(message),
        raw=line,
    )


class LogParser:
    """
    Batch wrapper around parse_log_line

    Keeps a count of lines that did not match so callers can report
    how much of a stream was skipped.
    """

    def __init__(self):
        """Initialize the log parser"""
        self.skipped_lines = 0

    def parse_line(self, line: str) -> Optional[LogEntry]:
        """Parse one line, counting it as skipped if it does not match"""
        entry = parse_log_line(line.rstrip('\r\n'))
        if entry is None:
            self.skipped_lines += 1
        return entry

    def parse_lines(self, lines: Iterable[str]) -> List[LogEntry]:
        """
        Parse multiple log lines

        Args:
            lines: Raw lines, trailing newlines are stripped

        Returns:
            List of LogEntry objects for the lines that parsed
        """
        entries = []
        for line in lines:
            entry = self.parse_line(line)
            if entry is not None:
                entries.append(entry)
        return entries
