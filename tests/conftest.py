"""
Shared fixtures for HLP tests
"""
from datetime import datetime, timedelta, timezone

import pytest

from HLP.log_analysis.log_parser import LogEntry, LogLevel, parse_log_line

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_line(message: str, source: str = "app", dyno: str = "web.1", seconds: int = 0) -> str:
    """Build a well-formed Heroku log line"""
    ts = (BASE_TIME + timedelta(seconds=seconds)).strftime('%Y-%m-%dT%H:%M:%S.%f') + "+00:00"
    return f"{ts} {source}[{dyno}]: {message}"


def make_entry(message: str, source: str = "app", dyno: str = "web.1", seconds: int = 0) -> LogEntry:
    entry = parse_log_line(make_line(message, source, dyno, seconds))
    assert entry is not None
    return entry


@pytest.fixture
def sample_entries():
    """A small mixed stream of entries"""
    return [
        make_entry("Starting process", dyno="web.1", seconds=0),
        make_entry("Error: database timeout", dyno="web.1", seconds=1),
        make_entry("warn: slow request", dyno="worker.1", seconds=2),
        make_entry("at=info method=GET status=200", source="heroku", dyno="router", seconds=3),
        make_entry("debug cache miss", dyno="worker.2", seconds=4),
    ]
