"""
Log Reader Module - line producers for piped stdin and log files

Handles:
- Background reading of a text stream into the message channel
- Whole-file parsing for replaying saved logs
- Freeing the terminal for keyboard input when stdin is a pipe
"""
import os
import sys
from pathlib import Path
from threading import Event, Thread
from typing import List, Optional, TextIO

from ..config import get_logger
from ..log_analysis.log_parser import LogEntry, LogParser
from ..log_analysis.messages import NewLine
from .channel import LogChannel

logger = get_logger("log_reader")


class LineReader:
    """
    Blocking reader that forwards each line of a stream as a NewLine message

    Runs in a daemon thread; the thread ends when the stream is exhausted,
    the channel is closed or stop() is called.
    """

    def __init__(self, stream: TextIO, channel: LogChannel, name: str = "stdin"):
        self.stream = stream
        self.channel = channel
        self.name = name
        self.stop_event = Event()
        self.lines_read = 0
        self._thread: Optional[Thread] = None

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self.stop_event.clear()
        self._thread = Thread(target=self.run, name=f"line-reader-{self.name}", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self.stop_event.set()

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run(self) -> None:
        try:
            for line in self.stream:
                if self.stop_event.is_set():
                    break
                if not self.channel.send(NewLine(line.rstrip("\r\n"))):
                    break
                self.lines_read += 1
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading {self.name}: {e}")
        logger.info(f"Reader for {self.name} finished after {self.lines_read} lines")


def read_log_file(path: Path) -> List[LogEntry]:
    """
    Read and parse a whole log file, skipping lines that do not parse

    Raises:
        OSError: If the file cannot be opened or read
    """
    parser = LogParser()
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        entries = parser.parse_lines(f)
    logger.info(f"Read {len(entries)} entries from {path} ({parser.skipped_lines} skipped)")
    return entries


def detach_piped_stdin() -> Optional[TextIO]:
    """
    Hand a piped stdin over to the log reader and give fd 0 back to the terminal

    Returns:
        A text stream over the piped input, or None if stdin is a terminal
        (or there is no controlling terminal to switch to).
    """
    if sys.stdin is None or sys.stdin.isatty():
        return None

    try:
        tty_fd = os.open("/dev/tty", os.O_RDONLY)
    except OSError as e:
        logger.warning(f"No controlling terminal, keyboard input disabled: {e}")
        return sys.stdin

    pipe_fd = os.dup(0)
    os.dup2(tty_fd, 0)
    os.close(tty_fd)
    sys.stdin = open(0, "r", closefd=False)
    return os.fdopen(pipe_fd, "r", encoding="utf-8", errors="replace")
