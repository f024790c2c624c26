"""
Unit tests for the stdin/file producers
"""
import io

import pytest

from HLP.log_analysis.messages import NewLine
from HLP.streaming.channel import LogChannel
from HLP.streaming.log_reader import LineReader, detach_piped_stdin, read_log_file

from conftest import make_line


class TestLineReader:
    """Test LineReader"""

    def test_forwards_lines_without_newlines(self):
        """Test every line becomes a NewLine message in order"""
        stream = io.StringIO(f"{make_line('one')}\n{make_line('two')}\r\nnot a log line\n")
        channel = LogChannel()
        reader = LineReader(stream, channel)

        reader.run()

        messages = channel.drain()
        assert all(isinstance(m, NewLine) for m in messages)
        assert [m.text for m in messages] == [make_line("one"), make_line("two"), "not a log line"]
        assert reader.lines_read == 3

    def test_thread_finishes_at_end_of_stream(self):
        """Test the background thread ends with the stream"""
        channel = LogChannel()
        reader = LineReader(io.StringIO("a\nb\n"), channel)

        reader.start()
        reader._thread.join(timeout=5)

        assert not reader.is_alive()
        assert len(channel.drain()) == 2

    def test_stops_when_channel_closed(self):
        """Test reading stops once the consumer is gone"""
        channel = LogChannel()
        channel.close()
        reader = LineReader(io.StringIO("a\nb\n"), channel)

        reader.run()
        assert reader.lines_read == 0

    def test_stop_event(self):
        """Test stop() ends the read loop"""
        channel = LogChannel()
        reader = LineReader(io.StringIO("a\nb\n"), channel)
        reader.stop()

        reader.run()
        assert channel.drain() == []


class TestReadLogFile:
    """Test read_log_file"""

    def test_parses_file(self, tmp_path):
        """Test valid lines are parsed and the rest skipped"""
        log_file = tmp_path / "saved.log"
        log_file.write_text(f"{make_line('one')}\njunk\n{make_line('Error two')}\n", encoding="utf-8")

        entries = read_log_file(log_file)

        assert [e.message for e in entries] == ["one", "Error two"]
        assert entries[1].raw == make_line("Error two")

    def test_missing_file_raises(self, tmp_path):
        """Test a missing file surfaces as OSError"""
        with pytest.raises(OSError):
            read_log_file(tmp_path / "missing.log")


class TestDetachPipedStdin:
    """Test detach_piped_stdin"""

    def test_terminal_stdin_is_left_alone(self, mocker):
        """Test nothing happens when stdin is already a terminal"""
        fake_stdin = mocker.MagicMock()
        fake_stdin.isatty.return_value = True
        mocker.patch("HLP.streaming.log_reader.sys.stdin", fake_stdin)

        assert detach_piped_stdin() is None

    def test_no_controlling_terminal(self, mocker):
        """Test a pipe without /dev/tty is read directly"""
        fake_stdin = mocker.MagicMock()
        fake_stdin.isatty.return_value = False
        mocker.patch("HLP.streaming.log_reader.sys.stdin", fake_stdin)
        mocker.patch("HLP.streaming.log_reader.os.open", side_effect=OSError("no tty"))

        assert detach_piped_stdin() is fake_stdin
