"""
HLP Main Application - terminal log viewer using Textual
"""
from functools import partial
from pathlib import Path
from typing import Optional, TextIO

from textual import events
from textual.app import App, ComposeResult

from HLP.config import Settings, get_logger
from HLP.log_analysis.export import copy_to_clipboard, export_to_file
from HLP.log_analysis.messages import InputMode, NewEntry, Tick
from HLP.log_analysis.view_state import ViewState
from HLP.preferences import read_theme, write_theme
from HLP.streaming.channel import LogChannel
from HLP.streaming.log_process import HerokuLogProcess
from HLP.streaming.log_reader import LineReader, read_log_file
from HLP.streaming.stream_supervisor import ConnectionState, StreamSession, StreamSupervisor
from HLP.UI.views.log_viewer import LogViewerView, key_to_message

logger = get_logger("app")


class LogsParserApp(App):
    """
    Heroku Logs Parser - Terminal UI Application

    Producers (stdin reader, file replay, heroku stream) only write to the
    channel. The app drains it on a timer and applies each message to the
    view state in arrival order, then repaints.
    """

    TITLE = "Heroku Logs Parser"
    CSS_PATH = "hlp.tcss"

    def __init__(
        self,
        settings: Settings,
        app_name: Optional[str] = None,
        log_file: Optional[Path] = None,
        stdin_stream: Optional[TextIO] = None,
        theme_path: Optional[Path] = None,
    ):
        super().__init__()
        self.settings = settings
        self.app_name = app_name
        self.log_file = log_file
        self.stdin_stream = stdin_stream
        self.theme_path = theme_path

        self.channel = LogChannel()
        self.state = ViewState(
            capacity=settings.buffer_capacity,
            page_size=settings.page_size,
            bottom_threshold=settings.bottom_threshold,
            exporter=partial(export_to_file, directory=settings.export_dir),
            clipboard=lambda entries: copy_to_clipboard(entries, self.copy_to_clipboard),
        )

        self.session: Optional[StreamSession] = None
        self.reader: Optional[LineReader] = None
        self.source_status: Optional[str] = None

    def compose(self) -> ComposeResult:
        yield LogViewerView(id="log-viewer-view")

    def on_mount(self) -> None:
        theme = read_theme(self.theme_path)
        if theme in self.available_themes:
            self.theme = theme
        else:
            logger.warning(f"Unknown theme '{theme}' in preferences, using default")

        if self.app_name:
            self._start_stream(self.app_name)
        elif self.log_file:
            self.source_status = f"File: {self.log_file.name}"
            self.run_worker(partial(self._replay_file, self.log_file), thread=True, name="file-replay")
        elif self.stdin_stream is not None:
            self.source_status = "Reading stdin"
            self.reader = LineReader(self.stdin_stream, self.channel)
            self.reader.start()

        self.set_interval(self.settings.tick_interval, self._tick)

    def on_unmount(self) -> None:
        self.shutdown()

    def on_key(self, event: events.Key) -> None:
        if self.state.input_mode == InputMode.NORMAL and event.key == "t":
            event.stop()
            self.action_cycle_theme()
            return

        message = key_to_message(
            event.key, event.character, self.state.input_mode, len(self.state.filter_set)
        )
        if message is None:
            return
        event.stop()
        if self.channel.send(message):
            self.process_messages()

    def _tick(self) -> None:
        if not self.channel.send(Tick()):
            return
        self.process_messages()

    def process_messages(self) -> None:
        """Apply everything queued so far, then repaint (or exit)"""
        for message in self.channel.drain():
            self.state.update(message)
            if self.state.should_quit:
                self.exit()
                return
        self.refresh_view()

    def refresh_view(self) -> None:
        view = self.query_one("#log-viewer-view", LogViewerView)
        snapshot = self.state.snapshot(view.viewport_height())
        view.render_snapshot(snapshot, self.source_status)

    def action_cycle_theme(self) -> None:
        themes = list(self.available_themes)
        if not themes:
            return
        try:
            current = themes.index(self.theme)
        except ValueError:
            current = -1
        self.theme = themes[(current + 1) % len(themes)]
        write_theme(self.theme, self.theme_path)
        self.refresh_view()

    def shutdown(self) -> None:
        """Stop every producer and kill the log process; nothing waits on them"""
        self.channel.close()
        if self.reader is not None:
            self.reader.stop()
        if self.session is not None:
            self.session.should_monitor = False
            self.session.supervisor.close()

    # Producers

    def _start_stream(self, app_name: str) -> None:
        binary = self.settings.heroku_binary
        supervisor = StreamSupervisor(
            app_name,
            self.channel,
            process_factory=lambda name: HerokuLogProcess(name, binary),
            max_attempts=self.settings.max_reconnect_attempts,
        )
        self.session = StreamSession(
            supervisor,
            on_status=self._on_connection_status,
            monitor_interval=self.settings.monitor_interval,
        )
        self.run_worker(self.session.run(), name="stream", group="stream", exclusive=True)

    def _on_connection_status(self, state: ConnectionState) -> None:
        self.source_status = state.describe()
        logger.info(f"Connection status: {self.source_status}")

    def _replay_file(self, path: Path) -> None:
        try:
            entries = read_log_file(path)
        except OSError as e:
            logger.error(f"Could not read {path}: {e}")
            self.call_from_thread(self._set_source_status, f"Could not read {path.name}: {e}")
            return

        for entry in entries:
            if not self.channel.send(NewEntry(entry)):
                break

    def _set_source_status(self, status: str) -> None:
        self.source_status = status


def run_app(
    settings: Settings,
    app_name: Optional[str] = None,
    log_file: Optional[Path] = None,
    stdin_stream: Optional[TextIO] = None,
) -> None:
    """Entry point to run the HLP application"""
    app = LogsParserApp(settings, app_name=app_name, log_file=log_file, stdin_stream=stdin_stream)
    try:
        app.run()
    finally:
        app.shutdown()
