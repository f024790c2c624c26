"""
Stream Supervisor Module - child process lifecycle for live log streaming

Handles:
- Spawning the log source process and forwarding parsed entries
- Killing any previous process before connecting again
- Reconnecting with exponential backoff (1, 2, 4, 8, 16 seconds)
- Giving up after a fixed number of attempts
- The supervising loop that watches the process and reconnects
"""
import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Tuple

from ..config import get_logger
from ..log_analysis.log_parser import parse_log_line
from ..log_analysis.messages import NewEntry
from .channel import LogChannel
from .errors import MaxReconnectAttemptsError, StreamError
from .log_process import HerokuLogProcess, LogProcess

DEFAULT_MAX_ATTEMPTS = 5

ProcessFactory = Callable[[str], LogProcess]
SleepFunc = Callable[[float], Awaitable[None]]

logger = get_logger("stream_supervisor")


class StreamSupervisor:
    """
    Owns the child process streaming logs for one target (app name)

    Invariants:
        - reconnect_attempts is 0 after every successful connect
        - connect never leaves a previous child running
    """

    def __init__(
        self,
        target: str,
        channel: LogChannel,
        process_factory: Optional[ProcessFactory] = None,
        sleep: SleepFunc = asyncio.sleep,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        """
        Initialize the supervisor

        Args:
            target: App/source name handed to the process factory
            channel: Where parsed entries are sent as NewEntry messages
            process_factory: Builds the LogProcess for a target (heroku logs --tail by default)
            sleep: Awaitable used for backoff delays
            max_attempts: Reconnect attempts allowed before giving up
        """
        self.target = target
        self.channel = channel
        self.process_factory = process_factory or HerokuLogProcess
        self.max_attempts = max_attempts
        self._sleep = sleep

        self.process: Optional[LogProcess] = None
        self.reconnect_attempts = 0
        self._reader_task: Optional[asyncio.Task] = None

    async def connect(self) -> None:
        """
        Start streaming

        Raises:
            SpawnError: If the process cannot be started
        """
        self._kill_process()

        process = self.process_factory(self.target)
        await process.spawn()

        self.process = process
        self._reader_task = asyncio.create_task(self._forward_lines(process))
        self.reconnect_attempts = 0
        logger.info(f"Connected to {self.target}")

    async def disconnect(self) -> None:
        """Kill the process (best-effort) and reset the attempt counter"""
        self._kill_process()
        self.reconnect_attempts = 0

    async def reconnect(self) -> None:
        """
        Wait out the backoff for the next attempt, then connect again

        Raises:
            MaxReconnectAttemptsError: Once max_attempts reconnects have been used
            SpawnError: If this attempt fails to start the process
        """
        if self.reconnect_attempts >= self.max_attempts:
            logger.error(f"Giving up on {self.target} after {self.reconnect_attempts} attempts")
            raise MaxReconnectAttemptsError(self.max_attempts)

        self.reconnect_attempts += 1
        delay = 2 ** (self.reconnect_attempts - 1)
        logger.info(f"Reconnecting to {self.target} in {delay}s (attempt {self.reconnect_attempts})")
        await self._sleep(delay)

        await self.connect()

    def is_running(self) -> bool:
        """Poll the child without blocking"""
        return self.process is not None and self.process.is_alive()

    def close(self) -> None:
        """Synchronous force-kill, for shutdown paths that cannot await"""
        self._kill_process()

    async def __aenter__(self) -> "StreamSupervisor":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.disconnect()

    def __del__(self):
        if getattr(self, "process", None) is not None:
            self.process.kill()

    def _kill_process(self) -> None:
        if self._reader_task is not None and not self._reader_task.done():
            self._reader_task.cancel()
        self._reader_task = None

        if self.process is not None:
            self.process.kill()
            self.process = None

    async def _forward_lines(self, process: LogProcess) -> None:
        """Parse process output and send entries until the pipe or the channel closes"""
        try:
            async for line in process.read_lines():
                entry = parse_log_line(line)
                if entry is None:
                    continue
                if not self.channel.send(NewEntry(entry)):
                    break
        except (OSError, ValueError) as e:
            logger.debug(f"Reader for {self.target} stopped: {e}")


class ConnectionStatus(Enum):
    DISCONNECTED = "Disconnected"
    CONNECTING = "Connecting"
    STREAMING = "Streaming"
    RECONNECTING = "Reconnecting"
    FAILED = "Failed"


@dataclass(frozen=True)
class ConnectionState:
    status: ConnectionStatus
    attempt: int = 0
    detail: str = ""

    def describe(self) -> str:
        if self.status == ConnectionStatus.RECONNECTING:
            return f"Reconnecting (attempt {self.attempt})"
        if self.detail:
            return f"{self.status.value}: {self.detail}"
        return self.status.value


class StreamSession:
    """
    Supervising loop around a StreamSupervisor

    Every supervisor call happens under one asyncio.Lock. The loop checks
    `should_monitor` once per iteration; a backoff sleep already in
    progress is not interrupted.
    """

    def __init__(
        self,
        supervisor: StreamSupervisor,
        on_status: Optional[Callable[[ConnectionState], None]] = None,
        monitor_interval: float = 1.0,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.supervisor = supervisor
        self.on_status = on_status
        self.monitor_interval = monitor_interval
        self._sleep = sleep

        self.lock = asyncio.Lock()
        self.should_monitor = False
        self.state = ConnectionState(ConnectionStatus.DISCONNECTED)

    async def start(self) -> Tuple[bool, str]:
        """
        Connect for the first time

        Returns:
            Tuple of (success: bool, message: str)
        """
        self._report(ConnectionState(ConnectionStatus.CONNECTING))
        async with self.lock:
            try:
                await self.supervisor.connect()
            except StreamError as e:
                message = f"Connection failed: {e}"
                logger.error(message)
                self._report(ConnectionState(ConnectionStatus.FAILED, detail=message))
                return False, message

        self.should_monitor = True
        self._report(ConnectionState(ConnectionStatus.STREAMING, detail=self.supervisor.target))
        return True, f"Streaming logs from {self.supervisor.target}"

    async def monitor(self) -> None:
        """Watch the process and reconnect until stopped or out of attempts"""
        while True:
            await self._sleep(self.monitor_interval)
            if not self.should_monitor:
                break

            async with self.lock:
                if self.supervisor.is_running():
                    continue

                attempt = self.supervisor.reconnect_attempts + 1
                if attempt <= self.supervisor.max_attempts:
                    self._report(ConnectionState(ConnectionStatus.RECONNECTING, attempt=attempt))
                try:
                    await self.supervisor.reconnect()
                except MaxReconnectAttemptsError as e:
                    self.should_monitor = False
                    self._report(ConnectionState(ConnectionStatus.FAILED, detail=f"Reconnection failed: {e}"))
                    break
                except StreamError as e:
                    # The next iteration sees the process down and tries again
                    logger.warning(f"Reconnect attempt {self.supervisor.reconnect_attempts} failed: {e}")
                    continue

                self._report(ConnectionState(ConnectionStatus.STREAMING, detail=self.supervisor.target))

    async def run(self) -> None:
        ok, _ = await self.start()
        if ok:
            await self.monitor()

    async def stop(self) -> None:
        self.should_monitor = False
        async with self.lock:
            await self.supervisor.disconnect()
        self._report(ConnectionState(ConnectionStatus.DISCONNECTED))

    def _report(self, state: ConnectionState) -> None:
        self.state = state
        if self.on_status is not None:
            self.on_status(state)
