"""
Log Process Module - the child process a stream reads from

LogProcess is the narrow interface the StreamSupervisor depends on, so
its retry/backoff logic can be exercised with a fake process instead of
a real heroku binary.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import AsyncIterator, List, Optional

import psutil

from ..config import get_logger
from .errors import SpawnError
from .heroku_cli import cli_env, find_heroku_binary

logger = get_logger("log_process")


class LogProcess(ABC):
    """A child process producing one log line per output line"""

    @abstractmethod
    async def spawn(self) -> None:
        """Start the process. Raises SpawnError on failure."""

    @abstractmethod
    def read_lines(self) -> AsyncIterator[str]:
        """Decoded output lines without trailing newlines, until the pipe closes"""

    @abstractmethod
    def is_alive(self) -> bool:
        """Non-blocking liveness check"""

    @abstractmethod
    def kill(self) -> None:
        """Best-effort termination; safe to call on a process that already exited"""


class SubprocessLogProcess(LogProcess):
    """LogProcess backed by an asyncio subprocess"""

    def __init__(self, command: List[str]):
        self.command = command
        self._process: Optional[asyncio.subprocess.Process] = None

    async def spawn(self) -> None:
        try:
            self._process = await asyncio.create_subprocess_exec(
                *self.command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
                env=cli_env(),
            )
        except OSError as e:
            raise SpawnError(f"Failed to spawn {self.command[0]}: {e}") from e

        if self._process.stdout is None:
            self.kill()
            raise SpawnError("Failed to capture stdout")

        logger.info(f"Spawned {' '.join(self.command)} (pid {self._process.pid})")

    async def read_lines(self) -> AsyncIterator[str]:
        if self._process is None or self._process.stdout is None:
            return
        async for raw in self._process.stdout:
            yield raw.decode("utf-8", errors="replace").rstrip("\r\n")

    def is_alive(self) -> bool:
        if self._process is None or self._process.returncode is not None:
            return False
        try:
            return psutil.Process(self._process.pid).status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False

    def kill(self) -> None:
        if self._process is None or self._process.returncode is not None:
            return
        try:
            # The heroku CLI runs under node and may have children of its own
            parent = psutil.Process(self._process.pid)
            for child in parent.children(recursive=True):
                child.kill()
            parent.kill()
            logger.info(f"Killed log process {self._process.pid}")
        except psutil.NoSuchProcess:
            pass
        except psutil.AccessDenied as e:
            logger.warning(f"Access denied killing process {self._process.pid}: {e}")


class HerokuLogProcess(SubprocessLogProcess):
    """`heroku logs --tail --app <name>`"""

    def __init__(self, app_name: str, binary: Optional[str] = None):
        super().__init__([binary or find_heroku_binary(), "logs", "--tail", "--app", app_name])
        self.app_name = app_name
