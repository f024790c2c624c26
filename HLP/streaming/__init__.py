"""
Streaming Package - log sources feeding the view state

Package Structure:
- channel: Thread-safe message queue shared by all producers (LogChannel)
- log_process: Child process abstraction (LogProcess, HerokuLogProcess)
- stream_supervisor: Connect/reconnect with backoff (StreamSupervisor, StreamSession)
- log_reader: stdin and file producers (LineReader, read_log_file)
- heroku_cli: Heroku CLI discovery, auth and app listing
- errors: Exception types
"""

from .channel import LogChannel
from .errors import StreamError, SpawnError, MaxReconnectAttemptsError, HerokuCLIError
from .log_process import LogProcess, SubprocessLogProcess, HerokuLogProcess
from .stream_supervisor import (
    StreamSupervisor,
    StreamSession,
    ConnectionState,
    ConnectionStatus,
)
from .log_reader import LineReader, read_log_file, detach_piped_stdin

__all__ = [
    'LogChannel',
    'StreamError',
    'SpawnError',
    'MaxReconnectAttemptsError',
    'HerokuCLIError',
    'LogProcess',
    'SubprocessLogProcess',
    'HerokuLogProcess',
    'StreamSupervisor',
    'StreamSession',
    'ConnectionState',
    'ConnectionStatus',
    'LineReader',
    'read_log_file',
    'detach_piped_stdin',
]
