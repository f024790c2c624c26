"""
Streaming errors

Raised by the streaming layer and turned into status strings by the UI.
"""


class StreamError(Exception):
    """Base class for log streaming failures"""


class SpawnError(StreamError):
    """The log source process could not be started or its output captured"""


class MaxReconnectAttemptsError(StreamError):
    """Reconnecting gave up; a fresh connect is needed"""

    def __init__(self, max_attempts: int):
        super().__init__(f"Max reconnection attempts reached ({max_attempts})")
        self.max_attempts = max_attempts


class HerokuCLIError(Exception):
    """A Heroku CLI command failed"""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(f"{message}: {stderr}" if stderr else message)
        self.stderr = stderr
