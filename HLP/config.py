"""
HLP Configuration - settings and logging setup

Settings are read from HLP_* environment variables (a .env file in the
working directory is loaded first) and can be overridden from the CLI.
"""
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

ENV_PREFIX = "HLP_"
LOG_FILE_NAME = "hlp.log"


class Settings(BaseModel):
    buffer_capacity: int = Field(default=10_000, gt=0)
    page_size: int = Field(default=20, gt=0)
    bottom_threshold: int = Field(default=5, ge=0)
    tick_interval: float = Field(default=0.1, gt=0)
    monitor_interval: float = Field(default=1.0, gt=0)
    max_reconnect_attempts: int = Field(default=5, ge=0)
    heroku_binary: Optional[str] = None
    log_dir: Path = Path.home() / ".local" / "state" / "logs-parser"
    export_dir: Path = Field(default_factory=Path.cwd)
    log_level: str = "INFO"


def load_settings(**overrides) -> Settings:
    """
    Build Settings from the environment plus explicit overrides

    Overrides whose value is None are ignored so CLI flags that were not
    given do not mask environment values.

    Raises:
        pydantic.ValidationError: If a value is invalid
    """
    load_dotenv(find_dotenv(usecwd=True))

    values = {}
    for name in Settings.model_fields:
        env_value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if env_value:
            values[name] = env_value

    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)


def configure_logging(settings: Settings) -> logging.Logger:
    """
    Attach a file handler to the root HLP logger

    The terminal belongs to the TUI, so all log output goes to
    <log_dir>/hlp.log.
    """
    logger = logging.getLogger("HLP")
    logger.setLevel(settings.log_level.upper())

    # Create file handler if not already exists
    if not logger.handlers:
        log_dir = Path(settings.log_dir).expanduser()
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME)
        file_handler.setLevel(settings.log_level.upper())

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(subsystem: str) -> logging.Logger:
    return logging.getLogger(f"HLP.{subsystem}")
