"""
User preference storage - the UI theme is the only value kept between runs
"""
from pathlib import Path
from typing import Optional

from .config import get_logger

DEFAULT_THEME = "textual-dark"

logger = get_logger("preferences")


def theme_config_path(home: Optional[Path] = None) -> Path:
    return (home or Path.home()) / ".config" / "logs-parser" / "theme"


def read_theme(path: Optional[Path] = None) -> str:
    path = path or theme_config_path()
    try:
        theme = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return DEFAULT_THEME
    except OSError as e:
        logger.warning(f"Could not read theme preference {path}: {e}")
        return DEFAULT_THEME
    return theme or DEFAULT_THEME


def write_theme(theme: str, path: Optional[Path] = None) -> bool:
    """Persist the theme name, returning False if it could not be written"""
    path = path or theme_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(theme, encoding="utf-8")
    except OSError as e:
        logger.warning(f"Could not save theme preference {path}: {e}")
        return False
    return True
