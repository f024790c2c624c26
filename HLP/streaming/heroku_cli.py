"""
Heroku CLI wrapper - installation, authentication and app discovery

The heroku binary is often installed somewhere the launching environment
does not have on PATH (Homebrew prefixes when started from a desktop
launcher), so known install locations are probed first and PATH is
augmented for every invocation.
"""
import asyncio
import json
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ValidationError

from ..config import get_logger
from .errors import HerokuCLIError

KNOWN_HEROKU_PATHS = [
    "/opt/homebrew/bin/heroku",
    "/usr/local/bin/heroku",
    "/usr/local/heroku/bin/heroku",
]

logger = get_logger("heroku_cli")


class AppInfo(BaseModel):
    name: str
    id: str


def cli_env() -> Dict[str, str]:
    """Environment with common install locations prepended to PATH"""
    env = dict(os.environ)
    env["PATH"] = f"/opt/homebrew/bin:/usr/local/bin:/usr/bin:/bin:{env.get('PATH', '')}"
    return env


def find_heroku_binary() -> str:
    """Absolute path of the heroku binary if found at a known location, else "heroku"."""
    for path in KNOWN_HEROKU_PATHS:
        if Path(path).exists():
            return path
    return "heroku"


async def _run(*args: str, binary: Optional[str] = None) -> Tuple[int, str, str]:
    """Run a heroku subcommand and capture (returncode, stdout, stderr)"""
    try:
        process = await asyncio.create_subprocess_exec(
            binary or find_heroku_binary(), *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=cli_env(),
        )
    except OSError as e:
        raise HerokuCLIError(f"Failed to execute 'heroku {' '.join(args)}'", str(e)) from e

    stdout, stderr = await process.communicate()
    return (
        process.returncode,
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )


async def check_cli_installed(binary: Optional[str] = None) -> bool:
    """Check if the Heroku CLI is installed"""
    if binary is None and any(Path(p).exists() for p in KNOWN_HEROKU_PATHS):
        return True

    # Fallback: try running heroku via augmented PATH
    try:
        returncode, _, _ = await _run("version", binary=binary)
    except HerokuCLIError:
        return False
    return returncode == 0


async def check_authentication(binary: Optional[str] = None) -> str:
    """
    Check if the user is logged in to Heroku

    Returns:
        The authenticated user's email

    Raises:
        HerokuCLIError: If not authenticated
    """
    returncode, stdout, stderr = await _run("auth:whoami", binary=binary)
    if returncode != 0:
        raise HerokuCLIError("Not authenticated", stderr.strip())
    return stdout.strip()


async def fetch_apps(binary: Optional[str] = None) -> List[AppInfo]:
    """
    Fetch every app visible to the authenticated user

    Raises:
        HerokuCLIError: If the command fails or its JSON cannot be parsed
    """
    returncode, stdout, stderr = await _run("apps", "--all", "--json", binary=binary)
    if returncode != 0:
        raise HerokuCLIError("Failed to fetch apps", stderr.strip())

    try:
        return [AppInfo.model_validate(item) for item in json.loads(stdout)]
    except (json.JSONDecodeError, TypeError, ValidationError) as e:
        raise HerokuCLIError("Failed to parse apps JSON", str(e)) from e


async def spawn_login(binary: Optional[str] = None) -> asyncio.subprocess.Process:
    """
    Start the interactive `heroku login` flow

    Returns the child immediately; the caller waits on it.
    """
    try:
        return await asyncio.create_subprocess_exec(
            binary or find_heroku_binary(), "login", env=cli_env()
        )
    except OSError as e:
        raise HerokuCLIError("Failed to spawn 'heroku login'", str(e)) from e


async def init_heroku(binary: Optional[str] = None) -> Tuple[bool, str, List[AppInfo]]:
    """
    Run the readiness checks in order: CLI installed, authenticated, apps available

    Returns:
        Tuple of (ready: bool, message: str, apps)
    """
    if not await check_cli_installed(binary):
        return False, "Heroku CLI not found. Install from heroku.com/cli", []

    try:
        email = await check_authentication(binary)
    except HerokuCLIError as e:
        logger.info(f"Heroku authentication check failed: {e}")
        return False, "Not authenticated. Run 'heroku login'", []

    try:
        apps = await fetch_apps(binary)
    except HerokuCLIError as e:
        logger.error(f"Failed to fetch apps: {e}")
        return False, f"Failed to fetch apps: {e.stderr or e}", []

    if not apps:
        return False, "No Heroku apps found", []

    logger.info(f"Heroku ready for {email}: {len(apps)} app(s)")
    return True, f"Logged in as {email}", apps
