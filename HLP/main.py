#!/usr/bin/env python3
"""
HLP - Main Entry Point
Run the Heroku Logs Parser terminal UI

Usage:
    heroku logs --tail --app my-app | hlp
    hlp --app my-app
    hlp --file saved.log
    hlp --list-apps
    hlp --login
"""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from HLP.config import configure_logging, load_settings, Settings
from HLP.streaming.errors import HerokuCLIError
from HLP.streaming.heroku_cli import init_heroku, spawn_login
from HLP.streaming.log_reader import detach_piped_stdin


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hlp",
        description="Parse, filter and browse Heroku logs in the terminal",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--app", metavar="NAME", help="stream logs from a Heroku app via the Heroku CLI")
    source.add_argument("--file", metavar="PATH", type=Path, help="load logs from a saved file")
    source.add_argument("--list-apps", action="store_true", help="list Heroku apps and exit")
    source.add_argument("--login", action="store_true", help="run the interactive heroku login and exit")
    parser.add_argument("--capacity", type=int, metavar="N", help="number of log entries to retain")
    return parser


def list_apps(settings: Settings, console: Console) -> int:
    """Print the account's apps as a table; returns the exit status"""
    ready, message, apps = asyncio.run(init_heroku(settings.heroku_binary))
    if not ready:
        console.print(f"[red]{message}[/red]")
        return 1

    table = Table(title=message)
    table.add_column("Name", style="cyan")
    table.add_column("ID", style="dim")
    for app in apps:
        table.add_row(app.name, app.id)
    console.print(table)
    return 0


async def _login(binary: Optional[str]) -> int:
    child = await spawn_login(binary)
    return await child.wait()


def login(settings: Settings, console: Console) -> int:
    """Hand the terminal to `heroku login`; returns its exit status"""
    try:
        return asyncio.run(_login(settings.heroku_binary))
    except HerokuCLIError as e:
        console.print(f"[red]{e}[/red]")
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    console = Console(stderr=True)

    try:
        settings = load_settings(buffer_capacity=args.capacity)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red]\n{e}")
        return 2

    logger = configure_logging(settings)

    if args.list_apps:
        return list_apps(settings, console)
    if args.login:
        return login(settings, console)

    stdin_stream = None
    if not args.app and not args.file:
        stdin_stream = detach_piped_stdin()
        if stdin_stream is None:
            console.print("[yellow]No log source: pipe logs into hlp, or use --app / --file[/yellow]")
            return 1

    # Imported here so --help and --list-apps do not pay for Textual start-up
    from HLP.UI import run_app

    logger.info("Starting HLP terminal UI")
    try:
        run_app(settings, app_name=args.app, log_file=args.file, stdin_stream=stdin_stream)
    except KeyboardInterrupt:
        logger.info("HLP terminated by user")
    except Exception as e:
        logger.exception("Error running HLP")
        console.print(f"\nError running HLP: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
