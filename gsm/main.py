#!/usr/bin/env python3
"""
GSM - GSocket Manager
Command line entry point: interactive loop, import and config commands.
"""

import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import ConfigError, Connection, ConnectionStore
from .importer import ImportFailed, ImportReport, commit, key_preview, prepare_file, prepare_secret
from .mnemonic import DEFAULT_WORD_COUNT
from .platform_utils import LOG_FILE_NAME
from .runner import LaunchError, execute

logger = logging.getLogger(__name__)

LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 3

GOODBYE_MESSAGE = "Exiting GSM. Thanks for using! See you! 👋"
RETURN_MESSAGE = "Returning to GSM main menu..."

AppRunner = Callable[[ConnectionStore], Optional[Connection]]
Launcher = Callable[[Connection], None]
PrintFunc = Callable[[str], None]


def setup_logging(level: str = "WARNING", log_dir: Optional[str] = None) -> None:
    """Set up logging configuration"""
    console_level = getattr(logging, str(level).upper(), logging.WARNING)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Clear any existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(min(console_level, logging.INFO))

    if log_dir:
        try:
            os.makedirs(log_dir, mode=0o700, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, LOG_FILE_NAME),
                maxBytes=LOG_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding='utf-8'
            )
        except OSError as exc:
            print(f"Warning: cannot write log file in {log_dir}: {exc}", file=sys.stderr)
        else:
            file_handler.setLevel(min(console_level, logging.INFO))
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def _default_app_runner(store: ConnectionStore) -> Optional[Connection]:
    from .tui import run_app

    return run_app(store)


def _default_dictionary() -> Sequence[str]:
    from .wordlist import get_words

    return get_words()


def run_interactive(
    store: ConnectionStore,
    *,
    app_runner: AppRunner = _default_app_runner,
    launcher: Launcher = execute,
    print_func: PrintFunc = print,
) -> int:
    """Alternate between the TUI and gs-netcat sessions until the user quits."""
    try:
        store.load()
    except ConfigError as exc:
        print(f"Critical error loading config from '{store.path}': {exc}", file=sys.stderr)
        return 1

    while True:
        try:
            store.load()
        except ConfigError as exc:
            print(f"Error reloading config for TUI: {exc}. Exiting.", file=sys.stderr)
            return 1

        selection = app_runner(store)
        if selection is None:
            print_func(GOODBYE_MESSAGE)
            return 0

        try:
            launcher(selection)
        except LaunchError as exc:
            logger.info("Session for %s ended with error: %s", selection.name, exc)
        except KeyboardInterrupt:
            logger.info("Session for %s interrupted", selection.name)

        try:
            store.record_usage(selection)
        except ConfigError as exc:
            logger.error("Failed to record usage for %s: %s", selection.name, exc)
            print_func(f"Warning: could not update usage for {selection.name}: {exc}")
        print_func(RETURN_MESSAGE)


def print_report(console: Console, report: ImportReport) -> None:
    for message in report.skipped:
        console.print(f"[yellow]{escape('[ SKIPPED ]')}[/yellow] {escape(message)}")
    for message in report.errors:
        console.print(f"[red]{escape('[ SKIPPED ]')}[/red] {escape(message)}")
    for conn in report.prepared:
        console.print(
            f"[yellow]{escape('[ PREPARED ]')}[/yellow] "
            f'Name > "{escape(conn.name)}" | Key > "{escape(key_preview(conn.key))}..." '
            f"| Tags > {escape(str(conn.tags))}"
        )


def run_import(
    store: ConnectionStore,
    *,
    secret: Optional[str] = None,
    path: Optional[str] = None,
    dictionary: Optional[Sequence[str]] = None,
    console: Optional[Console] = None,
) -> int:
    console = console or Console(highlight=False)
    err_console = Console(stderr=True, highlight=False)
    words = _default_dictionary() if dictionary is None else dictionary
    if not words:
        err_console.print("[bold red]Error: Wordlist is empty. Cannot generate mnemonic names.[/bold red]")
        return 1

    try:
        store.load()
    except ConfigError as exc:
        err_console.print(f"[bold red]Error loading existing configuration: {escape(str(exc))}[/bold red]")
        return 1

    try:
        if secret is not None:
            report = prepare_secret(store, secret, words, word_count=DEFAULT_WORD_COUNT)
        else:
            report = prepare_file(store, path, words, word_count=DEFAULT_WORD_COUNT)
    except ImportFailed as exc:
        err_console.print(f"[bold red]Error: {escape(str(exc))}[/bold red]")
        return 1

    print_report(console, report)

    try:
        added = commit(store, report)
    except ConfigError as exc:
        err_console.print(f"[bold red]Error saving imported connections: {escape(str(exc))}[/bold red]")
        return 1

    if added:
        console.print(
            f"[green]{escape('[ SUCCESS ]')}[/green] Successfully imported [bold]{added}[/bold] connection(s)."
        )
    else:
        console.print(f"[cyan]{escape('[ INFO ]')}[/cyan] No new connections were imported.")
    return 0


def run_config(
    store: ConnectionStore,
    *,
    dictionary: Optional[Sequence[str]] = None,
    input_func: Callable[[str], str] = input,
    print_func: PrintFunc = print,
) -> int:
    from .tui.editor import ConnectionAddSession

    try:
        store.load()
    except ConfigError as exc:
        print(f"Error loading config from '{store.path}': {exc}", file=sys.stderr)
        return 1

    session = ConnectionAddSession(
        store,
        dictionary=_default_dictionary() if dictionary is None else dictionary,
        input_func=input_func,
        print_func=print_func,
    )
    conn = session.run()
    if conn is None:
        return 0

    try:
        with store.transaction():
            store.add_connection(conn)
            store.save()
    except ConfigError as exc:
        print(f"ERROR: Failed to save config: {exc}", file=sys.stderr)
        return 1
    logger.info("Connection added from prompt: %s", conn.name)
    print_func(f"Config saved successfully to {store.path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gsm", description="GSocket Manager - Connect seamlessly")
    parser.add_argument("--config", metavar="PATH", help="Use this connection file instead of ~/.gsm/config.json")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Python logging level for console output (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command")

    import_parser = subparsers.add_parser(
        "import",
        help="Import GSocket connections from a key or file",
        description=(
            "Import connections from a single KEY[#tag1,tag2] secret or from a text file with one "
            "entry per line. Lines not starting with an alphanumeric character are skipped, and "
            "only the text up to the first space or tab is used. Names are generated from the key."
        ),
    )
    source = import_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--secret", "-s", help="Single GSocket secret key to import (format: KEY[#tag1,tag2])")
    source.add_argument("--file", "-f", help="Path to a file with GSocket secret keys, one per line")

    subparsers.add_parser("config", help="Add a gsocket connection interactively")
    subparsers.add_parser("version", help="Show the GSM version")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "version":
        print(f"gsm {__version__}")
        return 0

    store = ConnectionStore(args.config)
    setup_logging(args.log_level, os.path.dirname(store.path))
    logger.debug("Using connection file %s", store.path)

    if args.command == "import":
        return run_import(store, secret=args.secret, path=args.file)
    if args.command == "config":
        return run_config(store)
    return run_interactive(store)


if __name__ == "__main__":
    sys.exit(main())
