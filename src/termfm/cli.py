"""Command-line entry point.

Loads settings, lists the start directory up front (a failure there is
fatal), then hands the first listing to the Textual app.
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from . import config
from .errors import FileStoreError
from .filestore import FileStore
from .log import LOG_PATH, setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STARTUP_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="termfm", description="Terminal file browser.")
    parser.add_argument("path", nargs="?", help="directory to start in (default: start_dir setting)")
    parser.add_argument("--config", type=Path, default=None, help="settings file (JSON)")
    parser.add_argument("--show-hidden", action="store_true", help="list dotfiles")
    parser.add_argument("--no-icons", action="store_true", help="plain names without file icons")
    parser.add_argument("--log-file", type=Path, default=None, help="write a debug log to this file")
    return parser


def run_app(app) -> int:
    app.run()
    return app.return_code or EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.config is None:
        config.ensure_config()
    settings = config.load_settings(args.config)
    if args.show_hidden:
        settings = replace(settings, show_hidden=True)
    if args.no_icons:
        settings = replace(settings, show_icons=False)

    log_path = args.log_file or (LOG_PATH if settings.enable_logging else None)
    setup_logging(log_path)

    start = Path(args.path).expanduser() if args.path else settings.start_path()
    store = FileStore(show_hidden=settings.show_hidden)
    try:
        listing = store.list_directory(start)
    except FileStoreError as exc:
        logger.error("cannot list start directory: %s", exc)
        print(f"termfm: cannot open {start}: {exc.failure.describe()}", file=sys.stderr)
        return EXIT_STARTUP_FAILURE

    from .app import FileManagerApp

    logger.info("starting in %s", listing.path)
    return run_app(FileManagerApp(listing, settings=settings, store=store))
