from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from common.config import ConfigError, Settings
from common.logging_setup import setup_logging
from common.navigation import Navigator, Page
from common.tasks_api import TaskApiClient
from state.session_store import (
    FileSessionStore,
    SessionContext,
    SessionStoreError,
    load_or_create_key,
)

from .shell import ConsoleShell


logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="tasks-client", description="Console client for the task service.")
    p.add_argument("--api-base", help="Task service base URL (env TASKS_API_BASE)")
    p.add_argument("--session-file", type=Path, help="Encrypted session file (env TASKS_SESSION_FILE)")
    p.add_argument("--log-level", help="Console log level (env TASKS_LOG_LEVEL)")
    return p.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with command-line flags taking precedence."""
    settings = Settings.from_env()
    overrides = {}
    if args.api_base:
        overrides["api_base"] = args.api_base.rstrip("/")
    if args.session_file:
        overrides["session_file"] = args.session_file.expanduser()
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    return settings.model_copy(update=overrides) if overrides else settings


def build_store(settings: Settings) -> FileSessionStore:
    key = settings.session_key or load_or_create_key(settings.session_key_file)
    return FileSessionStore(settings.session_file, fernet_key=key)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        settings = build_settings(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logging(settings.log_level)

    # Resume on the dashboard when a session survived from a previous run;
    # the dashboard itself signs out if it is incomplete.
    try:
        store = build_store(settings)
    except SessionStoreError as e:
        print(f"Session store error: {e}", file=sys.stderr)
        return 2
    navigator = Navigator(Page.DASHBOARD if store.read().token else Page.AUTH)
    session = SessionContext(store, navigator=navigator)

    logger.info("Using task service at %s", settings.api_base)
    with TaskApiClient(api_base=settings.api_base, timeout=settings.http_timeout) as api:
        shell = ConsoleShell(api, session, navigator, flash_seconds=settings.flash_seconds)
        shell.run()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
