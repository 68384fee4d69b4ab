#!/usr/bin/env python3
"""
Rootless Setup Logging
Routes stdlib logging through rich so log lines match the console output
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"


def setup_logging(debug: bool = False, console: Console = None) -> None:
    """
    Configure the root logger once per process

    Args:
        debug: Show DEBUG records (default shows WARNING and above)
        console: Console to render on (default: stderr console)
    """
    level = logging.DEBUG if debug else logging.WARNING
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=debug,
        show_path=debug,
        markup=False,
        rich_tracebacks=debug,
    )
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[handler],
        force=True,
    )
    # urllib3 is chatty at DEBUG
    logging.getLogger('urllib3').setLevel(logging.WARNING)
