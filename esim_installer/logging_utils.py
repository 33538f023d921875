from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

_CONFIGURED_ATTR = "_esim_log_path"

FILE_FORMAT = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)
CONSOLE_FORMAT = logging.Formatter(fmt="%(message)s")


def configure_logging(
    log_path: str,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Send installer logs to a per-user file and, optionally, the terminal.

    The file records timestamps and logger names for later troubleshooting;
    the terminal gets the bare messages the user is meant to read. If the
    file cannot be created the run carries on with terminal output only.

    Idempotent: later calls return the path chosen by the first one.
    Returns None when no log file could be opened.
    """

    root = logging.getLogger()
    if hasattr(root, _CONFIGURED_ATTR):
        return getattr(root, _CONFIGURED_ATTR)
    root.setLevel(level)

    if also_console:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(CONSOLE_FORMAT)
        root.addHandler(console)

    chosen: Optional[str] = None
    try:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as e:
        logging.getLogger(__name__).warning("Cannot write log file %s (%s); logging to terminal only", log_path, e)
    else:
        file_handler.setFormatter(FILE_FORMAT)
        root.addHandler(file_handler)
        chosen = log_path
        logging.getLogger(__name__).debug("Logging to %s", log_path)

    setattr(root, _CONFIGURED_ATTR, chosen)
    return chosen
