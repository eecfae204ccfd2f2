"""
Logging for the ``sidecaromatic-cli`` run.

Console records go through Rich; every record at INFO or above (DEBUG with
``--debug``) is also kept in ``<dataset>/code/logs/sidecaromatic.log``, a
rotating file. ``SIDECAROMATIC_LOG_DIR`` moves that file elsewhere.
"""

from __future__ import annotations

import atexit
import logging
import logging.handlers
import os
from pathlib import Path
from typing import List, Optional

import structlog
from rich.logging import RichHandler

__all__ = ["setup_logging"]

LOG_NAME = "sidecaromatic.log"


def _log_dir(dataset_root: Optional[Path]) -> Path:
    env_dir = os.environ.get("SIDECAROMATIC_LOG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    if dataset_root is not None:
        return dataset_root / "code" / "logs"
    return Path.cwd() / "logs"


def setup_logging(
    *,
    dataset_root: Path | None = None,
    verbose: bool = False,
    debug: bool = False,
    extra_text_log: Optional[Path] = None,
) -> None:
    """Attach the console, rotating-file and optional mirror handlers.

    Args:
        dataset_root: Dataset whose ``code/logs`` folder receives the log file.
        verbose: Show INFO records on the console.
        debug: Show DEBUG records (and source paths) on the console.
        extra_text_log: Plain-text copy of what the console shows.
    """
    console_lvl = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING

    logdir = _log_dir(dataset_root)
    logdir.mkdir(parents=True, exist_ok=True)
    rotating = logging.handlers.RotatingFileHandler(
        logdir / LOG_NAME, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
    )
    rotating.setLevel(logging.DEBUG if debug else logging.INFO)

    handlers: List[logging.Handler] = [
        RichHandler(level=console_lvl, markup=False, show_path=debug, rich_tracebacks=True),
        rotating,
    ]
    if extra_text_log is not None:
        path = extra_text_log.expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        mirror = logging.FileHandler(path, encoding="utf-8")
        mirror.setLevel(console_lvl)
        mirror.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        atexit.register(mirror.close)
        handlers.append(mirror)

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, format="%(message)s")

    renderer = (
        structlog.dev.ConsoleRenderer()
        if verbose or debug
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(console_lvl),
        logger_factory=structlog.stdlib.LoggerFactory(),
    )
