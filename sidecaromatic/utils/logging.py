"""
Logging for the ``sidecaromatic-cli`` process.

Console messages go to stdout at INFO (DEBUG with ``--debug``); ``-v`` and
``--debug`` switch the console to rich formatting. Every run also appends to
``sidecaromatic.log`` in :func:`log_directory`, and ``--save-logfile`` adds a
plain-text copy of the console stream.
"""

from __future__ import annotations

import atexit
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

import structlog
from rich.logging import RichHandler
from structlog.stdlib import LoggerFactory

__all__ = ["setup_logging", "log_directory"]

LOG_NAME = "sidecaromatic.log"
_PLAIN = logging.Formatter("[%(levelname)s] %(message)s")


def log_directory(dataset_root: Path | None) -> Path:
    """Return the directory that receives :data:`LOG_NAME`.

    ``$SIDECAROMATIC_LOG_DIR`` wins, then ``<dataset_root>/code/logs``, then
    a ``logs/`` folder inside the installed package.
    """
    env_dir = os.environ.get("SIDECAROMATIC_LOG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    if dataset_root is not None:
        return dataset_root / "code" / "logs"
    return Path(__file__).resolve().parents[1] / "logs"


def _file_handlers(
    dataset_root: Path | None, mirror: Optional[Path], debug: bool, console_lvl: int
) -> list[logging.Handler]:
    logdir = log_directory(dataset_root)
    logdir.mkdir(parents=True, exist_ok=True)
    rotating = logging.handlers.RotatingFileHandler(
        logdir / LOG_NAME, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
    )
    rotating.setLevel(logging.DEBUG if debug else logging.INFO)
    rotating.setFormatter(logging.Formatter("%(asctime)s %(name)s [%(levelname)s] %(message)s"))
    handlers: list[logging.Handler] = [rotating]

    if mirror is not None:
        mirror = mirror.expanduser().resolve()
        mirror.parent.mkdir(parents=True, exist_ok=True)
        text = logging.FileHandler(mirror, encoding="utf-8", mode="a")
        text.setLevel(console_lvl)
        text.setFormatter(_PLAIN)
        atexit.register(text.close)
        handlers.append(text)
    return handlers


def setup_logging(
    *,
    dataset_root: Path | None = None,
    verbose: bool = False,
    debug: bool = False,
    extra_text_log: Optional[Path] = None,
) -> None:
    """Configure stdlib logging and structlog for one CLI run.

    Args:
        dataset_root: BIDS dataset root; selects the log directory.
        verbose: Rich console formatting.
        debug: DEBUG level everywhere, rich tracebacks and timestamps.
        extra_text_log: Optional plain-text mirror of the console output.
    """
    console_lvl = logging.DEBUG if debug else logging.INFO

    if verbose or debug:
        console: logging.Handler = RichHandler(rich_tracebacks=debug, markup=True)
    else:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(_PLAIN)
    console.setLevel(console_lvl)

    # force=True so repeated CLI invocations in one process rebind handlers.
    logging.basicConfig(
        level=logging.DEBUG,
        handlers=[console, *_file_handlers(dataset_root, extra_text_log, debug, console_lvl)],
        format="%(message)s",
        force=True,
    )

    processors = [structlog.processors.TimeStamper(fmt="iso")] if debug else []
    structlog.configure(
        processors=[*processors, structlog.dev.ConsoleRenderer(colors=False)],
        wrapper_class=structlog.make_filtering_bound_logger(console_lvl),
        logger_factory=LoggerFactory(),
    )
