"""Where speechlens analysis runs report what they did.

The analysis modules log through ``logging.getLogger(__name__)``.  They record
how many speeches were loaded and how many tokens and groups were counted.
They also note rows or terms dropped for having no mass, tf-idf rows clamped
to the render cap, and correspondence analyses skipped for a degenerate
selection.  The CLI calls :func:`setup_logging` once per command to decide
where those records go:

- the terminal (stderr) shows warnings only, such as an empty year range or
  a skipped map, unless ``--verbose`` lowers it to DEBUG;
- with ``--log-dir DIR`` every run is also appended to
  ``DIR/.speechlens/speechlens.log`` at the level named by
  ``SPEECHLENS_LOG_LEVEL`` (INFO when unset), so repeated runs over the
  same corpus leave a history of counts and exclusions.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_LOG_SUBDIR = ".speechlens"
_LOG_FILENAME = "speechlens.log"

# Rotate at 5 MB, keep two old files
_MAX_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

_TERMINAL_FORMAT = "%(levelname)s | %(name)s | %(message)s"
_FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def _parse_log_level(level_str: str) -> int:
    """Map a SPEECHLENS_LOG_LEVEL value to a level; anything unrecognized is INFO."""
    numeric = getattr(logging, level_str.upper(), None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def log_file_path(log_dir: Path) -> Path:
    """The run log kept under *log_dir*."""
    return log_dir / _LOG_SUBDIR / _LOG_FILENAME


def _file_handler(log_dir: Path) -> logging.Handler:
    path = log_file_path(log_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8",
    )
    handler.setLevel(_parse_log_level(os.environ.get("SPEECHLENS_LOG_LEVEL", "INFO")))
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    *,
    log_dir: Path | None = None,
    verbose: bool = False,
) -> None:
    """Route analysis log records to stderr and, with *log_dir*, to the run log.

    Each CLI command calls this before loading the corpus.  Handlers from a
    previous call are closed and replaced, so invoking several commands in one
    process (as the tests do) never duplicates output.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    # Handlers filter on their own; the root passes everything through
    root.setLevel(logging.DEBUG)

    terminal = logging.StreamHandler()
    terminal.setLevel(logging.DEBUG if verbose else logging.WARNING)
    terminal.setFormatter(logging.Formatter(_TERMINAL_FORMAT))
    root.addHandler(terminal)

    if log_dir is not None:
        root.addHandler(_file_handler(log_dir))
