"""Logging configuration for Home Chores."""

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "home-chores.log"


class _ConsoleNoiseFilter(logging.Filter):
    """Keep the console readable.

    Our own records pass; third-party records only at ERROR and above.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("home_chores"):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path,
    console_level: int | None = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path | None:
    """Configure the root logger.

    Args:
        log_dir: Directory for the log file; created if missing.
        console_level: Level for the stderr handler, or None for no
            console output (the Textual UI owns the terminal).
        file_level: Level for the file handler.

    Returns:
        Path of the log file, or None if it could not be created.

    Call this once, before the first log record.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if console_level is not None:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(console_level)
        ch.setFormatter(fmt)
        ch.addFilter(_ConsoleNoiseFilter())
        root.addHandler(ch)

    log_file: Path | None = Path(log_dir).expanduser() / LOG_FILE_NAME
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
    except OSError as e:
        log_file = None
        if console_level is not None:
            logging.getLogger(__name__).warning("File logging disabled: %s", e)
    else:
        fh.setLevel(file_level)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
    return log_file
