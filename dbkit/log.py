"""Logging for dbkit.

Statement traces, host failures and the default ``on_error`` report all go
through the standard ``logging`` module. :func:`configure_logging` picks the
handlers from :class:`~dbkit.config.Settings`:

* development: colored console output only
* production: console plus a rotating ``dbkit.log`` file
* testing: console plus ``test.log``, truncated on each run
"""

import logging
import logging.handlers
import sys
from pathlib import Path

import colorlog

from .config import Settings, settings

PLAIN_FORMAT = (
    "%(asctime)s %(levelname)8s %(message)s (%(name)s@%(filename)s:%(lineno)d)"
)
COLOR_FORMAT = (
    "%(asctime)s %(log_color)s%(levelname)8s%(reset)s %(message)s "
    "\033[90m(%(name)s@%(filename)s:%(lineno)d)\033[0m"
)
DATE_FORMAT = "%m-%d %H:%M:%S"
LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

DEFAULT_LOG_DIR = Path("logs")
ROTATE_BYTES = 5 * 1024 * 1024
ROTATE_BACKUPS = 4


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def _console_handler(format_string: str | None, use_colors: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    if use_colors:
        handler.setFormatter(
            colorlog.ColoredFormatter(
                format_string or COLOR_FORMAT,
                datefmt=DATE_FORMAT,
                log_colors=LEVEL_COLORS,
            )
        )
    else:
        handler.setFormatter(
            logging.Formatter(format_string or PLAIN_FORMAT, datefmt=DATE_FORMAT)
        )
    return handler


def _file_handler(log_dir: Path, is_test_env: bool) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler: logging.Handler
    if is_test_env:
        handler = logging.FileHandler(log_dir / "test.log", mode="w", encoding="utf-8")
    else:
        handler = logging.handlers.RotatingFileHandler(
            log_dir / "dbkit.log",
            maxBytes=ROTATE_BYTES,
            backupCount=ROTATE_BACKUPS,
            encoding="utf-8",
        )
    handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
    use_colors: bool = True,
    enable_file_logging: bool = False,
    log_dir: Path | None = None,
    is_test_env: bool = False,
) -> None:
    """Replace the root logger's handlers.

    Args:
        level: Logging level, as an int or a name such as ``"DEBUG"``
        format_string: Console format; defaults to the colored or plain one
        use_colors: Whether console output goes through colorlog
        enable_file_logging: Whether to also write a log file
        log_dir: Directory for log files (``logs`` or ``logs/test``)
        is_test_env: Write ``test.log`` instead of the rotating ``dbkit.log``
    """
    handlers = [_console_handler(format_string, use_colors)]

    if enable_file_logging:
        if log_dir is None:
            log_dir = DEFAULT_LOG_DIR / "test" if is_test_env else DEFAULT_LOG_DIR
        handlers.append(_file_handler(log_dir, is_test_env))

    logging.basicConfig(level=_resolve_level(level), handlers=handlers, force=True)


def setup_production_logging(
    level: int | str = logging.INFO, log_dir: Path | None = None
) -> None:
    """Console plus a rotating ``dbkit.log``."""
    setup_logging(level=level, enable_file_logging=True, log_dir=log_dir)


def setup_test_logging(
    level: int | str = logging.DEBUG, log_dir: Path | None = None
) -> None:
    """Console plus a ``test.log`` that each run overwrites."""
    setup_logging(
        level=level, enable_file_logging=True, log_dir=log_dir, is_test_env=True
    )


def configure_logging(
    config: Settings | None = None, log_dir: Path | None = None
) -> None:
    """Set up logging for the environment named in ``config``.

    Args:
        config: Settings to read; defaults to the global ``settings``
        log_dir: Overrides the default log directory
    """
    if config is None:
        config = settings

    if config.is_production:
        setup_production_logging(config.log_level, log_dir)
    elif config.is_testing:
        setup_test_logging(config.log_level, log_dir)
    else:
        setup_logging(level=config.log_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)
    """
    return logging.getLogger(name)
