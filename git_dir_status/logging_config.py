"""Logging configuration for git-dir-status"""
import logging
import sys
from pathlib import Path
from typing import Optional

PACKAGE_PREFIX = 'git_dir_status.'
LOG_DIR_NAME = '.git-dir-status'
LOG_FILE_NAME = 'git-dir-status.log'

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
SHORT_FORMAT = '[%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name when stderr is a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno)
        if not color or not sys.stderr.isatty():
            return super().format(record)
        # Colour a copy so other handlers still see the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def get_log_file() -> Path:
    """Location of the log file written in TUI and debug mode."""
    return Path.home() / LOG_DIR_NAME / LOG_FILE_NAME


def _console_level(verbose: bool, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def _file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, mode='w')  # One listing session per file
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(fmt=DETAILED_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _console_handler(level: int, debug: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if debug:
        handler.setFormatter(ColoredFormatter(fmt=DETAILED_FORMAT, datefmt=DATE_FORMAT))
    else:
        handler.setFormatter(ColoredFormatter(fmt=SHORT_FORMAT))
    return handler


def setup_logging(
    verbose: bool = False,
    debug: bool = False,
    tui_mode: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    """
    Configure logging for the application.

    Failed status refreshes are logged as warnings, so they reach the
    console by default. The TUI owns the terminal, so in TUI mode everything goes to
    the log file instead.

    Args:
        verbose: If True, show INFO level messages
        debug: If True, show DEBUG level messages and also write the log file
        tui_mode: If True, log only to the file
        log_file: Override the log file location
    """
    level = _console_level(verbose, debug)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = []
    if tui_mode or debug:
        handlers.append(_file_handler(log_file or get_log_file()))
    if not tui_mode:
        handlers.append(_console_handler(level, debug))

    root_logger.setLevel(min(h.level for h in handlers))
    for handler in handlers:
        root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module, named without the package prefix.

    Args:
        name: Name of the module (typically __name__)

    Returns:
        Logger instance, e.g. "services.probe" for git_dir_status.services.probe
    """
    if name.startswith(PACKAGE_PREFIX):
        name = name[len(PACKAGE_PREFIX):]
    return logging.getLogger(name)
