"""
utils.logging_setup: Colored console logging for the preparation CLI
"""
import logging
import sys
from typing import Optional


class ColoredFormatter(logging.Formatter):
    """Formatter that wraps the level name in ANSI colors."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"

        formatted = super().format(record)

        # File handlers share the record, keep their output uncolored
        record.levelname = levelname

        return formatted


def configure_logger(verbose: int = 0, log_file: Optional[str] = None) -> None:
    """
    Configure the root logger for a batch run.

    Args:
        verbose: 0 logs INFO and up, 1 adds DEBUG, 2+ also shows logger
            names/line numbers and leaves Pillow's own logging untouched
        log_file: Optional path that receives every record at DEBUG level
    """
    # -v and above switch the console to DEBUG
    console_level = logging.INFO if verbose == 0 else logging.DEBUG

    # Root logger passes everything; handlers filter
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    # Repeated calls (tests, re-entry from main) must not stack handlers
    root_logger.handlers.clear()

    # Console handler with colors
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)

    # Logger name and line number only at -vv
    if verbose >= 2:
        console_format = "[%(asctime)s] %(levelname)s [%(name)s:%(lineno)d] %(message)s"
    else:
        console_format = "[%(asctime)s] %(levelname)s %(message)s"

    console_handler.setFormatter(ColoredFormatter(console_format, datefmt="%H:%M:%S"))
    root_logger.addHandler(console_handler)

    # File handler keeps full detail regardless of console verbosity
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_format = "[%(asctime)s] %(levelname)s [%(name)s:%(lineno)d] %(message)s"
        file_handler.setFormatter(logging.Formatter(file_format, datefmt="%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(file_handler)

        logging.info(f"Logging to file: {log_file}")

    # PIL logs every chunk it parses at DEBUG
    if verbose < 2:
        logging.getLogger("PIL").setLevel(logging.WARNING)

    logging.debug(f"Logging configured with verbosity level {verbose}")
