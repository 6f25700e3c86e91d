import logging
import sys
from typing import Optional, Union

# Extra levels used by the indexer and the feed generator
TRACE_LEVEL = 5
PROGRESS_LEVEL = 22
SUCCESS_LEVEL = 25
NOTICE_LEVEL = 35
FAILURE_LEVEL = 45

logging.addLevelName(TRACE_LEVEL, "TRACE")
logging.addLevelName(PROGRESS_LEVEL, "PROGRESS")
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")
logging.addLevelName(NOTICE_LEVEL, "NOTICE")
logging.addLevelName(FAILURE_LEVEL, "FAILURE")

DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Formatter that wraps each record in an ANSI colour chosen by level."""

    COLORS = {
        "TRACE": "\033[90m",  # Gray
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "PROGRESS": "\033[94m",  # Bright Blue
        "SUCCESS": "\033[92m",  # Bright Green
        "WARNING": "\033[33m",  # Yellow
        "NOTICE": "\033[96m",  # Bright Cyan
        "ERROR": "\033[31m",  # Red
        "FAILURE": "\033[91m",  # Bright Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        stream=None,
    ):
        super().__init__(fmt, datefmt)
        self.stream = stream if stream is not None else sys.stderr

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        # Plain text when piped into a file or CI log
        isatty = getattr(self.stream, "isatty", None)
        if isatty is not None and isatty():
            level_color = self.COLORS.get(record.levelname, "")
            return f"{level_color}{message}{self.COLORS['RESET']}"

        return message


def setup_colored_logging(level: Union[int, str] = logging.INFO, stream=None) -> None:
    """
    Configure the root logger with a single coloured stream handler.

    Args:
        level: Logging level, either numeric or a level name such as "DEBUG"
        stream: Output stream (default: sys.stderr)
    """
    stream = stream if stream is not None else sys.stderr
    formatter = ColoredFormatter(
        fmt=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT, stream=stream
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Drop previous handlers so repeated CLI runs do not duplicate output
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


class EnhancedLogger:
    """Logger wrapper exposing the extra levels as methods."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def trace(self, msg, *args, **kwargs):
        """
        Finer than DEBUG (level 5): one line per parsed front-matter key and
        one per debounced search superseded by newer input. Shown only when
        the handler level is lowered to TRACE.
        """
        self._logger.log(TRACE_LEVEL, msg, *args, **kwargs)

    def debug(self, msg, *args, **kwargs):
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        self._logger.info(msg, *args, **kwargs)

    def progress(self, msg, *args, **kwargs):
        """Progress updates during an index build."""
        self._logger.log(PROGRESS_LEVEL, msg, *args, **kwargs)

    def success(self, msg, *args, **kwargs):
        """Finished artifact, e.g. the feed generator's summary of written files."""
        self._logger.log(SUCCESS_LEVEL, msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        self._logger.warning(msg, *args, **kwargs)

    def notice(self, msg, *args, **kwargs):
        """
        Above WARNING (level 35) for configuration that still works but
        produces wrong output, such as feeds built while SITE_URL is left
        at its placeholder default.
        """
        self._logger.log(NOTICE_LEVEL, msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        self._logger.error(msg, *args, **kwargs)

    def failure(self, msg, *args, **kwargs):
        """Fatal condition that ends a batch run."""
        self._logger.log(FAILURE_LEVEL, msg, *args, **kwargs)

    def critical(self, msg, *args, **kwargs):
        self._logger.critical(msg, *args, **kwargs)

    def __getattr__(self, name):
        return getattr(self._logger, name)


def get_colored_logger(name: str) -> EnhancedLogger:
    """
    Get an enhanced logger for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        EnhancedLogger with the custom level methods
    """
    return EnhancedLogger(logging.getLogger(name))
