"""Console logging setup using rich.

Library modules only create loggers; applications call
:func:`configure_logging` once to attach handlers to the ``jira_rest`` logger.
"""

import logging
from pathlib import Path
from typing import Any, Protocol, cast

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

SUCCESS = 25
NOTICE = 21
LOGGER_NAME = "jira_rest"


class ExtendedLogger(Protocol):
    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def info(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def success(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def notice(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None: ...


LOGGING_THEME = Theme(
    {
        "logging.level.debug": "dim",
        "logging.level.info": "blue",
        "logging.level.notice": "cyan",
        "logging.level.warning": "bold yellow",
        "logging.level.error": "bold red",
        "logging.level.critical": "bold red on white",
        "logging.level.success": "bold green",
    },
)

console = Console(theme=LOGGING_THEME)


def _success(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
    if self.isEnabledFor(SUCCESS):
        kwargs["extra"] = kwargs.get("extra", {})
        kwargs["extra"]["markup"] = True
        self._log(SUCCESS, f"[success]{message}[/]", args, stacklevel=2, **kwargs)


def _notice(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
    if self.isEnabledFor(NOTICE):
        self._log(NOTICE, message, args, stacklevel=2, **kwargs)


def numeric_level(level: str) -> int:
    """Translate a level name, including ``NOTICE`` and ``SUCCESS``."""
    match level.upper():
        case "NOTICE":
            return NOTICE
        case "SUCCESS":
            return SUCCESS
        case name:
            return getattr(logging, name, logging.INFO)


def configure_logging(level: str = "INFO", log_file: str | Path | None = None) -> ExtendedLogger:
    """Configure the ``jira_rest`` logger with rich console output.

    Args:
        level: Logging level (DEBUG, NOTICE, INFO, SUCCESS, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a log file

    Returns:
        Configured logger instance

    """
    logging.addLevelName(SUCCESS, "SUCCESS")
    logging.addLevelName(NOTICE, "NOTICE")
    setattr(logging.Logger, "success", _success)
    setattr(logging.Logger, "notice", _notice)

    threshold = numeric_level(level)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
            show_time=True,
            show_level=True,
            log_time_format="[%X.%f]",
        ),
    ]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"),
        )
        file_handler.setLevel(threshold)
        handlers.append(file_handler)

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(threshold)
    logger.propagate = False

    logger.debug("Logging configured at %s", logging.getLevelName(threshold))
    return cast(ExtendedLogger, logger)
