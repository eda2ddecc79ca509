"""
Logging utilities built on the standard library logging package.

Console output goes to stderr; stdout is left to plan output.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "[%(levelname)s:%(name)s:%(filename)s:%(lineno)d] %(message)s"
FILE_LOG_FORMAT = "%(asctime)s " + LOG_FORMAT
LOGGER_NAMESPACE = "fd_wrapper"


def parse_level(level: Union[int, str]) -> int:
    """Accept either a logging constant or its name ("debug", "INFO", ...)."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    include_console: bool = True,
) -> None:
    """
    Configure root logging with console and optional file handlers.

    Repeated calls do not stack duplicate handlers.

    Args:
        level: Minimum log level to emit.
        log_file: Optional path to append log output.
        include_console: Whether to emit to stderr as well.
    """
    level = parse_level(level)
    logger = logging.getLogger()
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)

    if include_console and not any(
        isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr
        for h in logger.handlers
    ):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file = Path(os.path.abspath(log_file))
        log_file.parent.mkdir(parents=True, exist_ok=True)
        if not any(isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_file for h in logger.handlers):
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            logger.addHandler(file_handler)


def get_structured_logger(name: str) -> logging.Logger:
    """
    Get a component logger under the package namespace.

    Args:
        name: Component name, e.g. "PlanSession".

    Returns:
        logging.Logger: Logger named "fd_wrapper.<name>", propagating to root.
    """
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
