"""
Logging Configuration Module
============================

Centralized logging configuration for SG Sweeper.

- Console output through Rich
- Optional file logging
- Configurable log levels
- Quiet boto3/botocore loggers

Functions
---------
setup_logging
    Configure application-wide logging.
configure_lambda_logging
    Set levels without replacing the Lambda runtime handler.

Example
-------
>>> import logging
>>> from sg_sweeper.core.logging import setup_logging
>>>
>>> setup_logging(level="INFO")
>>> logger = logging.getLogger(__name__)
>>> logger.info("Starting cleanup")

See Also
--------
rich.logging : Rich library's logging handler.
"""

from __future__ import annotations

import logging
from typing import IO, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

# Default format for log messages
DEFAULT_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("boto3", "botocore", "urllib3")


def resolve_level(level: Union[str, int]) -> int:
    """Convert a level name such as ``"debug"`` to its numeric value."""
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[str] = None,
    rich_tracebacks: bool = True,
    console: Optional[Console] = None,
) -> None:
    """
    Configure application-wide logging.

    Replaces the root logger's handlers with a Rich console handler and,
    optionally, a file handler. Intended for terminal runs; Lambda uses
    :func:`configure_lambda_logging`.

    Parameters
    ----------
    level : str or int, default="INFO"
        Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    log_file : str, optional
        Path to log file.
    rich_tracebacks : bool, default=True
        Whether to use Rich for exception tracebacks.
    console : Console, optional
        Rich Console instance. If not provided, creates one on stderr.
    """
    level = resolve_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    rich_console = console or Console(stderr=True)
    console_handler = RichHandler(
        console=rich_console,
        show_time=True,
        show_path=False,
        rich_tracebacks=rich_tracebacks,
        tracebacks_show_locals=False,
        markup=False,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT)
        )
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.debug(
        f"Logging configured: level={logging.getLevelName(level)}, "
        f"file={log_file or 'None'}"
    )



def configure_lambda_logging(
    level: Union[str, int] = "INFO",
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Configure logging inside AWS Lambda.

    The Lambda runtime installs its own root handler, which sends each
    record to CloudWatch Logs as a single event. That handler is kept and
    only the level changes. When the root logger has no handler (a local
    invocation), a plain stream handler is added instead.

    Parameters
    ----------
    level : str or int, default="INFO"
        Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    stream : file-like, optional
        Stream for the fallback handler. Defaults to stderr.
    """
    level = resolve_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
