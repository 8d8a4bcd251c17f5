"""Logging setup and utilities."""

import logging

from rich.console import Console
from rich.logging import RichHandler

__all__ = [
    "LogObjects",
    "get_logger",
    "init_logger",
]


class LogObjects:
    """Reusable objects for loggers."""

    handlers: list[logging.Handler] = []


def init_logger(filename: str | None = None, level: int = logging.WARNING) -> None:
    """Install the shared handlers on the package logger.

    Args:
        filename: Optional filename to log to
        level: Level of the package logger
    """
    root = logging.getLogger("argosy")
    for handler in LogObjects.handlers:
        root.removeHandler(handler)
    LogObjects.handlers.clear()

    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"))
        LogObjects.handlers.append(file_handler)
    LogObjects.handlers.append(RichHandler(console=Console(stderr=True), show_path=level <= logging.DEBUG, markup=False))

    for handler in LogObjects.handlers:
        root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the package logger.

    Args:
        name (str): logger's name, e.g. "dispatcher"

    Returns:
        The logger instance
    """
    return logging.getLogger(f"argosy.{name}")
