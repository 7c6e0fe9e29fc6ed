"""Utility functions for logging setup."""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LOG_THEME = Theme({
    "logging.level.success": "bold green",
})


def create_console(**kwargs) -> Console:
    """Create a console that knows how to style the SUCCESS level."""
    return Console(theme=LOG_THEME, **kwargs)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: Optional[Console] = None
) -> logging.Logger:
    """Set up logging with Rich console output and an optional sync log file."""
    
    if console is None:
        console = create_console()
    
    logger = logging.getLogger("rcsync")
    logger.setLevel(getattr(logging, level.upper()))
    
    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    
    console_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(logging.Formatter(fmt="%(message)s"))
    logger.addHandler(console_handler)
    
    if log_file:
        add_file_handler(logger, log_file)
    
    return logger


def add_file_handler(logger: logging.Logger, log_file: Path) -> logging.Handler:
    """Append log records to the sync log as ``[timestamp] [LEVEL] message``."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    
    file_format = logging.Formatter(
        fmt="[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)
    
    return file_handler


def get_logger(name: str = "rcsync") -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
