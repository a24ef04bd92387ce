# utils/logger.py
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
_DEFAULT_FILE = os.getenv("LOG_FILE", "logs/status_bot.log")
_DEFAULT_MAX_MB = int(os.getenv("LOG_MAX_MB", "5"))      # 5 MB
_DEFAULT_BACKUPS = int(os.getenv("LOG_BACKUPS", "5"))    # keep 5 rotated files

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_QUIET_LIBS = ("aiohttp", "asyncio", "urllib3")


def setup_logger(name: str,
                 level: Union[str, int] = _DEFAULT_LEVEL,
                 log_file: Optional[str] = _DEFAULT_FILE,
                 to_console: bool = True) -> logging.Logger:
    """
    Create/get a logger with console and rotating-file handlers.
    Re-using the same name returns the same configured logger (no duplicate handlers).
    Pass log_file=None (or LOG_FILE="") to log to the console only.
    """
    logger = logging.getLogger(name)
    if logger.handlers:  # already configured
        return logger

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = []
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_file,
            maxBytes=_DEFAULT_MAX_MB * 1024 * 1024,
            backupCount=_DEFAULT_BACKUPS,
            encoding="utf-8",
        ))
    if to_console:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        logger.addHandler(handler)

    # request/response chatter from the HTTP stack
    for lib in _QUIET_LIBS:
        logging.getLogger(lib).setLevel(logging.WARNING)

    return logger
