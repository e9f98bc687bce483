"""
Logging setup
Console output plus rotating log files, all taken from the [logging] section
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Any, Optional

from seizuretrack.config.loader import ConfigLoader, get_app_home, get_config

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"

_configured = False


def parse_size(size: Any) -> int:
    """Parse "512KB", "10MB", "1GB" or a plain byte count"""
    text = str(size).strip().upper()
    for suffix, factor in (("KB", 1024), ("MB", 1024**2), ("GB", 1024**3)):
        if text.endswith(suffix):
            return int(text[: -len(suffix)]) * factor
    return int(text)


def _rotating_handler(
    path: Path, level: int, max_bytes: int, backup_count: int
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logging(config_loader: Optional[ConfigLoader] = None) -> None:
    """(Re)configure the root logger

    An empty ``error_file_name`` turns off the separate error log.
    """
    global _configured
    config = config_loader or get_config()

    level = config.get("logging.level", "INFO")
    logs_dir = Path(config.get("logging.logs_dir") or get_app_home() / "logs")
    file_name = config.get("logging.file_name", "seizuretrack.log")
    error_file_name = config.get("logging.error_file_name", "error.log")
    max_bytes = parse_size(config.get("logging.max_file_size", "10MB"))
    backup_count = int(config.get("logging.backup_count", 5))

    logs_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    root_logger.addHandler(
        _rotating_handler(logs_dir / file_name, logging.DEBUG, max_bytes, backup_count)
    )
    if error_file_name:
        root_logger.addHandler(
            _rotating_handler(logs_dir / error_file_name, logging.ERROR, max_bytes, backup_count)
        )

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Named logger; the first call configures logging from the global config"""
    if not _configured:
        setup_logging()
    return logging.getLogger(name)
