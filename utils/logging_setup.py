"""Root logger configuration shared by the web server and the CLI"""

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "info", debug: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the root logger

    Args:
        level: Log level name (debug, info, warning, error)
        debug: Force DEBUG level regardless of ``level``
        log_file: Optional path of a log file to append to

    Returns:
        The configured root logger
    """
    root_logger = logging.getLogger()
    resolved = logging.DEBUG if debug else getattr(logging, str(level).upper(), logging.INFO)
    root_logger.setLevel(resolved)

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(resolved)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = os.path.abspath(log_file)
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setLevel(resolved)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        root_logger.debug(f"Logging appended to {log_path}")

    # httpx logs every request at INFO, which is noise outside debug mode
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)

    return root_logger
