import logging
from logging.handlers import RotatingFileHandler
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    log_formatter = logging.Formatter(LOG_FORMAT)

    app_logger = logging.getLogger()
    app_logger.setLevel(level)

    # Console handler (avoid adding twice when the app factory runs again)
    if not any(type(h) is logging.StreamHandler for h in app_logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(log_formatter)
        app_logger.addHandler(console_handler)

    if log_file:
        log_file = os.path.abspath(log_file)
        os.makedirs(os.path.dirname(log_file), exist_ok=True)
        if not any(
            isinstance(h, RotatingFileHandler) and h.baseFilename == log_file
            for h in app_logger.handlers
        ):
            file_handler = RotatingFileHandler(
                log_file, maxBytes=10 * 1024 * 1024, backupCount=5
            )
            file_handler.setFormatter(log_formatter)
            app_logger.addHandler(file_handler)

    # uvicorn already prints its own access lines; ours go to storefront.access
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
