import logging
import os

from devbrief.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

def get_module_logger(module_name: str, log_file: str):
    """Return a logger writing to ``log_file`` (relative paths land under LOG_DIR)."""
    logger = logging.getLogger(module_name)
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # Prevent adding multiple handlers if logger is called multiple times
    if not logger.handlers:
        if not os.path.isabs(log_file):
            log_file = os.path.join(settings.LOG_DIR, log_file)
        os.makedirs(os.path.dirname(log_file), exist_ok=True)
        handler = logging.FileHandler(log_file)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
