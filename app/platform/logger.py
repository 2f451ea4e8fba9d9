import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FILE_NAME = "site_tools.log"


def _log_file_path(log_dir: str) -> str:
    if not os.path.isabs(log_dir):
        log_dir = os.path.join(os.getcwd(), log_dir)
    if not os.path.exists(log_dir):
        os.makedirs(log_dir, exist_ok=True)
    return os.path.join(log_dir, LOG_FILE_NAME)


def get_logger(name: str):
    """
    Creates a logger instance that writes to console AND a file.
    DEBUG=true in the environment lowers the level to DEBUG.
    """
    from app.platform.config import get_settings

    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    settings = get_settings()
    level = logging.DEBUG if settings.DEBUG else logging.INFO
    logger.setLevel(level)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    file_handler = RotatingFileHandler(_log_file_path(settings.LOG_DIR), maxBytes=10_000_000, backupCount=5)
    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger
