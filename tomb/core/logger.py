"""
Logging System for Tomb Hunt
Provides centralized logging with file output and level controls
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from tomb.core.constants import LOG_DIR


class DungeonContextFilter(logging.Filter):
    """Stamps every record with the dungeon currently being played."""

    def __init__(self):
        super().__init__()
        self.fields = {}

    def filter(self, record: logging.LogRecord) -> bool:
        record.dungeon = " ".join(f"{k}={v}" for k, v in self.fields.items()) or "-"
        return True


class GameLogger:
    _instance: Optional['GameLogger'] = None

    def __init__(self, log_dir: str = LOG_DIR, log_level: int = logging.INFO):
        if GameLogger._instance is not None:
            raise RuntimeError("GameLogger is a singleton. Use get_logger() instead.")

        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = self.log_dir / f"tomb_hunt_{timestamp}.log"

        self.logger = logging.getLogger("TombHunt")
        self.logger.setLevel(log_level)
        self.logger.propagate = False

        if self.logger.handlers:
            for handler in list(self.logger.handlers):
                handler.close()
            self.logger.handlers.clear()

        file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)

        formatter = logging.Formatter(
            '[%(asctime)s] [%(levelname)s] [%(name)s] [%(dungeon)s] %(message)s',
            datefmt='%H:%M:%S'
        )
        self.context = DungeonContextFilter()
        for handler in (file_handler, console_handler):
            handler.setFormatter(formatter)
            handler.addFilter(self.context)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

        GameLogger._instance = self
        self.debug("Logger initialized")

    def debug(self, message: str):
        self.logger.debug(message)

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str, exc_info: bool = False):
        self.logger.error(message, exc_info=exc_info)

    def critical(self, message: str, exc_info: bool = False):
        self.logger.critical(message, exc_info=exc_info)

    def set_context(self, **fields):
        """Tag subsequent records, e.g. set_context(seed=7, size="15x15")."""
        self.context.fields = dict(fields)

    def clear_context(self):
        self.context.fields = {}

    @classmethod
    def get_instance(cls) -> 'GameLogger':
        if cls._instance is None:
            cls._instance = GameLogger()
        return cls._instance

    @classmethod
    def shutdown(cls):
        if cls._instance:
            for handler in list(cls._instance.logger.handlers):
                handler.close()
            cls._instance.logger.handlers.clear()
            cls._instance = None


def get_logger() -> GameLogger:
    return GameLogger.get_instance()


def init_logger(log_dir: str = LOG_DIR, log_level: int = logging.INFO):
    if GameLogger._instance is None:
        GameLogger(log_dir, log_level)
    return get_logger()
