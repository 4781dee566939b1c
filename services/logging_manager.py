"""
Logging manager to configure Python logging according to AppConfig.logging.
"""
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional
import os

from models.config import LoggingConfig, AppConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class LoggingManager:
    def __init__(self):
        self._configured = False

    def setup(self, cfg: AppConfig, level_override: Optional[str] = None) -> None:
        """Configure the root logger: console always, rotating file when configured."""
        if self._configured:
            return

        log_cfg: LoggingConfig = cfg.logging
        level_name = (level_override or log_cfg.level).upper()
        level = getattr(logging, level_name, logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        ch = logging.StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(ch)

        if log_cfg.file:
            log_dir = os.path.dirname(log_cfg.file)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir, exist_ok=True)

            fh = RotatingFileHandler(log_cfg.file, maxBytes=self._parse_size(log_cfg.max_size), backupCount=3, encoding="utf-8")
            fh.setLevel(level)
            fh.setFormatter(logging.Formatter(LOG_FORMAT))
            root_logger.addHandler(fh)

        self._configured = True

    @staticmethod
    def _parse_size(size_str: str) -> int:
        """Parse human-readable size (e.g., '10MB') into bytes."""
        s = str(size_str).strip().upper()
        try:
            if s.endswith("KB"):
                return int(float(s[:-2]) * 1024)
            if s.endswith("MB"):
                return int(float(s[:-2]) * 1024 * 1024)
            if s.endswith("GB"):
                return int(float(s[:-2]) * 1024 * 1024 * 1024)
            return int(s)
        except ValueError:
            return 10 * 1024 * 1024  # default 10MB
