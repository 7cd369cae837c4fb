import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from cafe_map.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CafeMapLogger:
    """
    Backend logger: a rotating file under LOG_DIR plus the console.
    Handlers are attached once per logger name, so re-imports and test
    reloads do not duplicate lines.
    """

    def __init__(self, name: str = "cafe_map", level: int = logging.INFO,
                 log_directory: str = "logs", log_file: str = "cafe_map.log"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        if not self.logger.handlers:
            self._attach_handlers(level, Path(log_directory) / log_file)

    def _attach_handlers(self, level: int, log_path: Path):
        formatter = logging.Formatter(LOG_FORMAT)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_path, backupCount=5, maxBytes=1024 * 1024 * 10, encoding="utf-8"
            )
        except OSError as e:
            self.logger.warning(f"Logging to console only, cannot write {log_path}: {e}")
            return

        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)

    def log(self, level: int, message: str, extra: dict = None):
        """Logs message, appending extra as key=value pairs."""
        if extra:
            details = ", ".join(f"{key}={value}" for key, value in extra.items())
            message = f"{message} | {details}"
        self.logger.log(level, message)


logs = CafeMapLogger(level=settings.LOGGER, log_directory=settings.LOG_DIR)
