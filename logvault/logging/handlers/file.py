import logging
from logging.handlers import WatchedFileHandler
from pathlib import Path

from pydantic import BaseModel


class FileHandlerConfig(BaseModel):
    """Configuration for the run log file handler."""

    path: str | Path
    """File the run log is appended to."""
    encoding: str | None = "utf-8"
    """Encoding to use for the log file."""
    delay: bool = False
    """Delay the creation of the log file."""

    def get_handler(self, logger_name: str) -> logging.Handler:
        """Create a WatchedFileHandler so external rotation (logrotate) is picked up."""
        target = Path(self.path)
        target.parent.mkdir(parents=True, exist_ok=True)

        file_handler = WatchedFileHandler(
            filename=target,
            mode="a",
            encoding=self.encoding,
            delay=self.delay,
        )
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        return file_handler
