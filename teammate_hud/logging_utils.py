from __future__ import annotations

import logging
from typing import Optional

LOGGER_NAME = "SCPTeammateHUD"
LOG_TAG = "SCPTeammateHUD"


class HostLogHandler(logging.Handler):
    """Forwards plugin records to the host server's logger.

    Falls back to the root logger when the host does not expose one.
    """

    def __init__(self, host_logger: Optional[logging.Logger] = None) -> None:
        super().__init__(logging.DEBUG)
        self.host_logger = host_logger

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        target = self.host_logger if self.host_logger is not None else logging.getLogger()
        if target.isEnabledFor(record.levelno):
            target.log(record.levelno, message)


def configure_logger(host_logger: Optional[logging.Logger] = None, debug: bool = False) -> logging.Logger:
    """Install the host bridge once and set the level from the ``debug`` flag."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    handler = next((h for h in logger.handlers if isinstance(h, HostLogHandler)), None)
    if handler is None:
        handler = HostLogHandler(host_logger)
        formatter = logging.Formatter(f"[%(asctime)s] [{LOG_TAG}] %(message)s", "%H:%M:%S")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    else:
        handler.host_logger = host_logger
    logger.propagate = False
    return logger
