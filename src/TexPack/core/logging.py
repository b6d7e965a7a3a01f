"""Logging setup for texture extraction."""

import logging
import logging.handlers
import os
import threading

logger = logging.getLogger("texpack")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
# 5 MB per file, 3 rotated backups
_LOG_MAX_BYTES = 5 * 1024 * 1024
_LOG_BACKUP_COUNT = 3
_setup_lock = threading.Lock()


def _resolve_level(level) -> int:
    numeric = getattr(logging, str(level).upper(), None)
    if isinstance(numeric, int):
        return numeric
    logger.warning("Invalid log level '%s', defaulting to INFO", level)
    return logging.INFO


def _rotating_handler(log_file: str) -> logging.Handler:
    os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        log_file, maxBytes=_LOG_MAX_BYTES, backupCount=_LOG_BACKUP_COUNT,
        encoding="utf-8",
    )


def _has_file_handler(target: logging.Logger, log_file: str) -> bool:
    wanted = os.path.abspath(log_file)
    return any(
        getattr(h, "baseFilename", None) == wanted
        for h in target.handlers
        if isinstance(h, logging.FileHandler)
    )


def setup_logging(level: str = "INFO", log_file: str = None, force: bool = False):
    """Configure console and optional rotating-file logging.

    When the root logger already has handlers (TexPack running inside a host
    application) and ``force`` is false, only the ``texpack`` logger is
    touched: its level is set and the file handler, if any, is attached to it
    once.
    """
    with _setup_lock:
        numeric_level = _resolve_level(level)
        root = logging.getLogger()

        if force or not root.handlers:
            handlers = [logging.StreamHandler()]
            if log_file:
                handlers.append(_rotating_handler(log_file))
            logging.basicConfig(
                level=numeric_level, format=LOG_FORMAT, handlers=handlers, force=force,
            )
            logger.debug("Logging initialized (force=%s, handlers=%d)", force, len(handlers))
            return

        logger.setLevel(numeric_level)
        if log_file and not _has_file_handler(logger, log_file):
            handler = _rotating_handler(log_file)
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(handler)
            logger.info("Adding file handler: %s", handler.baseFilename)
