"""Logging setup: rotating file log, plus stderr when debugging.

gpg-agent ignores our stderr, so the file log is the main record of what
happened. Nothing here ever sees a secret; callers redact data lines.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "pinentry-anyrun"


def configure_logging(debug: bool = False, log_path: Optional[Path] = None) -> logging.Logger:
    """Install handlers on the package logger, replacing earlier ones."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_path is not None:
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_path, maxBytes=1024 * 1024, backupCount=3
            )
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            logger.addHandler(file_handler)
        except OSError:
            pass  # Can't write to log file, continue without

    if debug:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(logging.Formatter("[pinentry-anyrun] %(message)s"))
        logger.addHandler(stderr_handler)

    return logger
