"""
Logging configuration for the contact service.

``setup_logging`` attaches a console handler (and a file handler when
``LOG_FILE`` is set) to the root logger exactly once.  Directory
operations log through ``logging.getLogger(__name__)`` in each module:
mutations at INFO, lost version races and stale handles at WARNING and
collaborator failures with a traceback.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO for a request-per-line service.
_NOISY_LOGGERS = ("urllib3", "requests", "httpx")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``), case
        insensitive.  Unknown names fall back to INFO.
    logfile : Optional[str]
        Optional path of a log file, resolved against the working
        directory.
    """
    root = logging.getLogger()
    if root.handlers:
        # Configured already (test runner, uvicorn or a second create_app call).
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
