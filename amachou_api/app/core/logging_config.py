"""
Process-wide logging for the Amachou API.

Every module logs through ``logging.getLogger(__name__)``; this module
only installs the root handlers.  What ends up in the log:

* ``DEBUG``   one ``REST request to ...`` line per disease endpoint call
* ``INFO``    applied migrations, saved/deleted diseases, index rebuilds
* ``WARNING`` request validation failures
* ``ERROR``   bad-request alerts and unhandled exceptions (with traceback)

Set ``LOG_LEVEL`` to choose the threshold and ``LOG_FILE`` to mirror the
console output into a file.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _handler(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Install console (and optional file) handlers on the root logger.

    Does nothing when the root logger already has handlers, e.g. when
    uvicorn or pytest configured logging first or ``create_app`` runs
    more than once.  Unknown level names fall back to ``INFO``.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.addHandler(_handler(logging.StreamHandler()))
    if logfile:
        root.addHandler(_handler(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")))
