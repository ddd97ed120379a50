"""
Logging setup for scripts using the library.

The library itself only creates module loggers; nothing is configured at
import time.
"""

import logging
import sys

FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level="INFO"):
    """
    Send log records of ``level`` and above to stdout.

    Replaces any handlers already installed on the root logger.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(FORMAT))
    root.handlers.clear()
    root.addHandler(handler)
