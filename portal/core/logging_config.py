"""
Logging setup.

Call setup_logging() once at startup; modules use logging.getLogger(__name__).
"""

import logging
import sys

from portal.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def setup_logging(level: str = None) -> None:
    """Attach a single stdout handler to the root logger."""
    global _configured
    if _configured:
        return

    level_name = (level or get_settings().log_level).upper()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level_name, logging.INFO))

    # SQL echo goes through sqlalchemy's own logger
    if get_settings().debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    _configured = True
