"""
Logging setup.

Every module logs through ``logging.getLogger(__name__)``; this module only
configures the root handler once at application start.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging. Safe to call more than once."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("placement_api").setLevel(level.upper())
    # pymongo is chatty at DEBUG
    logging.getLogger("pymongo").setLevel(logging.WARNING)
