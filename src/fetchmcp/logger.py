"""Logging setup for fetchmcp.

Everything goes to stderr: under the stdio transport stdout carries the
JSON-RPC stream and must stay clean.
"""

import logging
import sys

from fetchmcp.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Single app logger that can be imported throughout the application
logger = logging.getLogger("fetchmcp")


def setup_logging(debug: bool | None = None) -> None:
    """Send log records to stderr and set the fetchmcp logger level.

    Third-party loggers stay at WARNING.

    Args:
        debug: Force DEBUG on or off; defaults to FETCHMCP_DEBUG.

    """
    if debug is None:
        debug = settings.fetchmcp_debug

    # Drop handlers left over from an earlier call
    logging.root.handlers = []
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, stream=sys.stderr)

    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)
    logger.info("fetchmcp logging initialized at %s level", logging.getLevelName(level))
