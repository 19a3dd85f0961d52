import logging
import os
import sys

from pythonjsonlogger.json import JsonFormatter

_configured = False


def setup_logging():
    """
    Configures and sets up structured JSON logging for the application.

    This function initializes a JSON formatter that includes timestamp, level,
    logger name and message. Records are written to stderr because the MCP
    stdio transport owns stdout; any byte written there that is not a
    protocol frame corrupts the session. The root logger is configured once
    per process, later calls only return it.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    global _configured

    root_logger = logging.getLogger()
    if _configured:
        return root_logger

    formatter = JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)

    root_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    root_logger.handlers = []
    root_logger.addHandler(stream_handler)

    _configured = True
    return root_logger
