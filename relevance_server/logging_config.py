"""Logging setup for the server entrypoint."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Root logger with a single stream handler; safe to call more than once."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    logging.getLogger("relevance").setLevel(level.upper())
    logging.getLogger("relevance_server").setLevel(level.upper())
