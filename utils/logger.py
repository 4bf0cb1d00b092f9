"""Logging setup for the dashboard server."""

import logging
import sys

# Third-party loggers that duplicate our own request logging at INFO/DEBUG
NOISY_LOGGERS = ("urllib3", "httpx", "uvicorn.access")


def setup_logger(log_level: str = "INFO", name: str = "review_dashboard") -> logging.Logger:
    """
    Set up and configure the dashboard logger.

    Configures the root handler once with a readable format, then pins
    chatty HTTP libraries to WARNING so the "[API] GET ..." lines from the
    reviews client are the only per-request output unless DEBUG is asked for.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        name: Logger name (default: review_dashboard)

    Returns:
        logging.Logger: Configured logger instance
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )

    library_level = numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(library_level)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    return logger
