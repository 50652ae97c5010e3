"""Logging configuration for filter parsing events."""

import logging
import sys

from propfilter.core.config import get_settings

settings = get_settings()

# Create logger for package events
app_logger = logging.getLogger("propfilter")
app_logger.setLevel(settings.LOG_LEVEL)

# Create console handler with structured format
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(settings.LOG_LEVEL)

formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
console_handler.setFormatter(formatter)

# Add handler to logger if not already added
if not app_logger.handlers:
    app_logger.addHandler(console_handler)


def log_filter_decode_failure(filter_name: str, raw_value: str, error: Exception) -> None:
    """
    Log a filter value that could not be percent-decoded.

    Args:
        filter_name: Filter name without the request prefix.
        raw_value: Value as received from the parameter source.
        error: The decoding error.
    """
    app_logger.warning(
        f"Filter value could not be decoded, treating as empty - filter={filter_name}, "
        f"value={raw_value!r}, error={error}"
    )
