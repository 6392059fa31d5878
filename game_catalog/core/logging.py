"""
Logging utilities for the FastAPI application and the catalog services.

Provides a consistent logging format and configuration.
"""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    # googleapiclient logs every discovery lookup at INFO.
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


__all__ = ["configure_logging"]
