"""Personal game catalog backed by a Google Sheet with IGDB search."""

__version__ = "0.1.0"
