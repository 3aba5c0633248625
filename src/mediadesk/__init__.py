"""mediadesk: media request tracking service."""

__version__ = "0.1.0"
