"""extsync - export and reinstall editor extensions and settings."""

__version__ = "0.3.0"
