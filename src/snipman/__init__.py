"""Terminal snippet manager."""

__version__ = "1.0.0"
