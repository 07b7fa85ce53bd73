"""Version information for Fincheck."""

__version__ = "1.0.0"
