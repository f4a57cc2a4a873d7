"""Page expiry notification engine."""

__version__ = "0.1.0"
