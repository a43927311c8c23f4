"""Trading-journal statistics library."""

__version__ = "0.1.0"
