"""Card-session controller for a cash machine."""

__version__ = "1.0.0"
