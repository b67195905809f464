"""Terminal editor for SSH config host profiles."""

__version__ = "0.1.0"
