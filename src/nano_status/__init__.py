"""Network status dashboard for Nano nodes."""

__version__ = "0.1.0"
