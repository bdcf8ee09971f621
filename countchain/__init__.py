"""countchain: chains of countdown timers typed as plain text."""

__version__ = "0.1.0"
