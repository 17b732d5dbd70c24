"""Serial helper for lift-table controllers: frame protocol, line settings, sessions and title-bar state."""

__version__ = "0.1.0"