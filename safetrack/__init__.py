"""SafeTrack tourist safety backend services."""

__version__ = "0.1.0"
