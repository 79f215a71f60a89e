"""Civic Commons: location-scoped communities and their membership lifecycle."""

__version__ = "0.1.0"
