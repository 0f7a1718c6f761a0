"""Event Tracker - personal calendar event API."""

__version__ = "0.1.0"
