"""Event Tracker test suite."""
