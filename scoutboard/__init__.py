"""Scoutboard: pipeline boards and reminders for a sports agency."""

__version__ = "1.0.0"
