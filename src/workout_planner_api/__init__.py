"""Workout program editing, scheduling and library persistence."""

__version__ = "0.1.0"
