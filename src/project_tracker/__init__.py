"""Project Tracker: a small CLI for tracking projects, tasks and progress."""

__version__ = "0.2.0"
