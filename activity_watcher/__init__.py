"""Deadline and reminder tracking for assigned GitHub issues."""

__version__ = "0.1.0"
