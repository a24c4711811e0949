"""Data access layer for a discussion forum stored in MySQL or SQLite."""

__version__ = "0.1.0"