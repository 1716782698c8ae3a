"""Setlister - setlist parsing and song catalog matching service."""

__version__ = "0.1.0"
