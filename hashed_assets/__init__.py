"""Rewrite HTML documents so local assets are referenced by content hash."""

__version__ = "0.1.0"
