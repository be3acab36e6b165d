"""Shift Manager — scheduling, invoicing and workflow back-end."""

__version__ = "1.0.0"
