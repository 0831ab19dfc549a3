"""Locate, rank and provision Java installations."""

__version__ = "0.1.0"
