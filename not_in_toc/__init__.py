"""Consistency checks for DocFX documentation trees."""

__version__ = "0.1.0"
