"""Shopfloor production operation scheduler."""

__version__ = "0.1.0"
