"""Shared domain building blocks: base classes, exceptions and the clock."""
