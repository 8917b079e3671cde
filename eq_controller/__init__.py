"""Keyboard focus-order controller for the graphic EQ dialog."""

__version__ = "0.3.0"
