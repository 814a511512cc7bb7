"""Corrade group <-> Discord channel bridge."""

__version__ = "0.1.0"
