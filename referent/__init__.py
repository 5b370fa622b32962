"""Referent: AI helpers for reading web articles."""

__version__ = "0.1.0"
