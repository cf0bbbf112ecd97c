"""Synchronize 42 cursus users flagged by the blackhole into a local store."""

__version__ = "0.1.0"
