"""Organize files and clean up stale project folders safely."""

__version__ = "0.1.0"
