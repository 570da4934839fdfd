"""Capacity and booking reconciliation service for tours, cars and buses."""

__version__ = "1.0.0"
