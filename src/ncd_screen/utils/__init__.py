"""Utility helpers shared across NCD Screen modules."""
