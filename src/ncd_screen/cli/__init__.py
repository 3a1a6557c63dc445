"""Command-line interface for NCD Screen."""
