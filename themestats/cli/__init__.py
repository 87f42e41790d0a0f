"""Command-line interface for the themes API."""
