"""Signed-request install and rating counters for community themes."""

__version__ = "0.1.0"
