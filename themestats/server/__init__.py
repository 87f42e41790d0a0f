"""HTTP surface of the themes API."""
