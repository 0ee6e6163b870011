"""HTTP API for taskflow."""
