"""HTTP API for the reading recommendation service."""
