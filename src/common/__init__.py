"""Shared helpers: HTTP access, logging and error types."""
