"""Clients for source repository metadata."""
