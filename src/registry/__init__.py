"""Providers for the shared upstream datasets."""
