"""Analyses applied to resolved or unresolved versions."""
