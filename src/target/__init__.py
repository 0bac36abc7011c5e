"""Target normalization and probing."""
