"""Fixed-point test maps."""
