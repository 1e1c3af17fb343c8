"""API JSON v1."""
