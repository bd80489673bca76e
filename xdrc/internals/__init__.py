"""Diagnostics, error catalog, parser front end and version helpers."""
