"""Rust backend: size analysis, type mapping and code emission."""
