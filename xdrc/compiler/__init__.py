"""Compiler driver: configuration, pipeline and command-line interface."""
