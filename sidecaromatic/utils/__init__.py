"""Shared helpers: logging setup, console output and the error taxonomy."""
