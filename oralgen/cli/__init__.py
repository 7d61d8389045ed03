"""Command-line interface for OralGen."""
