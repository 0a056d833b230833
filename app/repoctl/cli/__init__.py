"""Command-line interface for repoctl."""
