"""Bundled data files for repoctl."""
